"""Build constrained shortest-path traversal requests."""

import logging
from typing import Any, Mapping, Optional, Union

from . import PathFilters, TraversalRequest
from .compiler import FilterCompiler
from ..errors import InvalidFilterOperand
from ..schema import (
    CATEGORY_LABELS,
    PERSON, PERSON_ID, PERSON_CATEGORY,
    RELATIONSHIP_TYPES
)

logger = logging.getLogger(__name__)

PATH_VARIABLE = "p"
NODE_VARIABLE = "n"


def _check_person_id(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFilterOperand(
            PERSON_CATEGORY, name, f"expected int, got {type(value).__name__}"
        )
    return value


class PathQueryBuilder:
    """Composes category filters into one shortest-path Cypher query."""

    def __init__(self, compiler: Optional[FilterCompiler] = None):
        self.compiler = compiler or FilterCompiler(variable=NODE_VARIABLE)

    def build(
        self,
        first_person_id: int,
        second_person_id: int,
        filters: Union[PathFilters, Mapping[str, Any], None] = None
    ) -> TraversalRequest:
        """Build a shortest-path request between two people.

        Every intermediate node of a filtered category must satisfy that
        category's predicate. The two endpoint people are always allowed
        through the person filter.

        Args:
            first_person_id: person_id of the path start
            second_person_id: person_id of the path end
            filters: PathFilters or a mapping with person/movie/episode keys

        Returns:
            TraversalRequest with the query text and its parameters

        Raises:
            UnknownField, InvalidFilterOperand: on invalid filters, before
                any query is produced
        """
        first_person_id = _check_person_id("first_person_id", first_person_id)
        second_person_id = _check_person_id("second_person_id", second_person_id)
        if not isinstance(filters, PathFilters):
            filters = PathFilters.from_dict(filters)

        params = {
            "first_person_id": first_person_id,
            "second_person_id": second_person_id
        }
        predicates = {}
        conditions = []

        for category, mapping in filters.items():
            predicate = self.compiler.compile(category, mapping)
            if predicate is None:
                continue
            predicates[category] = predicate
            params.update(predicate.parameters)

            body = predicate.text
            if category == PERSON_CATEGORY:
                # The queried people are the path's subjects, not intermediaries
                body = (
                    f"({body}) OR {NODE_VARIABLE}.{PERSON_ID} IN "
                    "[$first_person_id, $second_person_id]"
                )
            label = CATEGORY_LABELS[category]
            conditions.append(
                f"all({NODE_VARIABLE} IN [x IN nodes({PATH_VARIABLE}) WHERE x:{label}] "
                f"WHERE {body})"
            )

        rel_types = "|".join(RELATIONSHIP_TYPES)
        query_parts = [
            f"MATCH (p1:{PERSON} {{{PERSON_ID}: $first_person_id}}), "
            f"(p2:{PERSON} {{{PERSON_ID}: $second_person_id}}), ",
            f"{PATH_VARIABLE} = shortestPath((p1)-[:{rel_types}*]-(p2))"
        ]
        if conditions:
            query_parts.append("WHERE " + "\nAND ".join(conditions))
        query_parts.append(f"RETURN {PATH_VARIABLE}")

        cypher = "\n".join(query_parts)
        logger.debug(
            "Built path query %s -> %s with %d filter(s)",
            first_person_id, second_person_id, len(conditions)
        )
        return TraversalRequest(
            first_person_id=first_person_id,
            second_person_id=second_person_id,
            cypher=cypher,
            parameters=params,
            predicates=predicates
        )
