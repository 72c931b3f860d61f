"""Shortest connection between two people."""

import logging
import time
from typing import Any, List, Mapping, Optional, Union

from . import PathTriple
from .decomposer import PathDecomposer
from .enrichment import ShowEnricher
from ..errors import EmptyPath, MalformedSegment
from ..graph import GraphNode, GraphPath
from ..query import PathFilters, TraversalRequest
from ..query.builder import PathQueryBuilder
from ..schema import PERSON, PERSON_ID

logger = logging.getLogger(__name__)


def _is_person(node: GraphNode, person_id: int) -> bool:
    return PERSON in node.labels and node.properties.get(PERSON_ID) == person_id


def check_endpoints(path: GraphPath, request: TraversalRequest):
    """Check that a path runs from the first queried person to the second.

    Raises:
        MalformedSegment: if either end is not the queried person
    """
    nodes = path.nodes
    if not _is_person(nodes[0], request.first_person_id):
        raise MalformedSegment(0, f"path does not start at person {request.first_person_id}")
    if not _is_person(nodes[-1], request.second_person_id):
        raise MalformedSegment(
            len(path) - 1, f"path does not end at person {request.second_person_id}"
        )


class PathFinder:
    """Finds and types the shortest connection between two people.

    The executor is injected and must provide `execute_traversal(request)`
    and `execute_lookup(tv_id)` coroutines.
    """

    def __init__(
        self,
        executor,
        builder: Optional[PathQueryBuilder] = None,
        decomposer: Optional[PathDecomposer] = None,
        enricher: Optional[ShowEnricher] = None
    ):
        self.executor = executor
        self.builder = builder or PathQueryBuilder()
        self.decomposer = decomposer or PathDecomposer()
        self.enricher = enricher or ShowEnricher(executor)

    async def find_path(
        self,
        first_person_id: int,
        second_person_id: int,
        filters: Union[PathFilters, Mapping[str, Any], None] = None
    ) -> List[PathTriple]:
        """Find the shortest filtered connection between two people.

        Args:
            first_person_id: person_id the connection starts from
            second_person_id: person_id the connection ends at
            filters: Optional person/movie/episode field filters

        Returns:
            Triples in order from the first person to the second; an empty
            list when no path satisfies the filters

        Raises:
            UnknownField, InvalidFilterOperand: on invalid filters, before
                any traversal
            EmptyPath: if both ids name the same person
            TraversalFailed: if the traversal fails
            MalformedSegment, UnresolvedType: if the result breaks the
                graph's person/project structure
        """
        request = self.builder.build(first_person_id, second_person_id, filters)
        if request.first_person_id == request.second_person_id:
            raise EmptyPath(f"Person {first_person_id} is connected to themselves")

        start_time = time.time()
        path = await self.executor.execute_traversal(request)
        if path is None:
            logger.info("No path between %s and %s", first_person_id, second_person_id)
            return []

        triples = self.decomposer.decompose(path)
        check_endpoints(path, request)
        await self.enricher.enrich(triples)

        logger.info(
            "Found %d-step path between %s and %s in %.1fms",
            len(triples), first_person_id, second_person_id,
            (time.time() - start_time) * 1000
        )
        return triples
