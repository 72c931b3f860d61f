"""Filter AST and traversal request types.

This module handles:
- The typed representation of a single field constraint
- Compiled, parameterized predicates for one filter category
- The per-category filter bundle accepted by path queries
- The traversal request handed to the graph executor
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..errors import InvalidFilterOperand, UnknownField
from ..schema import PERSON_CATEGORY, MOVIE_CATEGORY, EPISODE_CATEGORY


class FilterOperator(Enum):
    """Operators a filter key can carry, valued by their key suffix."""
    EQ = ""
    GT = "_GT"
    LT = "_LT"
    GTE = "_GTE"
    LTE = "_LTE"
    IN = "_IN"

    @property
    def suffix(self) -> str:
        return self.value


# Longest suffixes first so "_GTE" is never read as "_GT" + "E"
SUFFIX_OPERATORS = (
    FilterOperator.GTE,
    FilterOperator.LTE,
    FilterOperator.GT,
    FilterOperator.LT,
    FilterOperator.IN,
)

COMPARISON_SYMBOLS = {
    FilterOperator.EQ: "=",
    FilterOperator.GT: ">",
    FilterOperator.LT: "<",
    FilterOperator.GTE: ">=",
    FilterOperator.LTE: "<=",
}


@dataclass(frozen=True)
class FieldConstraint:
    """A single typed constraint on one field of one category.

    `operands` holds one coerced value, or the (low, high) bounds for IN.
    """
    category: str
    field: str
    operator: FilterOperator
    operands: Tuple[Any, ...]

    @property
    def filter_key(self) -> str:
        """The filter key this constraint was written as, e.g. `budget_GT`."""
        return f"{self.field}{self.operator.suffix}"

    @property
    def operand(self) -> Any:
        """The operand in the shape callers supply it."""
        if self.operator is FilterOperator.IN:
            return list(self.operands)
        return self.operands[0]

    def to_dict(self) -> Dict:
        """Convert to dictionary format."""
        return {
            "category": self.category,
            "field": self.field,
            "operator": self.operator.name,
            "operands": list(self.operands)
        }


@dataclass
class CompiledPredicate:
    """Boolean Cypher expression over one loop variable plus its parameters."""
    text: str
    parameters: Dict[str, Any]
    constraints: List[FieldConstraint] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to dictionary format."""
        return {
            "text": self.text,
            "parameters": self.parameters,
            "constraints": [c.to_dict() for c in self.constraints]
        }


# Accepted keys for each category, current name first
CATEGORY_KEYS = {
    PERSON_CATEGORY: ("person", "person_filter"),
    MOVIE_CATEGORY: ("movie", "movie_filter"),
    EPISODE_CATEGORY: ("episode", "tv_filter"),
}


@dataclass
class PathFilters:
    """Optional field filters for each category of intermediate node."""
    person: Optional[Dict[str, Any]] = None
    movie: Optional[Dict[str, Any]] = None
    episode: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PathFilters":
        """Build filters from a mapping using current or legacy key names.

        Raises:
            UnknownField: if a key names no known category
            InvalidFilterOperand: if a category filter is not a mapping
        """
        filters = cls()
        if not data:
            return filters

        lookup = {
            key: category
            for category, keys in CATEGORY_KEYS.items()
            for key in keys
        }
        for key, value in data.items():
            if key not in lookup:
                raise UnknownField("filters", key, f"Unknown filter category '{key}'")
            if value is None:
                continue
            if not isinstance(value, Mapping):
                raise InvalidFilterOperand(
                    "filters", key, f"expected a mapping, got {type(value).__name__}"
                )
            setattr(filters, lookup[key], dict(value))
        return filters

    def items(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """Yield (category, mapping) for every non-empty category filter."""
        for category in (PERSON_CATEGORY, MOVIE_CATEGORY, EPISODE_CATEGORY):
            mapping = getattr(self, category)
            if mapping:
                yield category, mapping


@dataclass
class TraversalRequest:
    """A constrained shortest-path query between two people."""
    first_person_id: int
    second_person_id: int
    cypher: str
    parameters: Dict[str, Any]
    predicates: Dict[str, CompiledPredicate] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        """Convert to dictionary format."""
        return {
            "first_person_id": self.first_person_id,
            "second_person_id": self.second_person_id,
            "cypher": self.cypher,
            "parameters": self.parameters,
            "predicates": {k: p.to_dict() for k, p in self.predicates.items()}
        }
