"""Compile category filters into parameterized Cypher predicates."""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from . import (
    FilterOperator,
    FieldConstraint,
    CompiledPredicate,
    SUFFIX_OPERATORS,
    COMPARISON_SYMBOLS
)
from ..errors import InvalidFilterOperand, UnknownField
from ..schema import (
    CATEGORY_FIELDS,
    ORDERED_TYPES,
    STRING, INT, FLOAT, BOOLEAN, DATE, STRING_LIST, INT_LIST
)

logger = logging.getLogger(__name__)


def _declared_fields(category: str) -> Dict[str, str]:
    if category not in CATEGORY_FIELDS:
        raise UnknownField(category, "*", f"Unknown filter category '{category}'")
    return CATEGORY_FIELDS[category]


def split_filter_key(category: str, key: str) -> Tuple[str, FilterOperator]:
    """Split a filter key into its base field and operator.

    Args:
        category: Filter category (person, movie or episode)
        key: Filter key such as `budget` or `release_date_GTE`

    Returns:
        Tuple of (field, operator)

    Raises:
        UnknownField: if the base field is not declared for the category,
            or the suffix is not allowed for the field's type
    """
    fields = _declared_fields(category)

    for operator in SUFFIX_OPERATORS:
        if not key.endswith(operator.suffix):
            continue
        base = key[:-len(operator.suffix)]
        if base not in fields:
            continue
        if fields[base] not in ORDERED_TYPES:
            raise UnknownField(
                category, key,
                f"Field '{base}' of {category} filter does not support {operator.suffix}"
            )
        return base, operator

    if key in fields:
        return key, FilterOperator.EQ

    raise UnknownField(category, key)


def _coerce_scalar(category: str, name: str, field_type: str, value: Any) -> Any:
    def invalid(expected: str):
        return InvalidFilterOperand(
            category, name, f"expected {expected}, got {type(value).__name__}"
        )

    if field_type == INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise invalid("int")
        return value

    if field_type == FLOAT:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise invalid("float")
        return float(value)

    if field_type == BOOLEAN:
        if not isinstance(value, bool):
            raise invalid("boolean")
        return value

    if field_type == STRING:
        if not isinstance(value, str):
            raise invalid("string")
        return value

    if field_type == DATE:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value)
            except ValueError:
                raise InvalidFilterOperand(
                    category, name, f"'{value}' is not an ISO date (YYYY-MM-DD)"
                )
        raise invalid("date")

    raise invalid(field_type)


def coerce_operand(category: str, name: str, field_type: str, value: Any) -> Any:
    """Coerce one operand to the field's declared semantic type.

    List-typed fields take a list or tuple whose items are coerced one by
    one and come back as a tuple.

    Raises:
        InvalidFilterOperand: if the value does not match the declared type
    """
    if field_type in (STRING_LIST, INT_LIST):
        if not isinstance(value, (list, tuple)):
            raise InvalidFilterOperand(
                category, name, f"expected a list, got {type(value).__name__}"
            )
        item_type = STRING if field_type == STRING_LIST else INT
        return tuple(_coerce_scalar(category, name, item_type, v) for v in value)

    return _coerce_scalar(category, name, field_type, value)


def parse_filter(category: str, key: str, value: Any) -> FieldConstraint:
    """Parse one filter entry into a typed constraint.

    `_IN` takes exactly two bounds and becomes an inclusive range with the
    bounds ordered low to high.

    Raises:
        UnknownField: for undeclared fields or unsupported suffixes
        InvalidFilterOperand: for operands of the wrong type or shape
    """
    name, operator = split_filter_key(category, key)
    field_type = _declared_fields(category)[name]

    if operator is not FilterOperator.IN:
        operand = coerce_operand(category, name, field_type, value)
        return FieldConstraint(category, name, operator, (operand,))

    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise InvalidFilterOperand(
            category, name, "range filters take exactly two bounds"
        )
    bounds = [coerce_operand(category, name, field_type, v) for v in value]
    low, high = sorted(bounds)
    return FieldConstraint(category, name, operator, (low, high))


def _parameter_value(value: Any) -> Any:
    # The driver sends lists, not tuples, as Cypher lists
    if isinstance(value, tuple):
        return list(value)
    return value


class FilterCompiler:
    """Compiles field filters into Cypher predicates over one loop variable.

    Operands only ever travel as query parameters; the predicate text holds
    nothing but declared field names, operators and parameter names.
    """

    def __init__(self, variable: str = "n"):
        """Initialize the compiler.

        Args:
            variable: Name of the node variable the predicate is written over
        """
        self.variable = variable

    def parse(self, category: str, filters: Mapping[str, Any]) -> List[FieldConstraint]:
        """Parse every entry of a category filter into constraints."""
        _declared_fields(category)
        return [parse_filter(category, key, value) for key, value in filters.items()]

    def compile_constraint(self, constraint: FieldConstraint) -> Tuple[str, Dict[str, Any]]:
        """Compile a single constraint.

        Returns:
            Tuple of (predicate_text, parameters)
        """
        prop = f"{self.variable}.{constraint.field}"
        param_name = (
            f"{constraint.category}_{constraint.field}_{constraint.operator.name.lower()}"
        )

        if constraint.operator is FilterOperator.IN:
            low, high = constraint.operands
            text = f"({prop} >= ${param_name}_low AND {prop} <= ${param_name}_high)"
            return text, {
                f"{param_name}_low": _parameter_value(low),
                f"{param_name}_high": _parameter_value(high)
            }

        symbol = COMPARISON_SYMBOLS[constraint.operator]
        text = f"{prop} {symbol} ${param_name}"
        return text, {param_name: _parameter_value(constraint.operands[0])}

    def compile(self, category: str, filters: Optional[Mapping[str, Any]]) -> Optional[CompiledPredicate]:
        """Compile a category filter into one AND-joined predicate.

        Args:
            category: Filter category (person, movie or episode)
            filters: Mapping of filter key to operand

        Returns:
            CompiledPredicate, or None when the filter is empty
        """
        constraints = self.parse(category, filters or {})
        if not constraints:
            return None

        parts = []
        params: Dict[str, Any] = {}
        for constraint in constraints:
            text, constraint_params = self.compile_constraint(constraint)
            parts.append(text)
            params.update(constraint_params)

        logger.debug(
            "Compiled %s filter with parameters %s", category, sorted(params)
        )
        return CompiledPredicate(
            text=" AND ".join(parts),
            parameters=params,
            constraints=constraints
        )
