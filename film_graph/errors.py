"""Exceptions raised by the path-finding core."""

from typing import Optional


class FilmGraphError(Exception):
    """Base exception for all film graph errors."""
    pass


class InvalidFilterOperand(FilmGraphError):
    """Raised when a filter operand does not match the field's declared type."""

    def __init__(self, category: str, field: str, message: str):
        self.category = category
        self.field = field
        super().__init__(f"Invalid operand for {category}.{field}: {message}")


class UnknownField(FilmGraphError):
    """Raised when a filter names a field the category does not declare."""

    def __init__(self, category: str, field: str, message: Optional[str] = None):
        self.category = category
        self.field = field
        super().__init__(message or f"Unknown field '{field}' for {category} filter")


class EmptyPath(FilmGraphError):
    """Raised for a zero-length path (the same person queried twice)."""
    pass


class MalformedSegment(FilmGraphError):
    """Raised when a path segment does not join one person and one project."""

    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(f"Malformed segment {index}: {message}")


class UnresolvedType(FilmGraphError):
    """Raised when a record matches none of a union's variants."""

    def __init__(self, union: str, fields):
        self.union = union
        self.fields = sorted(fields)
        super().__init__(f"Cannot resolve {union} from fields {self.fields}")


class TraversalFailed(FilmGraphError):
    """Raised when the shortest-path traversal fails in the graph store."""
    pass


class LookupFailed(FilmGraphError):
    """Raised when a secondary lookup fails in the graph store."""

    def __init__(self, key, message: str):
        self.key = key
        super().__init__(f"Lookup for {key!r} failed: {message}")
