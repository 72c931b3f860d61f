"""Shortest connections between people through films and TV episodes.

The package compiles per-category field filters into a parameterized
shortest-path query, runs it against Neo4j and reshapes the result into
(person, relationship, project) triples.
"""

__version__ = "0.1.0"

from .errors import (
    FilmGraphError,
    InvalidFilterOperand,
    UnknownField,
    EmptyPath,
    MalformedSegment,
    UnresolvedType,
    TraversalFailed,
    LookupFailed
)
from .query import PathFilters
from .path import PathTriple
from .path.finder import PathFinder
