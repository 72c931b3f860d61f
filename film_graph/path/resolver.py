"""Resolve the concrete variant of project and relationship records.

The stored records carry no type tag; the variant is inferred from which
identifying fields are populated. Each union is described by an ordered
table of (variant, signal fields); the first variant with a populated
signal wins, and a record matching none is an error.
"""

from typing import Any, Callable, Mapping, Sequence, Tuple, Type

from . import Movie, TvEpisode, Cast, Crew, Project, Relationship
from ..errors import UnresolvedType
from ..schema import MOVIE_ID, EPISODE_ID, SHOW_ID, LEGACY_SHOW_ID

PROJECT_VARIANTS: Sequence[Tuple[Type, Tuple[str, ...]]] = (
    (Movie, (MOVIE_ID,)),
    (TvEpisode, (EPISODE_ID, SHOW_ID, LEGACY_SHOW_ID)),
)

RELATIONSHIP_VARIANTS: Sequence[Tuple[Type, Tuple[str, ...]]] = (
    (Cast, ("character",)),
    (Crew, ("department",)),
)


def _populated(record: Mapping[str, Any], name: str) -> bool:
    return record.get(name) is not None


def _resolve(union: str, variants, record: Mapping[str, Any]) -> Type:
    for variant, signals in variants:
        if any(_populated(record, name) for name in signals):
            return variant
    raise UnresolvedType(union, record.keys())


def resolve_project_kind(record: Mapping[str, Any]) -> str:
    """Return `Movie` or `TvEpisode` for a project record.

    Raises:
        UnresolvedType: if neither movie nor episode fields are populated
    """
    return _resolve("MovieOrTvEpisode", PROJECT_VARIANTS, record).typename


def resolve_relationship_kind(record: Mapping[str, Any]) -> str:
    """Return `castObj` or `crewObj` for a relationship record.

    Raises:
        UnresolvedType: if neither `character` nor `department` is populated
    """
    return _resolve("Relationship", RELATIONSHIP_VARIANTS, record).typename


def decode_project(record: Mapping[str, Any]) -> Project:
    variant: Callable = _resolve("MovieOrTvEpisode", PROJECT_VARIANTS, record)
    return variant(dict(record))


def decode_relationship(record: Mapping[str, Any]) -> Relationship:
    variant: Callable = _resolve("Relationship", RELATIONSHIP_VARIANTS, record)
    return variant(dict(record))
