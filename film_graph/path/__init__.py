"""Typed path results: people, projects, relationships and triples.

Projects are the union Movie | TvEpisode and relationships the union
Cast | Crew. Each variant carries the type name callers see as
`__typename` in serialized results.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Union

from ..schema import PERSON_ID, MOVIE_ID, EPISODE_ID, SHOW_ID, LEGACY_SHOW_ID


class _Pending:
    """Marker for a parent show that has not been looked up yet."""

    def __repr__(self) -> str:
        return "PENDING"


PENDING = _Pending()


@dataclass
class Person:
    """A person at either end of a credit, with its stored properties."""
    properties: Dict[str, Any]

    @property
    def person_id(self) -> Optional[int]:
        return self.properties.get(PERSON_ID)

    def to_dict(self) -> Dict:
        return dict(self.properties)


@dataclass
class TvShow:
    """The show an episode belongs to, attached during enrichment."""
    properties: Dict[str, Any]

    def to_dict(self) -> Dict:
        return dict(self.properties)


@dataclass
class Movie:
    """A film project."""
    typename: ClassVar[str] = "Movie"
    properties: Dict[str, Any]

    @property
    def movie_id(self) -> Optional[int]:
        return self.properties.get(MOVIE_ID)

    def to_dict(self) -> Dict:
        return {"__typename": self.typename, **self.properties}


@dataclass
class TvEpisode:
    """A TV episode project; `parent_show` stays PENDING until enrichment."""
    typename: ClassVar[str] = "TvEpisode"
    properties: Dict[str, Any]
    parent_show: Union[TvShow, None, _Pending] = field(default=PENDING)

    @property
    def episode_id(self) -> Optional[str]:
        return self.properties.get(EPISODE_ID)

    @property
    def show_reference(self) -> Any:
        """The show id this episode points at (legacy records use tv_show_id)."""
        show_id = self.properties.get(SHOW_ID)
        if show_id is None:
            show_id = self.properties.get(LEGACY_SHOW_ID)
        return show_id

    @property
    def is_enriched(self) -> bool:
        return self.parent_show is not PENDING

    def to_dict(self) -> Dict:
        if self.parent_show is PENDING:
            raise ValueError(f"Episode {self.episode_id!r} has not been enriched")
        parent = self.parent_show.to_dict() if self.parent_show else None
        return {"__typename": self.typename, **self.properties, "parent_show": parent}


@dataclass
class Cast:
    """An acting credit, exposed as `castObj`."""
    typename: ClassVar[str] = "castObj"
    properties: Dict[str, Any]

    def to_dict(self) -> Dict:
        return {"__typename": self.typename, **self.properties}


@dataclass
class Crew:
    """A crew credit, exposed as `crewObj`."""
    typename: ClassVar[str] = "crewObj"
    properties: Dict[str, Any]

    def to_dict(self) -> Dict:
        return {"__typename": self.typename, **self.properties}


Project = Union[Movie, TvEpisode]
Relationship = Union[Cast, Crew]


@dataclass
class PathTriple:
    """One (person, relationship, project) step of a connection."""
    person: Person
    relationship: Relationship
    project: Project

    def to_dict(self) -> Dict:
        """Convert to dictionary format."""
        return {
            "person": self.person.to_dict(),
            "relationship": self.relationship.to_dict(),
            "project": self.project.to_dict()
        }
