"""Reshape a traversal path into (person, relationship, project) triples."""

import logging
from typing import Dict, List, Tuple

from . import PathTriple, Person, Project
from .resolver import decode_project, decode_relationship
from ..errors import EmptyPath, MalformedSegment
from ..graph import GraphNode, GraphPath, PathSegment
from ..schema import PERSON, PROJECT_LABELS, RELATIONSHIP_TYPES

logger = logging.getLogger(__name__)


def split_segment(index: int, segment: PathSegment) -> Tuple[GraphNode, GraphNode]:
    """Return the (person, project) nodes of a segment.

    Raises:
        MalformedSegment: unless the segment joins exactly one person and one
            project through a cast or crew edge
    """
    sides = (segment.start, segment.end)
    people = [node for node in sides if PERSON in node.labels]
    projects = [node for node in sides if node.labels & set(PROJECT_LABELS)]

    if len(people) != 1 or len(projects) != 1 or people[0] is projects[0]:
        labels = [sorted(node.labels) for node in sides]
        raise MalformedSegment(index, f"expected one person and one project, got {labels}")

    rel = segment.relationship
    if rel.type not in RELATIONSHIP_TYPES:
        raise MalformedSegment(index, f"unexpected relationship type {rel.type}")

    ends = {rel.start_element_id, rel.end_element_id}
    if ends != {segment.start.element_id, segment.end.element_id}:
        raise MalformedSegment(index, "relationship does not join the segment's nodes")

    return people[0], projects[0]


class PathDecomposer:
    """Walks a path and emits one triple per segment, in traversal order."""

    def decompose(self, path: GraphPath) -> List[PathTriple]:
        """Decompose a path into triples.

        Args:
            path: Path returned by the executor

        Returns:
            One PathTriple per segment; the person is always the Person-labelled
            end of the segment whichever way the edge points

        Raises:
            EmptyPath: if the path has no segments
            MalformedSegment: if a segment breaks the person/project structure
            UnresolvedType: if a project or relationship cannot be typed
        """
        if not path.segments:
            raise EmptyPath("Path has no segments")

        people: Dict[str, Person] = {}
        projects: Dict[str, Project] = {}
        triples = []

        for index, segment in enumerate(path.segments):
            if index and segment.start.element_id != path.segments[index - 1].end.element_id:
                raise MalformedSegment(index, "segment does not continue from the previous one")

            person_node, project_node = split_segment(index, segment)

            if person_node.element_id not in people:
                people[person_node.element_id] = Person(dict(person_node.properties))
            if project_node.element_id not in projects:
                projects[project_node.element_id] = decode_project(project_node.properties)

            triples.append(PathTriple(
                person=people[person_node.element_id],
                relationship=decode_relationship(segment.relationship.properties),
                project=projects[project_node.element_id]
            ))

        logger.debug("Decomposed path into %d triple(s)", len(triples))
        return triples
