"""Driver-independent graph records returned by the executor.

Paths are kept in traversal order: each segment runs from the node reached
first to the node reached next, whatever the stored edge direction.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List


@dataclass(frozen=True)
class GraphNode:
    """A node with its labels and properties."""
    element_id: str
    labels: FrozenSet[str]
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class GraphRelationship:
    """A stored edge; start/end follow the stored direction."""
    element_id: str
    type: str
    start_element_id: str
    end_element_id: str
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class PathSegment:
    """One node-edge-node step of a path, in traversal order."""
    start: GraphNode
    relationship: GraphRelationship
    end: GraphNode


@dataclass
class GraphPath:
    """An ordered sequence of path segments."""
    segments: List[PathSegment]

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def nodes(self) -> List[GraphNode]:
        if not self.segments:
            return []
        return [self.segments[0].start] + [s.end for s in self.segments]
