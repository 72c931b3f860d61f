"""Neo4j-backed execution of traversals and lookups."""

import logging
from typing import Any, Dict, List, Optional

from neo4j import AsyncDriver, Query
from neo4j.exceptions import DriverError, Neo4jError

from . import GraphNode, GraphRelationship, PathSegment, GraphPath
from ..errors import LookupFailed, TraversalFailed
from ..query import TraversalRequest
from ..schema import PERSON, TV_SHOW, TV_ID, LOWERCASE_NAME, POPULARITY

logger = logging.getLogger(__name__)

SHOW_LOOKUP_QUERY = f"""
MATCH (s:{TV_SHOW})
WHERE s.{TV_ID} IN [$tv_id, toString($tv_id)]
RETURN s
LIMIT 1
"""

SUGGESTED_NAMES_QUERY = f"""
MATCH (p:{PERSON})
WHERE p.{LOWERCASE_NAME} CONTAINS toLower($name)
RETURN p
ORDER BY p.{POPULARITY} DESC
LIMIT $limit
"""


def to_native(value: Any) -> Any:
    """Convert neo4j temporal/spatial values to plain Python values."""
    if isinstance(value, list):
        return [to_native(v) for v in value]
    if hasattr(value, "to_native"):
        return value.to_native()
    return value


def entity_properties(entity) -> Dict[str, Any]:
    """Copy a node or relationship's properties as native values."""
    return {key: to_native(value) for key, value in entity.items()}


def convert_node(node) -> GraphNode:
    return GraphNode(
        element_id=node.element_id,
        labels=frozenset(node.labels),
        properties=entity_properties(node)
    )


def convert_path(path) -> GraphPath:
    """Convert a neo4j Path into segments in traversal order."""
    nodes = [convert_node(node) for node in path.nodes]
    segments = []
    for i, rel in enumerate(path.relationships):
        relationship = GraphRelationship(
            element_id=rel.element_id,
            type=rel.type,
            start_element_id=rel.start_node.element_id,
            end_element_id=rel.end_node.element_id,
            properties=entity_properties(rel)
        )
        segments.append(PathSegment(nodes[i], relationship, nodes[i + 1]))
    return GraphPath(segments)


class GraphExecutor:
    """Runs path traversals and show lookups against Neo4j.

    The driver is owned by the caller; every call opens and releases its
    own session.
    """

    def __init__(
        self,
        driver: AsyncDriver,
        database: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """Initialize the executor.

        Args:
            driver: Connected neo4j async driver
            database: Database name, or None for the server default
            timeout: Per-query timeout in seconds, or None for no limit
        """
        self.driver = driver
        self.database = database
        self.timeout = timeout

    async def _fetch_single(self, cypher: str, parameters: Dict[str, Any]):
        async with self.driver.session(database=self.database) as session:
            result = await session.run(Query(cypher, timeout=self.timeout), parameters)
            return await result.single()

    async def execute_traversal(self, request: TraversalRequest) -> Optional[GraphPath]:
        """Execute a shortest-path request.

        Returns:
            The path, or None if no path satisfies the request

        Raises:
            TraversalFailed: if the database rejects or fails the query
        """
        logger.debug(
            "Executing traversal %s -> %s (parameters: %s)",
            request.first_person_id,
            request.second_person_id,
            sorted(request.parameters)
        )
        try:
            record = await self._fetch_single(request.cypher, request.parameters)
        except (Neo4jError, DriverError) as e:
            logger.error(
                "Traversal %s -> %s failed: %s",
                request.first_person_id, request.second_person_id, e
            )
            raise TraversalFailed(str(e)) from e

        if record is None or record["p"] is None:
            return None
        return convert_path(record["p"])

    async def execute_lookup(self, tv_id: Any) -> Optional[Dict[str, Any]]:
        """Fetch a TvShow's properties by tv_id.

        Returns:
            Show properties, or None if no show has this id

        Raises:
            LookupFailed: if the database rejects or fails the query
        """
        try:
            record = await self._fetch_single(SHOW_LOOKUP_QUERY, {"tv_id": tv_id})
        except (Neo4jError, DriverError) as e:
            raise LookupFailed(tv_id, str(e)) from e

        if record is None:
            return None
        return entity_properties(record["s"])

    async def suggest_names(self, name: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Find the most popular people whose name contains the given text.

        Raises:
            LookupFailed: if the database rejects or fails the query
        """
        try:
            async with self.driver.session(database=self.database) as session:
                result = await session.run(
                    Query(SUGGESTED_NAMES_QUERY, timeout=self.timeout),
                    {"name": name, "limit": limit}
                )
                records = [record async for record in result]
        except (Neo4jError, DriverError) as e:
            raise LookupFailed(name, str(e)) from e

        return [entity_properties(record["p"]) for record in records]
