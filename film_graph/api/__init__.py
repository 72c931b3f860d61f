"""FastAPI service for the film graph.

This module provides the request/response models for:
- Shortest-path queries between two people
- Person name suggestions
- Health checks
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ..query import PathFilters


class FindPathRequest(BaseModel):
    """Request model for shortest-path queries."""
    first_person_id: int
    second_person_id: int
    filters: Optional[Dict[str, Any]] = None

    def to_filters(self) -> PathFilters:
        """Parse the raw filters, accepting current and legacy category keys."""
        return PathFilters.from_dict(self.filters)


class PathTripleModel(BaseModel):
    """One (person, relationship, project) step of a connection."""
    person: Dict[str, Any]
    relationship: Dict[str, Any]
    project: Dict[str, Any]


class FindPathResponse(BaseModel):
    """Response model for shortest-path queries."""
    results: List[PathTripleModel]
    total_found: int
    query_time_ms: float


class SuggestedNamesResponse(BaseModel):
    """Response model for name suggestions."""
    results: List[Dict[str, Any]]


# Error responses
class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    details: Optional[Dict] = None


class HealthCheck(BaseModel):
    """Health check response."""
    status: str
    version: str
    components: Dict[str, bool]
