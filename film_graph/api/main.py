"""Main FastAPI application for the film graph."""

import logging
from datetime import datetime

from fastapi import FastAPI, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from neo4j import AsyncGraphDatabase

from . import (
    FindPathRequest, FindPathResponse,
    SuggestedNamesResponse, ErrorResponse, HealthCheck
)
from .. import __version__
from .. import config
from ..errors import (
    FilmGraphError,
    InvalidFilterOperand, UnknownField, EmptyPath,
    TraversalFailed, LookupFailed
)
from ..graph.executor import GraphExecutor
from ..path.enrichment import ShowEnricher
from ..path.finder import PathFinder

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidFilterOperand: 400,
    UnknownField: 400,
    EmptyPath: 400,
    TraversalFailed: 502,
    LookupFailed: 502,
}

# Initialize FastAPI app
app = FastAPI(
    title="Film Graph API",
    description="Shortest connections between people through films and TV episodes",
    version=__version__
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
)


@app.on_event("startup")
async def startup_event():
    """Create the Neo4j driver shared by all requests."""
    config.configure_logging()
    app.state.driver = AsyncGraphDatabase.driver(
        config.NEO4J_URI,
        auth=(config.NEO4J_USER, config.NEO4J_PASSWORD)
    )
    logger.info("Neo4j driver created for %s", config.NEO4J_URI)


@app.on_event("shutdown")
async def shutdown_event():
    """Close the Neo4j driver."""
    driver = getattr(app.state, "driver", None)
    if driver is not None:
        await driver.close()
        logger.info("Neo4j driver closed")


def get_executor(request: Request) -> GraphExecutor:
    return GraphExecutor(
        request.app.state.driver,
        database=config.NEO4J_DATABASE,
        timeout=config.QUERY_TIMEOUT_SECONDS
    )


def get_path_finder(executor: GraphExecutor = Depends(get_executor)) -> PathFinder:
    return PathFinder(
        executor,
        enricher=ShowEnricher(executor, concurrency=config.ENRICHMENT_CONCURRENCY)
    )


@app.exception_handler(FilmGraphError)
async def film_graph_error_handler(request: Request, exc: FilmGraphError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    if status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    body = ErrorResponse(
        error=type(exc).__name__,
        details={"message": str(exc)}
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.post("/find_path", response_model=FindPathResponse)
async def find_path(
    request: FindPathRequest,
    finder: PathFinder = Depends(get_path_finder)
):
    """Find the shortest filtered connection between two people."""
    start_time = datetime.now()

    filters = request.to_filters()
    triples = await finder.find_path(
        request.first_person_id,
        request.second_person_id,
        filters
    )

    query_time = (datetime.now() - start_time).total_seconds() * 1000

    return FindPathResponse(
        results=[jsonable_encoder(t.to_dict()) for t in triples],
        total_found=len(triples),
        query_time_ms=query_time
    )


@app.get("/suggested_names", response_model=SuggestedNamesResponse)
async def suggested_names(
    name: str = Query(..., min_length=1),
    executor: GraphExecutor = Depends(get_executor)
):
    """Suggest people whose name contains the given text, most popular first."""
    people = await executor.suggest_names(name, limit=config.SUGGESTION_LIMIT)
    return SuggestedNamesResponse(results=jsonable_encoder(people))


@app.get("/health", response_model=HealthCheck)
async def health_check(request: Request):
    """Check system health status."""
    components = {"neo4j": True}

    try:
        await request.app.state.driver.verify_connectivity()
    except Exception as e:
        logger.warning("Neo4j connectivity check failed: %s", e)
        components["neo4j"] = False

    status = "healthy" if all(components.values()) else "degraded"

    return HealthCheck(
        status=status,
        version=__version__,
        components=components
    )


def run():
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    run()
