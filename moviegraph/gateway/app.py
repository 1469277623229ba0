"""
FastAPI Gateway — HTTP API layer.

External interface for the movie graph. Opens the Neo4j driver once at
startup, lends it to every request through the resolvers, and maps the
error taxonomy onto HTTP status codes.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from moviegraph.gateway.config import GatewaySettings
from moviegraph.gateway.routes import health, movies
from moviegraph.movies.executor import TransactionExecutor
from moviegraph.movies.resolvers import MovieResolvers
from moviegraph.shared.database import Neo4jHandler
from moviegraph.shared.exceptions import (
    ConstraintError,
    DatabaseConnectionError,
    MovieGraphError,
    StatementError,
    ValidationError,
)
from moviegraph.shared.logging import setup_logging

# Global settings
settings = GatewaySettings()

logger = setup_logging("moviegraph.gateway.app", level=settings.log_level)

ERROR_STATUS: dict[type[MovieGraphError], int] = {
    ValidationError: 422,
    ConstraintError: 409,
    DatabaseConnectionError: 503,
    StatementError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the FastAPI app.

    Connects the shared Neo4j driver on startup, closes it on shutdown.
    """
    logger.info("Starting moviegraph gateway")

    handler = await Neo4jHandler.from_settings(settings).connect()
    if settings.ensure_schema:
        await handler.ensure_schema()

    app.state.neo4j_handler = handler
    app.state.resolvers = MovieResolvers(TransactionExecutor(handler))
    logger.info("Gateway initialized successfully (neo4j=%s)", handler.uri)

    yield

    logger.info("Shutting down moviegraph gateway")
    app.state.resolvers = None
    app.state.neo4j_handler = None
    await handler.close()


app = FastAPI(
    title="Movie Graph API",
    description="Typed movie/actor API over a Neo4j graph",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MovieGraphError)
async def movie_graph_error_handler(request: Request, exc: MovieGraphError) -> JSONResponse:
    """Turn a propagated core failure into a JSON error payload."""
    status_code = ERROR_STATUS.get(type(exc), 500)
    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "component": exc.component,
            "detail": exc.message,
        },
    )


# Register routers
app.include_router(movies.router, prefix="/api", tags=["Movies"])
app.include_router(health.router, prefix="/api", tags=["Health"])


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with basic info."""
    return {
        "name": "Movie Graph API",
        "version": "0.1.0",
        "message": "Hello World!",
        "endpoints": {
            "movies": "/api/movies/query",
            "create_movie": "/api/movies",
            "add_actor": "/api/movies/actors",
            "operations": "/api/operations/{operation}",
            "health": "/api/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "moviegraph.gateway.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )
