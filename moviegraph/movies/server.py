"""
Movie MCP Server

Exposes the three movie operations as MCP tools so that agent clients can
query and extend the graph.  Each tool returns JSON text.

Run as:  python -m moviegraph.movies.server        (SSE transport)
"""

import asyncio
import json
from typing import Any

from mcp.server.fastmcp import FastMCP

from moviegraph.movies.config import MovieServerSettings
from moviegraph.movies.executor import TransactionExecutor
from moviegraph.movies.resolvers import MovieResolvers
from moviegraph.shared.database import Neo4jHandler
from moviegraph.shared.exceptions import ValidationError
from moviegraph.shared.logging import setup_logging

logger = setup_logging("moviegraph.movie_server", level="INFO")

mcp = FastMCP("MovieGraph")

# ─── Shared resources (lazy init) ─────────────────────────

_settings: MovieServerSettings | None = None
_handler: Neo4jHandler | None = None
_resolvers: MovieResolvers | None = None
_init_lock = asyncio.Lock()


def _get_settings() -> MovieServerSettings:
    """Lazy-initialise settings from environment variables."""
    global _settings
    if _settings is None:
        _settings = MovieServerSettings()
    return _settings


async def _get_resolvers() -> MovieResolvers:
    """Connect to Neo4j and build the resolvers on first tool call."""
    global _handler, _resolvers
    if _resolvers is not None:
        return _resolvers
    async with _init_lock:
        if _resolvers is None:
            _handler = await Neo4jHandler.from_settings(_get_settings()).connect()
            logger.info("Movie MCP server connected to %s", _handler.uri)
            _resolvers = MovieResolvers(TransactionExecutor(_handler))
    return _resolvers


def _parse_json(raw: str, argument: str) -> Any:
    """Decode a JSON tool argument; malformed text is a ValidationError."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Malformed JSON in tool argument %r: %s", argument, exc)
        raise ValidationError(f"'{argument}' is not valid JSON: {exc}") from exc


# ─── Tools ────────────────────────────────────────────────


@mcp.tool()
async def movies(where: str = "{}", options: str = "{}") -> str:
    """List movies, optionally filtered, sorted and limited.

    Args:
        where: JSON filter, e.g. '{"imdbRatingGreaterThan": 7}'.
        options: JSON options, e.g.
              '{"limit": 5, "sort": [{"field": "imdbRating", "order": "DESC"}]}'.
              Sortable fields: imdbRating, title, year.
    """
    resolvers = await _get_resolvers()
    result = await resolvers.movies(
        where=_parse_json(where, "where") if where else None,
        options=_parse_json(options, "options") if options else None,
    )
    return json.dumps([m.model_dump(by_alias=True) for m in result], default=str)


@mcp.tool()
async def create_movie(input: str) -> str:
    """Create a movie and attach its actors in a single transaction.

    Args:
        input: JSON object, e.g.
              '{"title": "Heat", "year": 1995, "actors": [{"name": "Al Pacino"}]}'.
    """
    resolvers = await _get_resolvers()
    result = await resolvers.create_movie(_parse_json(input, "input"))
    return json.dumps(result.model_dump(by_alias=True), default=str)


@mcp.tool()
async def add_actor(input: str) -> str:
    """Add an actor to an existing movie, looked up by title.

    If no movie has that title the person is still saved, without an
    ACTED_IN edge.  If several movies share the title the call fails.

    Args:
        input: JSON object, e.g.
              '{"movieTitle": "Heat", "actor": {"name": "Val Kilmer"}}'.
    """
    resolvers = await _get_resolvers()
    result = await resolvers.add_actor(_parse_json(input, "input"))
    return json.dumps(result.model_dump(by_alias=True), default=str)


# ─── Entry point ──────────────────────────────────────────

app = mcp.sse_app()

if __name__ == "__main__":
    import uvicorn

    settings = _get_settings()
    logger.info(
        "Starting Movie MCP server (SSE transport on %s:%s)",
        settings.mcp_host, settings.mcp_port,
    )
    uvicorn.run(
        "moviegraph.movies.server:app",
        host=settings.mcp_host,
        port=settings.mcp_port,
        log_level="info",
    )
