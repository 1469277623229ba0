"""Request-scoped access to the shared resources created at startup."""

from fastapi import HTTPException, Request

from moviegraph.movies.resolvers import MovieResolvers
from moviegraph.shared.database import Neo4jHandler


def get_resolvers(request: Request) -> MovieResolvers:
    resolvers = getattr(request.app.state, "resolvers", None)
    if resolvers is None:
        raise HTTPException(status_code=503, detail="Resolvers are not initialised")
    return resolvers


def get_handler(request: Request) -> Neo4jHandler | None:
    return getattr(request.app.state, "neo4j_handler", None)
