"""
Movie routes — the three API operations plus generic dispatch by name.

    POST /api/movies/query             movies(where, options)
    POST /api/movies                   createMovie(input)
    POST /api/movies/actors            addActor(input)
    POST /api/operations/{operation}   any of the above by operation name
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from moviegraph.gateway.dependencies import get_resolvers
from moviegraph.movies.models import (
    AddActorInput,
    CreateMovieInput,
    Movie,
    MovieFilter,
    MovieOptions,
    Person,
)
from moviegraph.movies.resolvers import MovieResolvers

router = APIRouter()


# ─── Request Models ─────────────────────────────────────────


class MoviesQuery(BaseModel):
    """Request model for POST /api/movies/query."""

    where: MovieFilter | None = Field(None, description="Optional movie filter")
    options: MovieOptions | None = Field(None, description="Optional sort and limit")


# ─── Routes ─────────────────────────────────────────────────


@router.post("/movies/query", response_model=list[Movie])
async def query_movies(
    query: MoviesQuery | None = None,
    resolvers: MovieResolvers = Depends(get_resolvers),
) -> list[Movie]:
    """Return movies matching the filter, ordered and limited as requested."""
    query = query or MoviesQuery()
    return await resolvers.movies(where=query.where, options=query.options)


@router.post("/movies", response_model=Movie, status_code=201)
async def create_movie(
    payload: CreateMovieInput,
    resolvers: MovieResolvers = Depends(get_resolvers),
) -> Movie:
    """Create a movie and its ACTED_IN edges atomically."""
    return await resolvers.create_movie(payload)


@router.post("/movies/actors", response_model=Person)
async def add_actor(
    payload: AddActorInput,
    resolvers: MovieResolvers = Depends(get_resolvers),
) -> Person:
    """Save a person and attach them to the movie with the given title."""
    return await resolvers.add_actor(payload)


@router.post("/operations/{operation}")
async def dispatch_operation(
    operation: str,
    arguments: dict[str, Any] | None = Body(None),
    resolvers: MovieResolvers = Depends(get_resolvers),
) -> Any:
    """Invoke an operation by its API name (``movies``, ``createMovie``, ``addActor``)."""
    return await resolvers.dispatch(operation, arguments)
