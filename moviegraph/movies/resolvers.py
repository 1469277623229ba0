"""
Resolver Dispatch — one handler per API operation.

Each handler validates its input, asks the query builder for a statement
batch, runs it through the :class:`TransactionExecutor`, and maps the raw
rows into entity models. Failures are logged with the operation name and
re-raised unchanged; nothing is swallowed and no fallback value is
returned.
"""

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable

from moviegraph.movies.executor import AccessMode, TransactionExecutor
from moviegraph.movies.models import (
    AddActorInput,
    CreateMovieInput,
    Movie,
    MovieFilter,
    MovieOptions,
    Person,
    coerce_input,
    movie_from_record,
    person_from_record,
)
from moviegraph.movies.query_builder import (
    build_add_actor_batch,
    build_create_movie_batch,
    build_movies_query,
)
from moviegraph.shared.exceptions import StatementError, ValidationError
from moviegraph.shared.logging import generate_request_id

logger = logging.getLogger("moviegraph.resolvers")

_OPERATIONS: dict[str, str] = {}


def operation(name: str) -> Callable:
    """Register a resolver method under its API operation name.

    The wrapper logs any failure with the operation name and a request id,
    then re-raises it.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        _OPERATIONS[name] = func.__name__

        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            request_id = generate_request_id()
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                logger.error(
                    "Error in %s resolver [request=%s]: %s: %s",
                    name, request_id, type(exc).__name__, exc,
                )
                raise

        return wrapper

    return decorator


class MovieResolvers:
    """Operation handlers over a shared :class:`TransactionExecutor`."""

    def __init__(self, executor: TransactionExecutor):
        self._executor = executor

    @property
    def operations(self) -> dict[str, Callable[..., Awaitable[Any]]]:
        """Operation name → bound handler."""
        return {name: getattr(self, attr) for name, attr in _OPERATIONS.items()}

    async def dispatch(self, operation_name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Invoke the handler registered for ``operation_name`` with ``arguments``."""
        handler = self.operations.get(operation_name)
        if handler is None:
            raise ValidationError(
                f"Unknown operation '{operation_name}'. Valid: {sorted(_OPERATIONS)}"
            )
        arguments = arguments or {}
        try:
            inspect.signature(handler).bind(**arguments)
        except TypeError as exc:
            raise ValidationError(f"Bad arguments for '{operation_name}': {exc}") from exc
        return await handler(**arguments)

    # ─── Query ──────────────────────────────────────────────

    @operation("movies")
    async def movies(
        self,
        where: MovieFilter | dict | None = None,
        options: MovieOptions | dict | None = None,
    ) -> list[Movie]:
        movie_filter = coerce_input(MovieFilter, where)
        movie_options = coerce_input(MovieOptions, options)
        statement = build_movies_query(movie_filter, movie_options)
        rows = await self._executor.execute([statement], AccessMode.READ)
        return [movie_from_record(row) for row in rows]

    # ─── Mutations ──────────────────────────────────────────

    @operation("createMovie")
    async def create_movie(self, input: CreateMovieInput | dict) -> Movie:
        data = coerce_input(CreateMovieInput, input)
        if data is None:
            raise ValidationError("'input' is required")
        batch = build_create_movie_batch(data)
        rows = await self._executor.execute(batch, AccessMode.WRITE)
        if not rows:
            raise StatementError("createMovie batch returned no movie row")
        return movie_from_record(rows[0])

    @operation("addActor")
    async def add_actor(self, input: AddActorInput | dict) -> Person:
        data = coerce_input(AddActorInput, input)
        if data is None:
            raise ValidationError("'input' is required")
        batch = build_add_actor_batch(data)
        rows = await self._executor.execute(batch, AccessMode.WRITE)
        if not rows:
            raise StatementError("addActor batch returned no person row")
        if rows[0].get("movie_matches", 0) == 0:
            logger.info(
                "addActor: no movie titled %r; %r saved without an ACTED_IN edge",
                data.movie_title, data.actor.name,
            )
        return person_from_record(rows[0])
