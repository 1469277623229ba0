"""
Query Builder — structured requests to parameterized Cypher.

Pure functions: no driver access, no logging. Every value that comes from
a request travels as a named parameter; the only request-derived tokens
ever placed in statement text are sort fields and orders, and those are
drawn from closed enums.

Write operations are expressed as ordered batches. A later statement
that needs a value produced by an earlier one (the element id of a node
created a moment ago) declares it with a :class:`CorrelationToken`; the
Transaction Executor fills the parameter in at run time.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from moviegraph.movies.models import (
    ACTED_IN,
    MOVIE_LABEL,
    PERSON_LABEL,
    AddActorInput,
    CreateMovieInput,
    MovieFilter,
    MovieOptions,
    SortField,
    SortOrder,
    movie_properties,
)
from moviegraph.shared.exceptions import ConstraintError, ValidationError

RowGuard = Callable[[list[dict[str, Any]]], None]


@dataclass(frozen=True)
class CorrelationToken:
    """Points at ``column`` of the first row returned by batch entry ``statement``."""

    statement: int
    column: str


@dataclass(frozen=True)
class Statement:
    """One parameterized Cypher statement inside a batch.

    Attributes:
        text: Cypher text. Never contains request values.
        params: Literal parameters.
        consumes: Parameter name → token resolved from an earlier result.
        guard: Optional check over this statement's rows, run inside the
            transaction. Raising aborts (and rolls back) the batch.
    """

    text: str
    params: dict[str, Any] = field(default_factory=dict)
    consumes: dict[str, CorrelationToken] = field(default_factory=dict)
    guard: RowGuard | None = None


# ─── Validation helpers ────────────────────────────────────


def _require(value: str | None, name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"'{name}' is required and must not be empty")
    return value


def _sort_clause(options: MovieOptions) -> str:
    parts = []
    for entry in options.sort:
        try:
            sort_field = SortField(entry.field)
            order = SortOrder(entry.order)
        except ValueError as exc:
            raise ValidationError(f"Unsupported sort entry: {exc}") from exc
        parts.append(f"movie.{sort_field.value} {order.value}")
    return "ORDER BY " + ", ".join(parts)


# ─── Read path ─────────────────────────────────────────────


def build_movies_query(
    movie_filter: MovieFilter | None = None,
    options: MovieOptions | None = None,
) -> Statement:
    """Build the single read statement for the ``movies`` operation.

    Clause order is fixed: MATCH, WHERE, OPTIONAL MATCH (actors),
    RETURN, ORDER BY, LIMIT. ``WHERE``, ``ORDER BY`` and ``LIMIT`` are
    emitted only when the request sets them.
    """
    params: dict[str, Any] = {}
    lines = [f"MATCH (m:{MOVIE_LABEL})"]

    if movie_filter is not None and movie_filter.imdb_rating_greater_than is not None:
        lines.append("WHERE m.imdbRating > $imdbRatingGreaterThan")
        params["imdbRatingGreaterThan"] = movie_filter.imdb_rating_greater_than

    lines.append(f"OPTIONAL MATCH (actor:{PERSON_LABEL})-[:{ACTED_IN}]->(m)")
    lines.append("RETURN m AS movie, collect(actor.name) AS actors")

    if options is not None:
        if options.sort:
            lines.append(_sort_clause(options))
        if options.limit is not None:
            if options.limit < 0:
                raise ValidationError("'limit' must be zero or greater")
            lines.append("LIMIT $limit")
            params["limit"] = int(options.limit)

    return Statement(text="\n".join(lines), params=params)


# ─── Write path: createMovie ───────────────────────────────

_CREATE_MOVIE = f"""\
CREATE (m:{MOVIE_LABEL})
SET m = $properties
RETURN m AS movie, elementId(m) AS movie_id"""

_ATTACH_ACTOR = f"""\
MATCH (m:{MOVIE_LABEL}) WHERE elementId(m) = $movie_id
MERGE (p:{PERSON_LABEL} {{name: $actor_name}})
MERGE (p)-[:{ACTED_IN}]->(m)
WITH m
OPTIONAL MATCH (actor:{PERSON_LABEL})-[:{ACTED_IN}]->(m)
RETURN m AS movie, collect(actor.name) AS actors"""


def _movie_still_present(rows: list[dict[str, Any]]) -> None:
    if not rows:
        raise ConstraintError("Movie created earlier in this batch is no longer present")


def build_create_movie_batch(data: CreateMovieInput) -> list[Statement]:
    """Build ``1 + len(actors)`` statements for the ``createMovie`` operation.

    Statement 0 creates the Movie; each following statement attaches one
    actor to it by the Movie's element id, never by title.
    """
    _require(data.title, "title")
    for position, actor in enumerate(data.actors):
        _require(actor.name, f"actors[{position}].name")

    batch = [Statement(text=_CREATE_MOVIE, params={"properties": movie_properties(data)})]
    movie_id = CorrelationToken(statement=0, column="movie_id")
    for actor in data.actors:
        batch.append(Statement(
            text=_ATTACH_ACTOR,
            params={"actor_name": actor.name},
            consumes={"movie_id": movie_id},
            guard=_movie_still_present,
        ))
    return batch


# ─── Write path: addActor ──────────────────────────────────

_UPSERT_PERSON = f"""\
MERGE (p:{PERSON_LABEL} {{name: $name}})
RETURN p AS person, elementId(p) AS person_id"""

# Edge is created only when the title resolves to exactly one Movie.
# Zero matches is a silent no-op; more than one is rejected by the guard.
_ATTACH_TO_TITLE = f"""\
MATCH (p:{PERSON_LABEL}) WHERE elementId(p) = $person_id
OPTIONAL MATCH (m:{MOVIE_LABEL} {{title: $movie_title}})
WITH p, collect(m) AS matches
FOREACH (target IN CASE WHEN size(matches) = 1 THEN matches ELSE [] END |
    MERGE (p)-[:{ACTED_IN}]->(target))
WITH p, size(matches) AS movie_matches
OPTIONAL MATCH (p)-[:{ACTED_IN}]->(acted:{MOVIE_LABEL})
RETURN p AS person, movie_matches, collect(acted.title) AS movies"""


def _unambiguous_title(rows: list[dict[str, Any]]) -> None:
    if not rows:
        raise ConstraintError("Person created earlier in this batch is no longer present")
    matches = rows[0].get("movie_matches", 0)
    if matches > 1:
        raise ConstraintError(
            f"Movie title is ambiguous: {matches} movies share it; "
            "refusing to attach the actor to an arbitrary one"
        )


def build_add_actor_batch(data: AddActorInput) -> list[Statement]:
    """Build the two statements for the ``addActor`` operation."""
    _require(data.movie_title, "movieTitle")
    if data.actor is None:
        raise ValidationError("'actor' is required")
    _require(data.actor.name, "actor.name")

    return [
        Statement(text=_UPSERT_PERSON, params={"name": data.actor.name}),
        Statement(
            text=_ATTACH_TO_TITLE,
            params={"movie_title": data.movie_title},
            consumes={"person_id": CorrelationToken(statement=0, column="person_id")},
            guard=_unambiguous_title,
        ),
    ]
