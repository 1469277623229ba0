"""
Movie Graph Entity Models

Pydantic models for the two entity kinds (Movie, Person), the inputs
accepted by the API operations, and the conversions between raw Neo4j
result rows and API-shaped records.

Wire names are camelCase (``movieTitle``, ``imdbRating``); Python code
uses the snake_case field names.
"""

from enum import Enum
from typing import Any, TypeVar

import pydantic
from pydantic import AliasChoices, BaseModel, Field

from moviegraph.shared.exceptions import ValidationError

MOVIE_LABEL = "Movie"
PERSON_LABEL = "Person"
ACTED_IN = "ACTED_IN"


class _ApiModel(BaseModel):
    class Config:
        populate_by_name = True


# ─── Entities ──────────────────────────────────────────────


class Person(_ApiModel):
    """An actor. ``movies`` holds titles of directly related movies."""

    name: str
    movies: list[str] = Field(default_factory=list)


class Movie(_ApiModel):
    """A movie and its directly related actors."""

    title: str
    year: int | None = None
    plot: str | None = None
    imdb_rating: float | None = Field(None, alias="imdbRating")
    actors: list[Person] = Field(default_factory=list)


# ─── Mutation inputs ───────────────────────────────────────


class ActorInput(_ApiModel):
    name: str


class CreateMovieInput(_ApiModel):
    """Input for the createMovie operation."""

    title: str
    year: int | None = None
    plot: str | None = None
    actors: list[ActorInput] = Field(default_factory=list)


class AddActorInput(_ApiModel):
    """Input for the addActor operation."""

    movie_title: str = Field(..., alias="movieTitle")
    actor: ActorInput | None = None


# ─── Query inputs ──────────────────────────────────────────


class SortField(str, Enum):
    """Movie properties that may appear in an ORDER BY clause."""

    IMDB_RATING = "imdbRating"
    TITLE = "title"
    YEAR = "year"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class MovieFilter(_ApiModel):
    imdb_rating_greater_than: float | None = Field(
        None,
        alias="imdbRatingGreaterThan",
        validation_alias=AliasChoices(
            "imdbRatingGreaterThan", "imdbRating_GT", "imdb_rating_greater_than"
        ),
    )


class MovieSort(_ApiModel):
    field: SortField
    order: SortOrder = SortOrder.ASC


class MovieOptions(_ApiModel):
    limit: int | None = Field(None, ge=0)
    sort: list[MovieSort] = Field(default_factory=list)


# ─── Conversions ───────────────────────────────────────────

ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_input(model: type[ModelT], value: Any) -> ModelT | None:
    """Return ``value`` as an instance of ``model``.

    ``None`` passes through. Dicts are validated; pydantic failures are
    re-raised as :class:`ValidationError` so callers only see the
    project's error taxonomy.
    """
    if value is None or isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid {model.__name__}: {exc}") from exc


def movie_properties(data: CreateMovieInput) -> dict[str, Any]:
    """Scalar properties stored on a new Movie node (unset values omitted)."""
    props: dict[str, Any] = {"title": data.title}
    if data.year is not None:
        props["year"] = data.year
    if data.plot is not None:
        props["plot"] = data.plot
    return props


def movie_from_record(row: dict[str, Any]) -> Movie:
    """Map a row with a ``movie`` node and optional ``actors`` names to a Movie."""
    props = dict(row["movie"])
    actors = [Person(name=name, movies=[props.get("title", "")])
              for name in row.get("actors") or [] if name]
    return Movie.model_validate({**props, "actors": actors})


def person_from_record(row: dict[str, Any]) -> Person:
    """Map a row with a ``person`` node and optional ``movies`` titles to a Person."""
    props = dict(row["person"])
    titles = [t for t in row.get("movies") or [] if t]
    return Person(name=props["name"], movies=titles)
