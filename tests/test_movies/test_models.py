"""
Unit tests for entity models and record mapping.
"""

import pytest

from moviegraph.movies.models import (
    AddActorInput,
    CreateMovieInput,
    Movie,
    MovieOptions,
    coerce_input,
    movie_from_record,
    movie_properties,
    person_from_record,
)
from moviegraph.shared.exceptions import ValidationError


class TestCoerceInput:

    def test_none_passes_through(self):
        assert coerce_input(MovieOptions, None) is None

    def test_instance_passes_through(self):
        options = MovieOptions(limit=2)
        assert coerce_input(MovieOptions, options) is options

    def test_dict_with_wire_names(self):
        data = coerce_input(AddActorInput, {"movieTitle": "Heat", "actor": {"name": "A"}})

        assert data.movie_title == "Heat"
        assert data.actor.name == "A"

    def test_missing_required_field_raises_project_error(self):
        with pytest.raises(ValidationError, match="CreateMovieInput"):
            coerce_input(CreateMovieInput, {"year": 1999})

    def test_negative_limit_rejected(self):
        with pytest.raises(ValidationError):
            coerce_input(MovieOptions, {"limit": -5})

    def test_unknown_sort_field_rejected(self):
        with pytest.raises(ValidationError):
            coerce_input(MovieOptions, {"sort": [{"field": "plot", "order": "ASC"}]})


class TestRecordMapping:

    def test_movie_from_record_with_actors(self):
        row = {
            "movie": {"title": "Heat", "year": 1995, "imdbRating": 8.3, "internal": "x"},
            "actors": ["Al Pacino", None, "Robert De Niro"],
        }

        movie = movie_from_record(row)

        assert movie.title == "Heat"
        assert movie.year == 1995
        assert movie.imdb_rating == 8.3
        assert movie.plot is None
        assert [a.name for a in movie.actors] == ["Al Pacino", "Robert De Niro"]
        assert movie.actors[0].movies == ["Heat"]

    def test_movie_from_record_without_actor_column(self):
        movie = movie_from_record({"movie": {"title": "Heat"}, "movie_id": "4:abc:1"})

        assert movie.actors == []

    def test_person_from_record(self):
        person = person_from_record({
            "person": {"name": "Val Kilmer"},
            "movie_matches": 1,
            "movies": ["Heat", "Top Gun"],
        })

        assert person.name == "Val Kilmer"
        assert person.movies == ["Heat", "Top Gun"]

    def test_movie_serializes_with_wire_names(self):
        dumped = Movie(title="Heat", imdb_rating=8.3).model_dump(by_alias=True)

        assert dumped["imdbRating"] == 8.3
        assert "imdb_rating" not in dumped

    def test_movie_properties_skip_unset(self):
        props = movie_properties(CreateMovieInput(title="Heat", plot="Cops and robbers"))

        assert props == {"title": "Heat", "plot": "Cops and robbers"}
