"""
HTTP tests for the gateway. Route tests do not start the lifespan;
resolvers are injected through dependency overrides.  The lifespan test
swaps in a mocked Neo4jHandler.
"""

import pytest
from fastapi.testclient import TestClient
from neo4j.exceptions import ConstraintError as Neo4jConstraintError, ServiceUnavailable
from unittest.mock import AsyncMock, MagicMock, patch

from moviegraph.gateway.app import app
from moviegraph.gateway.dependencies import get_handler, get_resolvers


@pytest.fixture
def client(resolvers):
    app.dependency_overrides[get_resolvers] = lambda: resolvers
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestMovieRoutes:

    def test_query_without_body(self, client, store):
        store.replies = [[{"movie": {"title": "Heat", "imdbRating": 8.3}, "actors": ["Al Pacino"]}]]

        response = client.post("/api/movies/query")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["title"] == "Heat"
        assert body[0]["imdbRating"] == 8.3
        assert body[0]["actors"][0]["name"] == "Al Pacino"

    def test_query_with_filter_and_options(self, client, store):
        store.replies = [[]]

        response = client.post("/api/movies/query", json={
            "where": {"imdbRatingGreaterThan": 9},
            "options": {"limit": 0, "sort": [{"field": "year", "order": "DESC"}]},
        })

        assert response.status_code == 200
        assert response.json() == []
        text, params = store.last_tx.runs[0]
        assert params == {"imdbRatingGreaterThan": 9.0, "limit": 0}
        assert "ORDER BY movie.year DESC" in text

    def test_create_movie(self, client, store):
        store.replies = [
            [{"movie": {"title": "Heat", "year": 1995}, "movie_id": "4:db:1"}],
            [{"movie": {"title": "Heat", "year": 1995}, "actors": ["Al Pacino"]}],
        ]

        response = client.post("/api/movies", json={
            "title": "Heat", "year": 1995, "actors": [{"name": "Al Pacino"}],
        })

        assert response.status_code == 201
        assert response.json()["actors"] == [{"name": "Al Pacino", "movies": ["Heat"]}]

    def test_create_movie_blank_title_is_422(self, client, store):
        response = client.post("/api/movies", json={"title": "", "actors": []})

        assert response.status_code == 422
        assert response.json()["error"] == "ValidationError"
        assert store.sessions == []

    def test_add_actor(self, client, store):
        store.replies = [
            [{"person": {"name": "Val Kilmer"}, "person_id": "4:db:2"}],
            [{"person": {"name": "Val Kilmer"}, "movie_matches": 1, "movies": ["Heat"]}],
        ]

        response = client.post("/api/movies/actors", json={
            "movieTitle": "Heat", "actor": {"name": "Val Kilmer"},
        })

        assert response.status_code == 200
        assert response.json() == {"name": "Val Kilmer", "movies": ["Heat"]}

    def test_constraint_error_is_409(self, client, store):
        store.replies = [Neo4jConstraintError("duplicate")]

        response = client.post("/api/movies", json={"title": "Heat"})

        assert response.status_code == 409
        assert response.json()["error"] == "ConstraintError"

    def test_store_unavailable_is_503(self, client, store):
        store.replies = [ServiceUnavailable("down")]

        response = client.post("/api/movies/query", json={})

        assert response.status_code == 503
        assert response.json()["error"] == "DatabaseConnectionError"


class TestOperationDispatch:

    def test_dispatch_create_movie(self, client, store):
        store.replies = [[{"movie": {"title": "Ronin"}, "movie_id": "4:db:8"}]]

        response = client.post("/api/operations/createMovie", json={
            "input": {"title": "Ronin", "actors": []},
        })

        assert response.status_code == 200
        assert response.json()["title"] == "Ronin"

    def test_unknown_operation_is_422(self, client):
        response = client.post("/api/operations/deleteMovie", json={})

        assert response.status_code == 422
        assert "Unknown operation" in response.json()["detail"]


class TestHealthAndRoot:

    def test_root(self):
        response = TestClient(app).get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "Hello World!"

    def test_health_without_handler(self):
        response = TestClient(app).get("/api/health")

        assert response.json() == {"status": "unhealthy", "neo4j": False, "database": None}

    def test_health_with_reachable_store(self):
        handler = MagicMock()
        handler.verify = AsyncMock(return_value=True)
        handler.database = "neo4j"
        app.dependency_overrides[get_handler] = lambda: handler
        try:
            response = TestClient(app).get("/api/health")
        finally:
            app.dependency_overrides.clear()

        assert response.json() == {"status": "healthy", "neo4j": True, "database": "neo4j"}


class TestLifespan:

    def test_startup_connects_and_shutdown_closes(self, caplog):
        handler = MagicMock()
        handler.uri = "bolt://graph:7687"
        handler.connect = AsyncMock(return_value=handler)
        handler.ensure_schema = AsyncMock()
        handler.close = AsyncMock()

        with patch("moviegraph.gateway.app.Neo4jHandler.from_settings", return_value=handler):
            with caplog.at_level("INFO"), TestClient(app):
                assert app.state.neo4j_handler is handler
                assert app.state.resolvers is not None

        handler.connect.assert_awaited_once()
        handler.close.assert_awaited_once()
        assert app.state.neo4j_handler is None
        assert "neo4j=bolt://graph:7687" in caplog.text
