"""
Neo4j Connection Handler

Centralised Neo4j driver management.
Reads credentials from environment variables and exposes an async driver
that is obtained once per process and lent to each operation as a
short-lived session.
"""

import os
import logging
from typing import Any

from dotenv import load_dotenv
from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession

from moviegraph.shared.config import BaseAppSettings

load_dotenv()

logger = logging.getLogger("moviegraph.neo4j_handler")


class Neo4jHandler:
    """
    Manages a single async Neo4j driver backed by .env configuration.

    Usage
    -----
    handler = Neo4jHandler()          # reads from .env
    await handler.connect()
    async with handler.session("READ") as session:
        ...
    await handler.close()
    """

    def __init__(
        self,
        uri: str | None = None,
        username: str | None = None,
        password: str | None = None,
        database: str | None = None,
    ):
        self._uri = uri or os.getenv("NEO4J_URI")
        self._username = username or os.getenv("NEO4J_USERNAME", "neo4j")
        self._password = password or os.getenv("NEO4J_PASSWORD")
        self._database = database or os.getenv("NEO4J_DATABASE", "neo4j")
        self._driver: AsyncDriver | None = None

        if not self._uri:
            raise ValueError("NEO4J_URI is not set (env or argument)")
        if not self._password:
            raise ValueError("NEO4J_PASSWORD is not set (env or argument)")

    @classmethod
    def from_settings(cls, settings: BaseAppSettings) -> "Neo4jHandler":
        """Build a handler from a settings object, falling back to env vars."""
        return cls(
            uri=settings.neo4j_uri or None,
            username=settings.neo4j_username or None,
            password=settings.neo4j_password or None,
            database=settings.neo4j_database or None,
        )

    # ─── Lifecycle ──────────────────────────────────────────

    async def connect(self) -> "Neo4jHandler":
        """Create the async driver and verify connectivity.

        Returns:
            Self for method chaining.

        Raises:
            Exception: If Neo4j connection cannot be established or verified.
        """
        if self._driver is not None:
            return self

        self._driver = AsyncGraphDatabase.driver(
            self._uri, auth=(self._username, self._password)
        )
        try:
            await self._driver.verify_connectivity()
            logger.info("Connected to Neo4j at %s (db=%s)", self._uri, self._database)
        except Exception:
            logger.error("Failed to connect to Neo4j at %s", self._uri)
            await self._driver.close()
            self._driver = None
            raise
        return self

    async def close(self) -> None:
        """Close the underlying driver."""
        if self._driver:
            await self._driver.close()
            self._driver = None
            logger.info("Neo4j connection closed")

    # ─── Properties ─────────────────────────────────────────

    @property
    def driver(self) -> AsyncDriver:
        """Return the raw async driver.

        Raises:
            RuntimeError: If handler is not connected (call connect() first).
        """
        if self._driver is None:
            raise RuntimeError("Neo4jHandler is not connected, call connect() first")
        return self._driver

    @property
    def database(self) -> str:
        """Return the configured database name."""
        return self._database

    @property
    def uri(self) -> str:
        """Return the configured Neo4j URI."""
        return self._uri

    # ─── Sessions ───────────────────────────────────────────

    def session(self, access_mode: str) -> AsyncSession:
        """Open a session on the configured database.

        Args:
            access_mode: ``"READ"`` or ``"WRITE"`` (the driver's
                ``READ_ACCESS`` / ``WRITE_ACCESS`` values).

        Returns:
            An ``AsyncSession``; use it as an async context manager so it
            is closed when the operation ends.
        """
        return self.driver.session(
            database=self._database, default_access_mode=access_mode
        )

    async def run(self, query: str, params: dict[str, Any] | None = None) -> list[dict]:
        """Execute a single auto-commit Cypher query and return all results as dicts.

        Used for administrative queries (health checks, constraints); operation
        traffic goes through explicit transactions instead.
        """
        async with self.driver.session(database=self._database) as session:
            result = await session.run(query, params or {})
            return [record.data() async for record in result]

    async def ensure_schema(self) -> None:
        """Create the lookup indexes used by the movie operations."""
        statements = [
            "CREATE INDEX movie_title IF NOT EXISTS FOR (m:Movie) ON (m.title)",
            "CREATE INDEX person_name IF NOT EXISTS FOR (p:Person) ON (p.name)",
        ]
        for stmt in statements:
            await self.run(stmt)
        logger.info("Neo4j schema ensured")

    async def verify(self) -> bool:
        """Quick health-check: returns True if the database is reachable."""
        if self._driver is None:
            return False
        try:
            await self._driver.verify_connectivity()
            return True
        except Exception as exc:
            logger.warning("Neo4j health check failed: %s", exc)
            return False
