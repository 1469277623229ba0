"""
Settings read from NEO4J_* environment variables or a local .env file.

The HTTP gateway and the movie MCP server both extend BaseAppSettings
and pass it to Neo4jHandler.from_settings.
"""

from pydantic_settings import BaseSettings


class BaseAppSettings(BaseSettings):
    """Base settings shared by every moviegraph entry point."""

    app_name: str = "moviegraph"

    # Neo4j connection
    neo4j_uri: str = ""
    neo4j_username: str = "neo4j"
    neo4j_password: str = ""
    neo4j_database: str = "neo4j"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
