"""Movie MCP server configuration."""

from moviegraph.shared.config import BaseAppSettings


class MovieServerSettings(BaseAppSettings):
    """Settings specific to the movie MCP server."""

    app_name: str = "movie_server"
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8003
