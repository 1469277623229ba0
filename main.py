"""
Entry point — starts the HTTP gateway.

Reads NEO4J_URI / NEO4J_USERNAME / NEO4J_PASSWORD and PORT from the
environment (or .env).

Usage:
    python main.py

For MCP server mode (SSE transport):
    python -m moviegraph.movies.server
"""

import uvicorn

from moviegraph.gateway.app import settings


def main() -> None:
    uvicorn.run(
        "moviegraph.gateway.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
