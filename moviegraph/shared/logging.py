"""
Logging setup for the moviegraph entry points.

The gateway and the MCP server share one log format.  Resolver failures
are logged with a short request id next to the operation name.
"""

import logging
import uuid


def setup_logging(component: str, level: str = "INFO") -> logging.Logger:
    """
    Configure structured logging for a component.

    Args:
        component: Name of the component (used as logger name).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger(component)


def generate_request_id() -> str:
    """Generate a short unique ID for tracing a single operation call."""
    return uuid.uuid4().hex[:12]
