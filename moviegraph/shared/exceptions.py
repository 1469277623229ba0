"""
Custom exception hierarchy for the movie graph core.

All errors inherit from MovieGraphError so they can be caught
uniformly at the resolver or gateway level.
"""


class MovieGraphError(Exception):
    """Base exception for all moviegraph errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.component = component
        self.message = message
        super().__init__(f"[{component}] {message}")


class ValidationError(MovieGraphError):
    """Malformed or incomplete input, detected before any store access."""

    def __init__(self, message: str):
        super().__init__(message, component="validation")


class DatabaseConnectionError(MovieGraphError):
    """Neo4j is unreachable, rejected the credentials, or timed out."""

    def __init__(self, message: str):
        super().__init__(message, component="database")


class ConstraintError(MovieGraphError):
    """A store-side constraint was violated, or a lookup was ambiguous."""

    def __init__(self, message: str):
        super().__init__(message, component="constraint")


class StatementError(MovieGraphError):
    """A generated Cypher statement was rejected by the store."""

    def __init__(self, message: str):
        super().__init__(message, component="statement")
