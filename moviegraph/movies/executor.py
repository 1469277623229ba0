"""
Transaction Executor — runs a statement batch inside one Neo4j transaction.

The executor owns no connection of its own: it borrows a session from the
shared :class:`Neo4jHandler` for the duration of a single call, opens one
explicit transaction in the requested access mode, runs the statements in
order, and commits once after the last one. Any failure rolls the whole
batch back.

Driver exceptions are translated into the project's error taxonomy here,
so resolvers only ever see ``DatabaseConnectionError``,
``ConstraintError`` or ``StatementError``. There is no retry and no
timeout policy at this layer.
"""

import logging
from enum import Enum
from typing import Any, Sequence

from neo4j import READ_ACCESS, WRITE_ACCESS
from neo4j.exceptions import (
    AuthError,
    ConstraintError as Neo4jConstraintError,
    DriverError,
    Neo4jError,
    ResultConsumedError,
    ServiceUnavailable,
    SessionExpired,
    TransactionError,
    TransientError,
)

from moviegraph.movies.query_builder import Statement
from moviegraph.shared.database import Neo4jHandler
from moviegraph.shared.exceptions import (
    ConstraintError,
    DatabaseConnectionError,
    MovieGraphError,
    StatementError,
)

logger = logging.getLogger("moviegraph.executor")


class AccessMode(str, Enum):
    READ = READ_ACCESS
    WRITE = WRITE_ACCESS


def translate_error(exc: BaseException) -> MovieGraphError | None:
    """Map a driver exception onto the error taxonomy.

    Returns None for exceptions that should propagate untouched (the
    project's own errors, cancellation, programming errors).
    """
    if isinstance(exc, MovieGraphError):
        return None
    if isinstance(exc, AuthError):
        return DatabaseConnectionError(f"Neo4j rejected the credentials: {exc}")
    if isinstance(exc, (ServiceUnavailable, SessionExpired)):
        return DatabaseConnectionError(f"Neo4j is unreachable: {exc}")
    if isinstance(exc, TimeoutError):
        return DatabaseConnectionError(f"Neo4j transaction timed out: {exc}")
    if isinstance(exc, Neo4jError):
        code = exc.code or ""
        if "TransactionTimedOut" in code or isinstance(exc, TransientError):
            return DatabaseConnectionError(f"Neo4j transaction aborted ({code}): {exc}")
        if isinstance(exc, Neo4jConstraintError):
            return ConstraintError(f"Neo4j constraint violated: {exc}")
        return StatementError(f"Neo4j rejected the statement ({code}): {exc}")
    if isinstance(exc, (TransactionError, ResultConsumedError)):
        return StatementError(f"Neo4j driver API misuse: {exc}")
    if isinstance(exc, DriverError):
        return DatabaseConnectionError(f"Neo4j driver failure: {exc}")
    return None


class TransactionExecutor:
    """Execute ordered statement batches atomically against Neo4j."""

    def __init__(self, handler: Neo4jHandler):
        self._handler = handler

    async def execute(
        self,
        statements: Sequence[Statement],
        access_mode: AccessMode,
    ) -> list[dict[str, Any]]:
        """Run ``statements`` in one transaction and return the final statement's rows.

        Args:
            statements: Ordered batch. Correlation tokens may only point at
                earlier entries.
            access_mode: ``AccessMode.READ`` for queries, ``AccessMode.WRITE``
                for mutations.

        Returns:
            Rows of the last statement, each as a plain dict.

        Raises:
            DatabaseConnectionError: Store unreachable, auth failure, timeout.
            ConstraintError: Store constraint violation or a failed guard.
            StatementError: Store rejected a statement, or a correlation
                token could not be resolved.
        """
        if not statements:
            raise StatementError("Refusing to open a transaction for an empty batch")

        try:
            async with self._handler.session(access_mode.value) as session:
                tx = await session.begin_transaction()
                try:
                    rows = await self._run_batch(tx, statements)
                    await tx.commit()
                except BaseException:
                    await self._rollback(tx)
                    raise
        except Exception as exc:
            translated = translate_error(exc)
            if translated is None:
                raise
            raise translated from exc

        logger.debug(
            "%s transaction committed: %d statement(s), %d row(s)",
            access_mode.value, len(statements), len(rows),
        )
        return rows

    # ─── Internals ──────────────────────────────────────────

    async def _run_batch(self, tx, statements: Sequence[Statement]) -> list[dict[str, Any]]:
        results: list[list[dict[str, Any]]] = []
        for index, statement in enumerate(statements):
            params = self._bind(statement, index, results)
            logger.debug("Statement %d/%d:\n%s", index + 1, len(statements), statement.text)
            result = await tx.run(statement.text, params)
            rows = [record.data() async for record in result]
            if statement.guard is not None:
                statement.guard(rows)
            results.append(rows)
        return results[-1]

    @staticmethod
    def _bind(
        statement: Statement,
        index: int,
        results: list[list[dict[str, Any]]],
    ) -> dict[str, Any]:
        """Copy literal params and fill in values consumed from earlier results."""
        params = dict(statement.params)
        for name, token in statement.consumes.items():
            if not 0 <= token.statement < index:
                raise StatementError(
                    f"Statement {index} consumes '{name}' from statement "
                    f"{token.statement}, which has not run yet"
                )
            source = results[token.statement]
            if not source:
                raise StatementError(
                    f"Statement {index} consumes '{name}' from statement "
                    f"{token.statement}, which returned no rows"
                )
            if token.column not in source[0]:
                raise StatementError(
                    f"Statement {token.statement} returned no column '{token.column}'"
                )
            params[name] = source[0][token.column]
        return params

    @staticmethod
    async def _rollback(tx) -> None:
        if tx.closed():
            return
        try:
            await tx.rollback()
        except Exception as exc:
            logger.warning("Rollback failed; the store will discard the transaction: %s", exc)
