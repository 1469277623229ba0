"""
Shared fixtures: an in-memory stand-in for the Neo4j handler.

``FakeStore`` answers ``session(access_mode)`` like ``Neo4jHandler`` does.
Each ``tx.run`` pops the next scripted reply (a list of row dicts, an
exception to raise, or a callable producing rows). Statements only
become visible in ``store.committed`` once their transaction commits.
"""

import pytest

from moviegraph.movies.executor import TransactionExecutor
from moviegraph.movies.resolvers import MovieResolvers


class FakeRecord:
    def __init__(self, data: dict):
        self._data = data

    def data(self) -> dict:
        return dict(self._data)


class FakeResult:
    def __init__(self, rows: list[dict]):
        self._rows = rows

    def __aiter__(self):
        return self._records()

    async def _records(self):
        for row in self._rows:
            yield FakeRecord(row)


class FakeTransaction:
    def __init__(self, store: "FakeStore"):
        self._store = store
        self.runs: list[tuple[str, dict]] = []
        self.committed = False
        self.rolled_back = False

    async def run(self, text: str, params: dict) -> FakeResult:
        self.runs.append((text, params))
        reply = self._store.replies.pop(0) if self._store.replies else []
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            reply = reply(text, params)
        return FakeResult(reply)

    async def commit(self) -> None:
        if self._store.commit_error is not None:
            raise self._store.commit_error
        self.committed = True
        self._store.committed.extend(self.runs)

    async def rollback(self) -> None:
        self.rolled_back = True

    def closed(self) -> bool:
        return self.committed or self.rolled_back


class FakeSession:
    def __init__(self, store: "FakeStore", access_mode: str):
        self._store = store
        self.access_mode = access_mode
        self.open = False

    async def __aenter__(self) -> "FakeSession":
        self.open = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.open = False

    async def begin_transaction(self) -> FakeTransaction:
        tx = FakeTransaction(self._store)
        self._store.transactions.append(tx)
        return tx


class FakeStore:
    """Scripted replacement for ``Neo4jHandler``."""

    def __init__(self, replies: list | None = None):
        self.replies = list(replies or [])
        self.committed: list[tuple[str, dict]] = []
        self.sessions: list[FakeSession] = []
        self.transactions: list[FakeTransaction] = []
        self.commit_error: BaseException | None = None

    def session(self, access_mode: str) -> FakeSession:
        session = FakeSession(self, access_mode)
        self.sessions.append(session)
        return session

    @property
    def access_modes(self) -> list[str]:
        return [s.access_mode for s in self.sessions]

    @property
    def last_tx(self) -> FakeTransaction:
        return self.transactions[-1]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def executor(store) -> TransactionExecutor:
    return TransactionExecutor(store)


@pytest.fixture
def resolvers(executor) -> MovieResolvers:
    return MovieResolvers(executor)
