"""Movie graph core: entity models, query builder, transaction executor, resolvers."""

from moviegraph.movies.executor import AccessMode, TransactionExecutor
from moviegraph.movies.resolvers import MovieResolvers

__all__ = [
    "AccessMode",
    "MovieResolvers",
    "TransactionExecutor",
]
