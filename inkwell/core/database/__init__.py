"""Database connection module for Inkwell."""

from inkwell.core.database.cassandra import (
    CassandraConnection,
    init_cassandra,
    shutdown_cassandra,
)


__all__ = [
    "CassandraConnection",
    "init_cassandra",
    "shutdown_cassandra",
]
