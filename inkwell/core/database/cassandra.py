"""Async Cassandra connection using cassandra-asyncio-driver.

Sessions come from ``cassandra_asyncio.cluster.Cluster`` and expose
``await session.aexecute(...)``, which does not block the event loop.

Provides:
- Connection lifecycle management
- Keyspace and table initialization
"""

from collections.abc import Sequence
from typing import Any

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra_asyncio.cluster import Cluster

from inkwell.config import get_settings


logger = structlog.get_logger(__name__)


class CassandraConnection:
    """Cassandra connection manager.

    Manages cluster connection and session lifecycle. The session is shared
    by every repository and the audit sink.
    """

    _cluster = None
    _session = None

    @classmethod
    def connect(cls):
        """Establish connection to Cassandra cluster.

        Returns:
            Active Cassandra session

        Raises:
            ConnectionError: If connection fails
        """
        if cls._session is not None:
            return cls._session

        settings = get_settings()

        auth_provider = None
        if settings.cassandra_username and settings.cassandra_password:
            auth_provider = PlainTextAuthProvider(
                username=settings.cassandra_username,
                password=settings.cassandra_password,
            )

        cls._cluster = Cluster(
            contact_points=settings.cassandra_hosts,
            port=settings.cassandra_port,
            auth_provider=auth_provider,
            protocol_version=settings.cassandra_protocol_version,
            load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
            connect_timeout=settings.cassandra_connect_timeout,
        )

        try:
            cls._session = cls._cluster.connect()
            cls._session.default_timeout = settings.cassandra_request_timeout
            logger.info(
                "cassandra_connected",
                hosts=settings.cassandra_hosts,
                port=settings.cassandra_port,
                protocol_version=settings.cassandra_protocol_version,
            )
        except Exception as e:
            logger.error("cassandra_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        return cls._session

    @classmethod
    def get_session(cls):
        """Get active session, connecting if necessary."""
        if cls._session is None:
            return cls.connect()
        return cls._session

    @classmethod
    def disconnect(cls) -> None:
        """Close connection to Cassandra."""
        if cls._session is not None:
            cls._session.shutdown()
            cls._session = None
            logger.info("cassandra_session_closed")

        if cls._cluster is not None:
            cls._cluster.shutdown()
            cls._cluster = None
            logger.info("cassandra_cluster_closed")

    @classmethod
    def is_connected(cls) -> bool:
        """Check if connection is active."""
        return cls._session is not None and not cls._session.is_shutdown


async def init_keyspace(session: Any, keyspace: str) -> None:
    """Create keyspace if not exists."""
    settings = get_settings()

    if settings.is_production:
        replication = """
            'class': 'NetworkTopologyStrategy',
            'datacenter1': 3
        """
    else:
        replication = """
            'class': 'SimpleStrategy',
            'replication_factor': 1
        """

    cql = f"""
        CREATE KEYSPACE IF NOT EXISTS {keyspace}
        WITH replication = {{{replication}}}
        AND durable_writes = true
    """

    await session.aexecute(cql)
    logger.info("keyspace_created", keyspace=keyspace)


async def init_tables(session: Any, keyspace: str, tables_cql: Sequence[str]) -> None:
    """Create the tables and indexes described by CQL templates."""
    for cql_template in tables_cql:
        await session.aexecute(cql_template.format(keyspace=keyspace))


async def init_cassandra():
    """Connect and create the keyspace plus the comment and audit tables.

    Returns:
        Configured Cassandra session
    """
    # Local imports: the comment service reaches this module via the repositories
    from inkwell.audit.models import AUDIT_TABLES_CQL  # noqa: PLC0415
    from inkwell.comments.models import COMMENTS_TABLES_CQL  # noqa: PLC0415

    settings = get_settings()
    session = CassandraConnection.connect()

    await init_keyspace(session, settings.cassandra_keyspace)
    session.set_keyspace(settings.cassandra_keyspace)

    await init_tables(session, settings.cassandra_keyspace, COMMENTS_TABLES_CQL)
    logger.info("comments_tables_created", keyspace=settings.cassandra_keyspace)
    await init_tables(session, settings.cassandra_keyspace, AUDIT_TABLES_CQL)
    logger.info("audit_tables_created", keyspace=settings.cassandra_keyspace)

    logger.info("cassandra_initialized", keyspace=settings.cassandra_keyspace)
    return session


async def shutdown_cassandra() -> None:
    """Shutdown Cassandra connection."""
    CassandraConnection.disconnect()
