"""Tests for the Cassandra connection and the keyspace and table bootstrap."""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from inkwell.config import Settings
from inkwell.core.database import CassandraConnection
from inkwell.core.database.cassandra import init_keyspace, init_tables


@pytest.fixture
def mock_session():
    """Session as returned by the asyncio cluster: ``aexecute`` is awaitable."""
    session = Mock()
    session.aexecute = AsyncMock(return_value=Mock())
    return session


@pytest.fixture
def reset_connection():
    yield
    CassandraConnection._cluster = None
    CassandraConnection._session = None


class TestCassandraConnection:
    """Tests for CassandraConnection."""

    def test_connect_uses_asyncio_cluster(self, mock_session, reset_connection):
        """Should build the cluster from settings and reuse the session."""
        # Arrange
        settings = Settings(
            cassandra_hosts=["10.0.0.5"],
            cassandra_username="inkwell",
            cassandra_password="secret",
            cassandra_request_timeout=7.5,
        )
        cluster = Mock()
        cluster.connect.return_value = mock_session

        # Act
        with (
            patch(
                "inkwell.core.database.cassandra.get_settings", return_value=settings
            ),
            patch(
                "inkwell.core.database.cassandra.Cluster", return_value=cluster
            ) as cluster_cls,
        ):
            session = CassandraConnection.connect()
            again = CassandraConnection.get_session()

        # Assert
        assert session is mock_session
        assert again is mock_session
        cluster_cls.assert_called_once()
        kwargs = cluster_cls.call_args.kwargs
        assert kwargs["contact_points"] == ["10.0.0.5"]
        assert kwargs["auth_provider"].username == "inkwell"
        assert session.default_timeout == 7.5

    def test_connect_failure_raises_connection_error(self, reset_connection):
        cluster = Mock()
        cluster.connect.side_effect = RuntimeError("no hosts available")

        with patch("inkwell.core.database.cassandra.Cluster", return_value=cluster):
            with pytest.raises(ConnectionError, match="no hosts available"):
                CassandraConnection.connect()

        assert CassandraConnection.is_connected() is False

    def test_disconnect_shuts_down(self, mock_session, reset_connection):
        cluster = Mock()
        CassandraConnection._cluster = cluster
        CassandraConnection._session = mock_session

        CassandraConnection.disconnect()

        mock_session.shutdown.assert_called_once()
        cluster.shutdown.assert_called_once()
        assert CassandraConnection.is_connected() is False


class TestInitTables:
    """Tests for init_tables."""

    @pytest.mark.asyncio
    async def test_formats_keyspace_into_each_statement(self, mock_session):
        await init_tables(
            mock_session,
            "blog",
            ["CREATE TABLE {keyspace}.a (id int)", "CREATE INDEX ON {keyspace}.a (x)"],
        )

        statements = [c.args[0] for c in mock_session.aexecute.await_args_list]
        assert statements == [
            "CREATE TABLE blog.a (id int)",
            "CREATE INDEX ON blog.a (x)",
        ]

    @pytest.mark.asyncio
    async def test_driver_error_is_raised(self, mock_session):
        mock_session.aexecute.side_effect = RuntimeError("Unavailable")

        with pytest.raises(RuntimeError, match="Unavailable"):
            await init_tables(mock_session, "blog", ["CREATE TABLE {keyspace}.a"])


class TestInitKeyspace:
    """Tests for init_keyspace."""

    @pytest.mark.asyncio
    async def test_simple_strategy_outside_production(self, mock_session):
        settings = Settings(environment="testing")

        with patch(
            "inkwell.core.database.cassandra.get_settings", return_value=settings
        ):
            await init_keyspace(mock_session, "blog_test")

        cql = mock_session.aexecute.await_args.args[0]
        assert "CREATE KEYSPACE IF NOT EXISTS blog_test" in cql
        assert "SimpleStrategy" in cql

    @pytest.mark.asyncio
    async def test_network_topology_in_production(self, mock_session):
        settings = Settings(environment="production")

        with patch(
            "inkwell.core.database.cassandra.get_settings", return_value=settings
        ):
            await init_keyspace(mock_session, "blog")

        cql = mock_session.aexecute.await_args.args[0]
        assert "NetworkTopologyStrategy" in cql
