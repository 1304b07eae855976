"""Tests for the in-memory and Cassandra repositories.

The Cassandra session is a Mock with an ``aexecute`` AsyncMock, so the tests
check which statement is chosen for a specification, not CQL semantics.
"""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from inkwell.comments.models import (
    COMMENT_COLUMNS,
    COMMENT_REPLY_COLUMNS,
    Comment,
    CommentReply,
)
from inkwell.comments.specifications import CommentReplySpec, CommentSpec
from inkwell.core.repository import CassandraRepository, InMemoryRepository


def comment_row(comment: Comment) -> SimpleNamespace:
    """Row as returned by the driver: naive timestamps."""
    values = comment.to_row()
    values["create_time_utc"] = comment.create_time_utc.replace(tzinfo=None)
    return SimpleNamespace(**values)


def result_set(rows=()):
    """Stand-in for the driver's async result set."""
    rows = list(rows)
    return Mock(
        aall=AsyncMock(return_value=rows),
        one=Mock(return_value=rows[0] if rows else None),
    )


@pytest.fixture
def mock_session():
    """Mock Cassandra session preparing a distinct statement per call."""
    session = Mock()
    session.prepare = Mock(side_effect=lambda cql: Mock(name="prepared", cql=cql))
    session.aexecute = AsyncMock(return_value=result_set())
    return session


@pytest.fixture
def comment_table(mock_session) -> CassandraRepository:
    return CassandraRepository(
        mock_session,
        "inkwell",
        "comments",
        Comment,
        COMMENT_COLUMNS,
        indexed_columns=("post_id",),
    )


class TestInMemoryRepository:
    """Tests for InMemoryRepository."""

    @pytest.mark.asyncio
    async def test_add_get_and_count(self, post, comment_factory):
        repo = InMemoryRepository()
        approved = comment_factory(post.id, is_approved=True)
        pending = comment_factory(post.id)

        await repo.add(approved)
        await repo.add(pending)

        assert len(repo) == 2
        assert await repo.count() == 2
        assert await repo.count(CommentSpec(is_approved=True)) == 1
        assert await repo.get_by_id(pending.id) is pending
        assert await repo.get(CommentSpec(is_approved=True)) == [approved]

    @pytest.mark.asyncio
    async def test_add_duplicate_raises(self, post, comment_factory):
        comment = comment_factory(post.id)
        repo = InMemoryRepository([comment])

        with pytest.raises(ValueError):
            await repo.add(comment)

    @pytest.mark.asyncio
    async def test_select_projections(self, post, comment_factory):
        comments = [comment_factory(post.id, minutes_ago=m) for m in (3, 1, 2)]
        repo = InMemoryRepository(comments)
        spec = CommentSpec(post_id=post.id, newest_first=True)

        ids = await repo.select(spec, lambda c: c.id)
        first = await repo.select_first_or_default(spec, lambda c: c.id)
        missing = await repo.select_first_or_default(
            CommentSpec(post_id=uuid4()), lambda c: c.id
        )

        assert ids == [comments[1].id, comments[2].id, comments[0].id]
        assert first == comments[1].id
        assert missing is None

    @pytest.mark.asyncio
    async def test_update_and_delete(self, post, comment_factory):
        comment = comment_factory(post.id)
        others = [comment_factory(post.id) for _ in range(2)]
        repo = InMemoryRepository([comment, *others])

        comment.is_approved = True
        await repo.update(comment)
        await repo.delete_many(others)

        assert await repo.count() == 1
        assert (await repo.get_by_id(comment.id)).is_approved is True

    @pytest.mark.asyncio
    async def test_delete_missing_is_noop(self, post, comment_factory):
        repo = InMemoryRepository()

        await repo.delete(comment_factory(post.id))

        assert await repo.count() == 0


class TestCassandraRepository:
    """Tests for CassandraRepository."""

    def test_prepares_statements_for_table(self, comment_table, mock_session):
        prepared = [c.args[0] for c in mock_session.prepare.call_args_list]

        assert any(cql.startswith("INSERT INTO inkwell.comments") for cql in prepared)
        assert "SELECT * FROM inkwell.comments WHERE post_id = ?" in prepared
        assert "SELECT * FROM inkwell.comments WHERE id IN ?" in prepared

    @pytest.mark.asyncio
    async def test_id_filter_uses_in_read(
        self, comment_table, mock_session, post, comment_factory
    ):
        """Should read by partition key and convert rows."""
        # Arrange
        comment = comment_factory(post.id)
        mock_session.aexecute.return_value = result_set([comment_row(comment)])

        # Act
        result = await comment_table.get(CommentSpec.by_ids([comment.id]))

        # Assert
        statement, params = mock_session.aexecute.await_args.args
        assert statement.cql.endswith("WHERE id IN ?")
        assert params == [[comment.id]]
        assert result == [comment]
        assert result[0].create_time_utc.tzinfo is UTC

    @pytest.mark.asyncio
    async def test_indexed_filter_uses_index_read(
        self, comment_table, mock_session, post, comment_factory
    ):
        """Should query the index and still apply the full predicate."""
        approved = comment_factory(post.id, is_approved=True)
        pending = comment_factory(post.id)
        rows = [comment_row(approved), comment_row(pending)]
        mock_session.aexecute.return_value = result_set(rows)

        result = await comment_table.get(CommentSpec.approved_for_post(post.id))

        statement, params = mock_session.aexecute.await_args.args
        assert statement.cql.endswith("WHERE post_id = ?")
        assert params == [post.id]
        assert [c.id for c in result] == [approved.id]

    @pytest.mark.asyncio
    async def test_unkeyed_spec_scans_table(
        self, comment_table, mock_session, post, comment_factory
    ):
        comments = [comment_factory(post.id, minutes_ago=m) for m in range(3)]
        rows = [comment_row(c) for c in reversed(comments)]
        mock_session.aexecute.return_value = result_set(rows)

        result = await comment_table.get(CommentSpec.paged(page_size=2, page_number=1))

        statement = mock_session.aexecute.await_args.args[0]
        assert statement.cql == "SELECT * FROM inkwell.comments"
        assert [c.id for c in result] == [comments[0].id, comments[1].id]

    @pytest.mark.asyncio
    async def test_empty_key_filter_skips_storage(self, comment_table, mock_session):
        result = await comment_table.get(CommentSpec.by_ids([]))

        assert result == []
        mock_session.aexecute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_count_without_spec(self, comment_table, mock_session):
        mock_session.aexecute.return_value = result_set([SimpleNamespace(count=996)])

        assert await comment_table.count() == 996

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, comment_table, mock_session):
        assert await comment_table.get_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_get_by_id_reads_first_row(
        self, comment_table, mock_session, post, comment_factory
    ):
        comment = comment_factory(post.id)
        mock_session.aexecute.return_value = result_set([comment_row(comment)])

        assert await comment_table.get_by_id(comment.id) == comment
        statement, params = mock_session.aexecute.await_args.args
        assert statement.cql.endswith("WHERE id = ?")
        assert params == [comment.id]

    @pytest.mark.asyncio
    async def test_add_upserts_columns_in_order(
        self, comment_table, mock_session, post, comment_factory
    ):
        comment = comment_factory(post.id, moderation="masked")

        await comment_table.add(comment)

        statement, params = mock_session.aexecute.await_args.args
        assert statement.cql.startswith("INSERT INTO inkwell.comments")
        assert params == [comment.to_row()[column] for column in COMMENT_COLUMNS]

    @pytest.mark.asyncio
    async def test_reply_lookup_reads_each_comment(self, mock_session):
        """Should issue one index read per owning comment."""
        # Arrange
        replies = CassandraRepository(
            mock_session,
            "inkwell",
            "comment_replies",
            CommentReply,
            COMMENT_REPLY_COLUMNS,
            indexed_columns=("comment_id",),
        )
        first, second = uuid4(), uuid4()
        row = SimpleNamespace(
            id=uuid4(),
            comment_id=first,
            reply_content="Thanks",
            create_time_utc=datetime(2024, 1, 1, 12, 0),
        )
        mock_session.aexecute.side_effect = [result_set([row]), result_set()]

        # Act
        result = await replies.get(CommentReplySpec.for_comments([first, second]))

        # Assert
        assert mock_session.aexecute.await_count == 2
        calls = mock_session.aexecute.await_args_list
        assert {c.args[1][0] for c in calls} == {first, second}
        assert [r.comment_id for r in result] == [first]

    @pytest.mark.asyncio
    async def test_delete_many_deletes_by_id(
        self, comment_table, mock_session, post, comment_factory
    ):
        comments = [comment_factory(post.id) for _ in range(2)]

        await comment_table.delete_many(comments)

        assert [c.args[1] for c in mock_session.aexecute.await_args_list] == [
            [comments[0].id],
            [comments[1].id],
        ]
