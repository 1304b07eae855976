"""Shared test fixtures.

Storage is the in-memory repository; the recording subclass notes every
read and write in a journal shared by all repositories, so tests can assert
that storage was left untouched and on the order of writes across comments
and replies.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from inkwell.audit import AuditEventId
from inkwell.comments.models import Comment, CommentReply, Post
from inkwell.comments.service import CommentService
from inkwell.config import ContentSettings
from inkwell.core.repository import InMemoryRepository
from inkwell.moderation import LocalCommentModerator, StringWordSource


BANNED_WORDS = "spam|scam|viagra"
WRITE_OPERATIONS = frozenset({"add", "update", "delete"})


class Journal(list):
    """Storage calls as (operation, kind, id); id is None for spec reads."""

    @property
    def writes(self) -> list:
        return [entry for entry in self if entry[0] in WRITE_OPERATIONS]


class RecordingRepository(InMemoryRepository):
    """In-memory repository that journals every call."""

    def __init__(self, kind: str, journal: Journal, entities: Iterable = ()) -> None:
        super().__init__(entities)
        self.kind = kind
        self.journal = journal

    async def count(self, spec=None) -> int:
        self.journal.append(("count", self.kind, None))
        return await super().count(spec)

    async def get(self, spec):
        self.journal.append(("get", self.kind, None))
        return await super().get(spec)

    async def get_by_id(self, entity_id):
        self.journal.append(("get_by_id", self.kind, entity_id))
        return await super().get_by_id(entity_id)

    async def select(self, spec, projection):
        self.journal.append(("select", self.kind, None))
        return await super().select(spec, projection)

    async def select_first_or_default(self, spec, projection):
        self.journal.append(("select_first_or_default", self.kind, None))
        return await super().select_first_or_default(spec, projection)

    async def add(self, entity):
        self.journal.append(("add", self.kind, entity.id))
        return await super().add(entity)

    async def update(self, entity) -> None:
        self.journal.append(("update", self.kind, entity.id))
        await super().update(entity)

    async def delete(self, entity) -> None:
        self.journal.append(("delete", self.kind, entity.id))
        await super().delete(entity)


class FakeBlogAudit:
    """Audit sink keeping entries in a list."""

    def __init__(self) -> None:
        self.entries: list[tuple[AuditEventId, str]] = []

    async def log(self, event_id: AuditEventId, message: str) -> None:
        self.entries.append((event_id, message))

    @property
    def events(self) -> list[AuditEventId]:
        return [event_id for event_id, _ in self.entries]


def make_comment(
    post_id: UUID,
    is_approved: bool = False,
    minutes_ago: int = 0,
    **overrides,
) -> Comment:
    values = {
        "id": uuid4(),
        "post_id": post_id,
        "username": "Ada Reader",
        "email": "ada@example.com",
        "ip_address": "203.0.113.7",
        "comment_content": "Great write-up, thanks!",
        "create_time_utc": datetime.now(UTC) - timedelta(minutes=minutes_ago),
        "is_approved": is_approved,
    }
    values.update(overrides)
    return Comment(**values)


def make_reply(comment_id: UUID, minutes_ago: int = 0, **overrides) -> CommentReply:
    values = {
        "id": uuid4(),
        "comment_id": comment_id,
        "reply_content": "Thanks for reading.",
        "create_time_utc": datetime.now(UTC) - timedelta(minutes=minutes_ago),
    }
    values.update(overrides)
    return CommentReply(**values)


@pytest.fixture
def journal() -> Journal:
    return Journal()


@pytest.fixture
def post() -> Post:
    """Post the comments belong to."""
    return Post(id=uuid4(), title="Notes on async Python", slug="notes-on-async-python")


@pytest.fixture
def post_repo(post: Post, journal: Journal) -> RecordingRepository:
    return RecordingRepository("post", journal, [post])


@pytest.fixture
def comment_repo(journal: Journal) -> RecordingRepository:
    return RecordingRepository("comment", journal)


@pytest.fixture
def reply_repo(journal: Journal) -> RecordingRepository:
    return RecordingRepository("reply", journal)


@pytest.fixture
def audit() -> FakeBlogAudit:
    return FakeBlogAudit()


@pytest.fixture
def blog_config() -> SimpleNamespace:
    """Blog config with filtering off and review required."""
    return SimpleNamespace(content_settings=ContentSettings())


@pytest.fixture
def moderator() -> LocalCommentModerator:
    return LocalCommentModerator(StringWordSource(BANNED_WORDS))


@pytest.fixture
def comment_service(
    blog_config: SimpleNamespace,
    audit: FakeBlogAudit,
    comment_repo: RecordingRepository,
    reply_repo: RecordingRepository,
    post_repo: RecordingRepository,
    moderator: LocalCommentModerator,
) -> CommentService:
    """CommentService over in-memory storage."""
    return CommentService(
        blog_config=blog_config,
        audit=audit,
        comment_repo=comment_repo,
        reply_repo=reply_repo,
        post_repo=post_repo,
        moderator=moderator,
    )


@pytest.fixture
def comment_factory():
    """Build Comment entities; keyword overrides win."""
    return make_comment


@pytest.fixture
def reply_factory():
    """Build CommentReply entities; keyword overrides win."""
    return make_reply
