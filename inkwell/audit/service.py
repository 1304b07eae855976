"""Blog audit sinks.

``BlogAudit.log`` is all the comment service needs. The caller decides
what a failed write means; the comment service logs and ignores it.
"""

from typing import Any, Protocol

from inkwell.core.context import get_client_ip, get_request_id, get_user_id
from inkwell.core.logging import get_logger

from .models import AuditEntry, AuditEventId, create_audit_entry


logger = get_logger(__name__)


class BlogAudit(Protocol):
    async def log(self, event_id: AuditEventId, message: str) -> None: ...


def entry_from_context(event_id: AuditEventId, message: str) -> AuditEntry:
    """Build an entry carrying the current request's id, user and IP."""
    return create_audit_entry(
        event_id=event_id,
        message=message,
        request_id=get_request_id(),
        user_id=get_user_id(),
        ip_address=get_client_ip(),
    )


class LoggingBlogAudit:
    """Audit sink that only emits structured log events."""

    async def log(self, event_id: AuditEventId, message: str) -> None:
        entry = entry_from_context(event_id, message)
        logger.info(
            "audit_entry",
            audit_event=entry.event_id.value,
            audit_message=entry.message,
            entry_id=str(entry.entry_id),
        )


class CassandraBlogAudit:
    """Audit sink writing to the ``blog_audit_log`` table."""

    def __init__(self, session: Any, keyspace: str) -> None:
        """Initialize with Cassandra session."""
        self.session = session
        self.keyspace = keyspace
        self._insert_entry = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.blog_audit_log
            (event_id, event_time_utc, entry_id, message,
             request_id, user_id, ip_address)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)
        self._get_entries = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.blog_audit_log
            WHERE event_id = ?
            LIMIT ?
        """)

    async def log(self, event_id: AuditEventId, message: str) -> None:
        entry = entry_from_context(event_id, message)
        await self.session.aexecute(
            self._insert_entry,
            [
                entry.event_id.value,
                entry.event_time_utc,
                entry.entry_id,
                entry.message,
                entry.request_id,
                entry.user_id,
                entry.ip_address,
            ],
        )

    async def get_entries(
        self, event_id: AuditEventId, limit: int = 50
    ) -> list[AuditEntry]:
        """Most recent entries of one event kind, newest first."""
        result = await self.session.aexecute(
            self._get_entries, [event_id.value, limit]
        )
        return [AuditEntry.from_row(row) for row in await result.aall()]
