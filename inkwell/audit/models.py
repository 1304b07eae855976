"""Audit trail for comment administration.

Cassandra table plus the entry entity. Rows are partitioned by event so the
admin UI can page through e.g. all deletions newest first; they expire
after one year.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class AuditEventId(str, Enum):
    """Comment events recorded in the audit trail."""

    COMMENT_CREATED = "comment_created"
    COMMENT_APPROVED = "comment_approved"
    COMMENT_DISAPPROVED = "comment_disapproved"
    COMMENT_DELETED = "comment_deleted"
    COMMENT_REPLIED = "comment_replied"


AUDIT_LOG_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.blog_audit_log (
    event_id TEXT,
    event_time_utc TIMESTAMP,
    entry_id UUID,
    message TEXT,
    request_id TEXT,
    user_id TEXT,
    ip_address TEXT,
    PRIMARY KEY ((event_id), event_time_utc, entry_id)
) WITH CLUSTERING ORDER BY (event_time_utc DESC, entry_id ASC)
  AND default_time_to_live = 31536000
  AND comment = 'Audit log for comment administration (1 year TTL)'
"""

AUDIT_TABLES_CQL = [AUDIT_LOG_TABLE_CQL]


@dataclass
class AuditEntry:
    """One audited action."""

    entry_id: UUID
    event_id: AuditEventId
    message: str
    event_time_utc: datetime
    request_id: str | None = None
    user_id: str | None = None
    ip_address: str | None = None

    @classmethod
    def from_row(cls, row: Any) -> "AuditEntry":
        """Create entity from Cassandra row."""
        event_time = row.event_time_utc
        if event_time.tzinfo is None:
            event_time = event_time.replace(tzinfo=UTC)
        return cls(
            entry_id=row.entry_id,
            event_id=AuditEventId(row.event_id),
            message=row.message,
            event_time_utc=event_time,
            request_id=row.request_id,
            user_id=row.user_id,
            ip_address=row.ip_address,
        )


def create_audit_entry(
    event_id: AuditEventId,
    message: str,
    request_id: str | None = None,
    user_id: str | None = None,
    ip_address: str | None = None,
) -> AuditEntry:
    """Create an audit entry stamped with the current UTC time.

    Args:
        event_id: Kind of action performed
        message: Human readable description, e.g. which comment was deleted
        request_id: Request that performed the action
        user_id: Acting administrator, when known
        ip_address: Client address of the acting user

    Returns:
        AuditEntry ready to be inserted
    """
    return AuditEntry(
        entry_id=uuid4(),
        event_id=event_id,
        message=message,
        event_time_utc=datetime.now(UTC),
        request_id=request_id or None,
        user_id=user_id,
        ip_address=ip_address,
    )
