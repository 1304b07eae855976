"""Audit trail for comment administration."""

from .models import AUDIT_TABLES_CQL, AuditEntry, AuditEventId, create_audit_entry
from .service import BlogAudit, CassandraBlogAudit, LoggingBlogAudit


__all__ = [
    "AUDIT_TABLES_CQL",
    "AuditEntry",
    "AuditEventId",
    "BlogAudit",
    "CassandraBlogAudit",
    "LoggingBlogAudit",
    "create_audit_entry",
]
