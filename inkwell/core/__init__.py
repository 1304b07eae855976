# Core infrastructure
from inkwell.core.context import (
    RequestContext,
    clear_context,
    get_client_ip,
    get_context,
    get_request_id,
    get_user_id,
    set_client_ip,
    set_request_id,
    set_user_id,
)
from inkwell.core.database import init_cassandra, shutdown_cassandra
from inkwell.core.logging import configure_structlog, get_logger


__all__ = [
    "RequestContext",
    "clear_context",
    "configure_structlog",
    "get_client_ip",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_user_id",
    "init_cassandra",
    "set_client_ip",
    "set_request_id",
    "set_user_id",
    "shutdown_cassandra",
]
