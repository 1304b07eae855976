"""Request context management using contextvars.

Each unit of work (usually one HTTP request handled by the embedding app)
gets a request ID plus the acting user and client address. Logging and the
audit sinks read them from here, so the comment service never has to pass
them around explicitly.
"""

from contextvars import ContextVar
from typing import Any
from uuid import UUID, uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
client_ip_var: ContextVar[str | None] = ContextVar("client_ip", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Optional request ID. If not provided, generates a new one.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def get_user_id() -> str | None:
    """Get the current user ID."""
    return user_id_var.get()


def set_user_id(user_id: str | UUID | None) -> None:
    """Set the acting user for the current context."""
    user_id_var.set(str(user_id) if user_id is not None else None)


def get_client_ip() -> str | None:
    """Get the client IP address of the current request."""
    return client_ip_var.get()


def set_client_ip(client_ip: str | None) -> None:
    """Set the client IP address for the current context."""
    client_ip_var.set(client_ip)


def get_context() -> dict[str, Any]:
    """Get all context variables as a dictionary.

    Unset values are left out.
    """
    context: dict[str, Any] = {}

    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id

    user_id = get_user_id()
    if user_id:
        context["user_id"] = user_id

    client_ip = get_client_ip()
    if client_ip:
        context["client_ip"] = client_ip

    return context


def clear_context() -> None:
    """Clear all context variables."""
    request_id_var.set("")
    user_id_var.set(None)
    client_ip_var.set(None)


class RequestContext:
    """Context manager for request scope.

    Usage:
        with RequestContext(user_id=admin_id, client_ip="10.0.0.7"):
            await comment_service.delete(ids)  # audit rows carry both values
    """

    def __init__(
        self,
        request_id: str | None = None,
        user_id: str | UUID | None = None,
        client_ip: str | None = None,
    ) -> None:
        self.request_id = request_id
        self.user_id = user_id
        self.client_ip = client_ip
        self._tokens: list[tuple[ContextVar[Any], Any]] = []

    def __enter__(self) -> "RequestContext":
        """Enter context and set variables."""
        request_id = self.request_id or generate_request_id()
        self._tokens.append((request_id_var, request_id_var.set(request_id)))
        if self.user_id is not None:
            self._tokens.append((user_id_var, user_id_var.set(str(self.user_id))))
        if self.client_ip is not None:
            self._tokens.append((client_ip_var, client_ip_var.set(self.client_ip)))
        return self

    def __exit__(self, *_: object) -> None:
        """Exit context and restore previous values."""
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()
