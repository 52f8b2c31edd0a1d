"""Request context management using contextvars.

Holds the current request ID so log records emitted anywhere while serving a
request (use cases, storage backends) can be correlated with the response's
X-Request-ID header.

Usage:
    token = set_request_id("3f0c...")
    request_id = get_request_id()
    reset_request_id(token)
"""

from contextvars import ContextVar, Token

_current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


def set_request_id(request_id: str | None) -> Token[str | None]:
    """Set the request ID for this context; returns a token for reset_request_id."""
    return _current_request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    """Restore the request ID that was current before set_request_id."""
    _current_request_id.reset(token)


def get_request_id() -> str | None:
    """Return the current request ID, or None outside a request."""
    return _current_request_id.get()
