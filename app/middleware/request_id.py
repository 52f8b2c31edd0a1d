"""Request ID middleware.

Generates or forwards X-Request-ID, exposes it to log records through
app.shared.context for the lifetime of the request, and echoes it on the
response. Client-provided values are sanitized (length + character set) so
they are safe to write into logs. Raw ASGI (no BaseHTTPMiddleware).
"""

import re
import uuid
from typing import Callable

from app.shared.context import reset_request_id, set_request_id

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if valid and safe; otherwise return a new UUID hex."""
    candidate = (raw or "").strip()
    if not REQUEST_ID_ALLOWED_PATTERN.match(candidate):
        return uuid.uuid4().hex
    return candidate


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Add or forward the request ID header on each request and response. Raw ASGI."""
    encoded_name = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = [
                    (k, v) for k, v in message.get("headers", []) if k.lower() != encoded_name
                ]
                headers.append((encoded_name, request_id.encode()))
                message["headers"] = headers
            await send(message)

        token = set_request_id(request_id)
        try:
            await app(scope, receive, send_wrapper)
        finally:
            reset_request_id(token)

    return asgi_app
