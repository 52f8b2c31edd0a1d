"""Request body size limit middleware for direct uploads.

Only requests under the given path prefixes are checked (the local backend's
upload-grant endpoint); catalog JSON requests are left to FastAPI. Enforces
the limit for both Content-Length and chunked bodies. Raw ASGI.
"""

import json
from typing import Any, Callable

from app.middleware.request_id import get_header


async def _send_413(send: Callable, max_bytes: int, actual: int | None = None) -> None:
    """Send 413 Payload Too Large response."""
    details: dict[str, Any] = {"max_bytes": max_bytes}
    if actual is not None:
        details["content_length"] = actual
    body = json.dumps(
        {
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Upload must be at most {max_bytes} bytes",
            "details": details,
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


def RequestSizeLimitMiddleware(
    app: Callable, max_bytes: int, path_prefixes: tuple[str, ...] = ("/",)
) -> Callable:
    """Reject bodies over max_bytes for paths under path_prefixes. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or not scope.get("path", "").startswith(path_prefixes):
            await app(scope, receive, send)
            return

        content_length = get_header(scope, "content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > max_bytes:
                await _send_413(send, max_bytes, int(content_length))
                return
            await app(scope, receive, send)
            return

        total = 0
        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        async def limited_receive() -> dict:
            nonlocal total
            message = await receive()
            if message["type"] == "http.request":
                total += len(message.get("body", b""))
                if total > max_bytes:
                    raise _BodyTooLarge(total)
            return message

        try:
            await app(scope, limited_receive, send_wrapper)
        except _BodyTooLarge as e:
            if response_started:
                raise
            await _send_413(send, max_bytes, e.size)

    return asgi_app


class _BodyTooLarge(Exception):
    def __init__(self, size: int) -> None:
        super().__init__(size)
        self.size = size
