"""Request timeout middleware.

Cancels the request if it runs longer than the configured timeout
(asyncio.wait_for). A write that has already changed the object store is not
interrupted: the photo coordinator defers cancellation until the matching
metadata commit is done, so a timed-out replace or delete still answers 504
but leaves both stores consistent. Raw ASGI.
"""

import asyncio
import json
import logging
from typing import Callable

logger = logging.getLogger(__name__)


async def _send_504(send: Callable, timeout_seconds: float) -> None:
    body = json.dumps(
        {
            "error": "GATEWAY_TIMEOUT",
            "message": f"Request timed out after {timeout_seconds:g} seconds",
            "details": {"timeout_seconds": timeout_seconds},
        }
    ).encode()
    await send({
        "type": "http.response.start",
        "status": 504,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


def TimeoutMiddleware(app: Callable, timeout_seconds: float) -> Callable:
    """Cancel request after timeout_seconds; 504 unless the response already started."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                app(scope, receive, send_wrapper), timeout=float(timeout_seconds)
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out after %s seconds: %s %s",
                timeout_seconds,
                scope.get("method", ""),
                scope.get("path", ""),
            )
            if not response_started:
                await _send_504(send, timeout_seconds)

    return asgi_app
