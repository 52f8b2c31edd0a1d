"""Shared utilities: logging setup, request context and id/datetime helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    ensure_utc,
    generate_cuid,
    generate_object_token,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "generate_object_token",
    "utc_now",
    "ensure_utc",
]
