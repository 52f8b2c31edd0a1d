"""Shared utilities: datetime and id generators."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid, generate_object_token

__all__ = [
    "generate_cuid",
    "generate_object_token",
    "utc_now",
    "ensure_utc",
]
