"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.photo import PhotoEntity

__all__ = [
    "PhotoEntity",
]
