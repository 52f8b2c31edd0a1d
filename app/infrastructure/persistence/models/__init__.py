"""ORM models. Import here so Alembic autogenerate sees every table."""

from app.infrastructure.persistence.models.photo import Photo, PhotoTag

__all__ = [
    "Photo",
    "PhotoTag",
]
