"""Photo ORM models. Catalog metadata; image bytes live in the object store."""

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Photo(CuidMixin, TimestampMixin, Base):
    """Photo entity. Table: photo. object_key is unique: keys are never shared."""

    __tablename__ = "photo"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    object_key: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    camera: Mapped[str | None] = mapped_column(String(255), nullable=True)
    likes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_photo_likes_non_negative"),
        CheckConstraint("length(title) > 0", name="ck_photo_title_not_empty"),
        CheckConstraint("length(description) > 0", name="ck_photo_description_not_empty"),
    )


class PhotoTag(Base):
    """One tag of one photo. Table: photo_tag. (photo_id, tag) is the primary key."""

    __tablename__ = "photo_tag"

    photo_id: Mapped[str] = mapped_column(
        String, ForeignKey("photo.id", ondelete="CASCADE"), primary_key=True
    )
    tag: Mapped[str] = mapped_column(String(50), primary_key=True, index=True)