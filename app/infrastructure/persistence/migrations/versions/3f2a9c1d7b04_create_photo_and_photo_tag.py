"""create_photo_and_photo_tag

Revision ID: 3f2a9c1d7b04
Revises:
Create Date: 2026-10-19 09:12:40.518273

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7b04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create photo catalog tables."""
    op.create_table(
        "photo",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("object_key", sa.String(length=512), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("camera", sa.String(length=255), nullable=True),
        sa.Column("likes", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("likes >= 0", name="ck_photo_likes_non_negative"),
        sa.CheckConstraint("length(title) > 0", name="ck_photo_title_not_empty"),
        sa.CheckConstraint(
            "length(description) > 0", name="ck_photo_description_not_empty"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("object_key"),
    )
    op.create_index(op.f("ix_photo_created_at"), "photo", ["created_at"])

    op.create_table(
        "photo_tag",
        sa.Column("photo_id", sa.String(), nullable=False),
        sa.Column("tag", sa.String(length=50), nullable=False),
        sa.ForeignKeyConstraint(["photo_id"], ["photo.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("photo_id", "tag"),
    )
    op.create_index(op.f("ix_photo_tag_tag"), "photo_tag", ["tag"])


def downgrade() -> None:
    """Drop photo catalog tables."""
    op.drop_index(op.f("ix_photo_tag_tag"), table_name="photo_tag")
    op.drop_table("photo_tag")
    op.drop_index(op.f("ix_photo_created_at"), table_name="photo")
    op.drop_table("photo")
