"""create track, track item and progress tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create track tables."""
    op.create_table(
        "tracks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "published", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index(
        "idx_tracks_published_created",
        "tracks",
        ["published", "created_at"],
        unique=False,
    )

    op.create_table(
        "track_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "track_id",
            sa.Integer(),
            sa.ForeignKey("tracks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "type IN ('article', 'lesson', 'tool')", name="check_track_item_type"
        ),
    )
    op.create_index(
        "idx_track_items_track_order",
        "track_items",
        ["track_id", "order"],
        unique=False,
    )

    op.create_table(
        "user_track_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "track_item_id",
            sa.Integer(),
            sa.ForeignKey("track_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "completed", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "user_id",
            "track_item_id",
            name="user_track_items_user_id_track_item_id_unique",
        ),
    )
    op.create_index(
        "idx_user_track_items_user",
        "user_track_items",
        ["user_id", "completed"],
        unique=False,
    )


def downgrade() -> None:
    """Drop track tables."""
    op.drop_index("idx_user_track_items_user", table_name="user_track_items")
    op.drop_table("user_track_items")
    op.drop_index("idx_track_items_track_order", table_name="track_items")
    op.drop_table("track_items")
    op.drop_index("idx_tracks_published_created", table_name="tracks")
    op.drop_table("tracks")
