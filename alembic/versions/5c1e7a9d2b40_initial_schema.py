"""Initial schema: users, places, visits, saves, friendships, recommendations, earned_badges

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-19 09:12:31.114208

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5c1e7a9d2b40'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "places",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("google_place_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("lat", sa.Float, nullable=True),
        sa.Column("lng", sa.Float, nullable=True),
        sa.Column("photo_url", sa.Text, nullable=True),
        sa.Column("price_level", sa.Integer, nullable=True),
        sa.Column("rating", sa.Float, nullable=True),
        sa.UniqueConstraint("google_place_id", name="uq_places_google_place_id"),
    )

    op.create_table(
        "visits",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("place_id", sa.String(64), sa.ForeignKey("places.id", ondelete="CASCADE"), nullable=False),
        sa.Column("method", sa.String(20), nullable=False),
        sa.Column("verified_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "place_id", name="uq_visits_user_place"),
    )
    op.create_index("ix_visits_user_verified", "visits", ["user_id", "verified_at"])

    op.create_table(
        "saves",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("place_id", sa.String(64), sa.ForeignKey("places.id", ondelete="CASCADE"), nullable=False),
        sa.Column("intent", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "place_id", name="uq_saves_user_place"),
    )

    op.create_table(
        "friendships",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("sender_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("receiver_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("sender_id", "receiver_id", name="uq_friendships_pair"),
    )
    op.create_index(
        "ix_friendships_receiver_status", "friendships", ["receiver_id", "status"],
    )

    op.create_table(
        "recommendations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("sender_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("receiver_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("place_id", sa.String(64), sa.ForeignKey("places.id", ondelete="CASCADE"), nullable=False),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_recommendations_sender", "recommendations", ["sender_id"])

    # The uniqueness constraint is what makes concurrent badge evaluation safe.
    op.create_table(
        "earned_badges",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("badge_type", sa.String(50), nullable=False),
        sa.Column("earned_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "badge_type", name="uq_earned_badges_user_type"),
    )


def downgrade() -> None:
    op.drop_table("earned_badges")
    op.drop_index("ix_recommendations_sender", table_name="recommendations")
    op.drop_table("recommendations")
    op.drop_index("ix_friendships_receiver_status", table_name="friendships")
    op.drop_table("friendships")
    op.drop_table("saves")
    op.drop_index("ix_visits_user_verified", table_name="visits")
    op.drop_table("visits")
    op.drop_table("places")
    op.drop_table("users")
