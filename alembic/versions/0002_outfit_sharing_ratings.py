"""outfit sharing and ratings

Revision ID: 0002_outfit_sharing_ratings
Revises: 0001_init
Create Date: 2026-09-20
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0002_outfit_sharing_ratings"
down_revision = "0001_init"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("outfit", sa.Column("name", sa.Text(), nullable=True))
    op.add_column("outfit", sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.text("false")))
    op.add_column("outfit", sa.Column("share_id", sa.String(length=16), nullable=True))
    op.create_unique_constraint("uq_outfit_share_id", "outfit", ["share_id"])

    op.create_table(
        "outfit_rating",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("outfit_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("outfit.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.UniqueConstraint("user_id", "outfit_id", name="uq_outfit_rating_user_outfit"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_outfit_rating_range"),
    )
    op.create_index("ix_outfit_rating_outfit_id", "outfit_rating", ["outfit_id"])


def downgrade() -> None:
    op.drop_index("ix_outfit_rating_outfit_id", table_name="outfit_rating")
    op.drop_table("outfit_rating")
    op.drop_constraint("uq_outfit_share_id", "outfit", type_="unique")
    op.drop_column("outfit", "share_id")
    op.drop_column("outfit", "is_public")
    op.drop_column("outfit", "name")
