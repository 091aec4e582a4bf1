"""wardrobe items and users

Revision ID: 0001_wardrobe_core
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_wardrobe_core"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("name_key", sa.String(length=200), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "wardrobe_item",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("sub_category", sa.String(length=64), nullable=True),
        sa.Column("color", sa.String(length=64), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("occasion", sa.String(length=32), nullable=True),
        sa.Column("wear_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_worn_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("category IN ('top', 'bottom', 'shoes', 'accessory')", name="ck_wardrobe_item_category"),
        sa.CheckConstraint("wear_count >= 0", name="ck_wardrobe_item_wear_count"),
    )
    op.create_index("ix_wardrobe_item_user_id", "wardrobe_item", ["user_id"])
    op.create_index("ix_wardrobe_item_user_occasion", "wardrobe_item", ["user_id", "occasion"])


def downgrade() -> None:
    op.drop_index("ix_wardrobe_item_user_occasion", table_name="wardrobe_item")
    op.drop_index("ix_wardrobe_item_user_id", table_name="wardrobe_item")
    op.drop_table("wardrobe_item")
    op.drop_table("user")
