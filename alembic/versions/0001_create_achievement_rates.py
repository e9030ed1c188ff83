"""Create achievement rates table

Revision ID: 0001
Revises:
Create Date: 2025-09-07

"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "achievement_rates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("target", sa.Float(), nullable=True),
        sa.Column("achieved", sa.Float(), nullable=True),
        sa.Column("rate", sa.Float(), nullable=True),
        sa.Column("period", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index(
        "ix_achievement_rates_created_at", "achievement_rates", ["created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_achievement_rates_created_at", table_name="achievement_rates")
    op.drop_table("achievement_rates")
