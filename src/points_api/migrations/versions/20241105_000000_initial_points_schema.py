"""
Initial points schema: daily_point log and user_summary totals.

Revision ID: 20241105_000000_initial_points_schema
Revises:
Create Date: 2024-11-05 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20241105_000000_initial_points_schema"
down_revision = None
branch_labels = None
depends_on = None


def _amount(name: str) -> sa.Column:
    return sa.Column(name, sa.Float(), nullable=False, server_default=sa.text("0"))


def upgrade() -> None:
    # daily_point
    op.create_table(
        "daily_point",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        _amount("stake_usd"),
        _amount("debt_usd"),
        _amount("blend_lend"),
        _amount("blend_borrow"),
        _amount("yuzu_lend"),
        _amount("yuzu_borrow"),
        _amount("blend_point"),
        _amount("yuzu_point"),
        sa.Column("send_date", sa.String(length=10), nullable=False),
        sa.Column(
            "last_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="daily_point_pkey"),
    )
    op.create_index(
        "idx_daily_point_user_send_date", "daily_point", ["user_id", "send_date"]
    )
    op.create_index("idx_daily_point_last_time", "daily_point", ["last_time"])

    # user_summary
    op.create_table(
        "user_summary",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        _amount("blend_lend"),
        _amount("blend_borrow"),
        _amount("yuzu_lend"),
        _amount("yuzu_borrow"),
        _amount("blend_point"),
        _amount("yuzu_point"),
        sa.Column(
            "last_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="user_summary_pkey"),
        sa.UniqueConstraint("user_id", name="user_summary_user_id_key"),
    )


def downgrade() -> None:
    op.drop_table("user_summary")
    op.drop_index("idx_daily_point_last_time", table_name="daily_point")
    op.drop_index("idx_daily_point_user_send_date", table_name="daily_point")
    op.drop_table("daily_point")
