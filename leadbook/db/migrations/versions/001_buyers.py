"""Create user directory, buyers and buyer history tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables: users, buyers, buyer_history
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _in(column: str, values: tuple[str, ...]) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


def upgrade() -> None:
    """Create buyer lead tables."""
    op.create_table(
        "users",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(100)),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.CheckConstraint(_in("role", ("user", "admin")), name="chk_user_role"),
    )

    op.create_table(
        "buyers",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(15), nullable=False),
        sa.Column("city", sa.String(20), nullable=False),
        sa.Column("property_type", sa.String(20), nullable=False),
        sa.Column("bhk", sa.String(10)),
        sa.Column("purpose", sa.String(10), nullable=False),
        sa.Column("budget_min", sa.Integer),
        sa.Column("budget_max", sa.Integer),
        sa.Column("timeline", sa.String(20), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="New"),
        sa.Column("notes", sa.Text),
        sa.Column("tags", ARRAY(sa.Text), nullable=False, server_default="{}"),
        sa.Column("owner_id", UUID, nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint(
            "budget_min IS NULL OR budget_max IS NULL OR budget_max >= budget_min",
            name="chk_buyer_budget",
        ),
        sa.CheckConstraint(
            _in("city", ("Chandigarh", "Mohali", "Zirakpur", "Panchkula", "Other")),
            name="chk_buyer_city",
        ),
        sa.CheckConstraint(
            _in("property_type", ("Apartment", "Villa", "Plot", "Office", "Retail")),
            name="chk_buyer_property_type",
        ),
        sa.CheckConstraint(
            _in(
                "status",
                ("New", "Qualified", "Contacted", "Visited", "Negotiation", "Converted", "Dropped"),
            ),
            name="chk_buyer_status",
        ),
    )
    op.create_index("idx_buyers_owner", "buyers", ["owner_id"])
    op.create_index("idx_buyers_updated_at", "buyers", ["updated_at"])
    op.create_index("idx_buyers_status", "buyers", ["status"])

    op.create_table(
        "buyer_history",
        sa.Column("id", UUID, primary_key=True),
        sa.Column(
            "buyer_id",
            UUID,
            sa.ForeignKey("buyers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("changed_by", UUID, nullable=False),
        sa.Column("changed_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("diff", JSONB, nullable=False),
    )
    op.create_index(
        "idx_buyer_history_buyer",
        "buyer_history",
        ["buyer_id", sa.text("changed_at DESC")],
    )


def downgrade() -> None:
    """Drop buyer lead tables."""
    op.drop_index("idx_buyer_history_buyer", table_name="buyer_history")
    op.drop_table("buyer_history")
    op.drop_index("idx_buyers_status", table_name="buyers")
    op.drop_index("idx_buyers_updated_at", table_name="buyers")
    op.drop_index("idx_buyers_owner", table_name="buyers")
    op.drop_table("buyers")
    op.drop_table("users")
