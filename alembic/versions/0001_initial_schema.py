"""initial schema: restaurants, orders, payouts

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "restaurants",
        sa.Column("id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
        ),
        sa.Column(
            "commission_type",
            sa.String(length=20),
            server_default=sa.text("'percentage'"),
            nullable=False,
        ),
        sa.Column("commission_rate", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column("fixed_commission_amount_cents", sa.BigInteger(), nullable=True),
        sa.Column(
            "payout_frequency",
            sa.String(length=20),
            server_default=sa.text("'monthly'"),
            nullable=False,
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
        sa.CheckConstraint("id LIKE 'res_%'", name="restaurant_id_format"),
        sa.CheckConstraint(
            "commission_type IN ('fixed', 'percentage')",
            name="valid_commission_type",
        ),
        sa.CheckConstraint(
            "commission_rate IS NULL OR (commission_rate >= 0 AND commission_rate <= 100)",
            name="commission_rate_range",
        ),
        sa.CheckConstraint(
            "payout_frequency IN ('daily', 'weekly', 'monthly', 'custom')",
            name="valid_payout_frequency",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_restaurants_active",
        "restaurants",
        ["is_active"],
        unique=False,
        postgresql_where=sa.text("is_active = TRUE"),
    )

    op.create_table(
        "orders",
        sa.Column(
            "id",
            sa.BigInteger(),
            sa.Identity(always=False),
            nullable=False,
        ),
        sa.Column("restaurant_id", sa.String(length=50), nullable=False),
        sa.Column("total_cents", sa.BigInteger(), nullable=False),
        sa.Column(
            "status",
            sa.String(length=50),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        sa.Column("refund_amount_cents", sa.BigInteger(), nullable=True),
        sa.Column("refund_paid_by", sa.String(length=20), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("total_cents >= 0", name="non_negative_total"),
        sa.CheckConstraint(
            "refund_amount_cents IS NULL OR refund_amount_cents >= 0",
            name="non_negative_refund",
        ),
        sa.CheckConstraint(
            "refund_paid_by IS NULL OR refund_paid_by IN ('restaurant', 'platform')",
            name="valid_refund_paid_by",
        ),
        sa.ForeignKeyConstraint(
            ["restaurant_id"],
            ["restaurants.id"],
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_orders_restaurant_created",
        "orders",
        ["restaurant_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "payouts",
        sa.Column(
            "id",
            sa.BigInteger(),
            sa.Identity(always=False),
            nullable=False,
        ),
        sa.Column("restaurant_id", sa.String(length=50), nullable=False),
        sa.Column("restaurant_name", sa.String(length=255), nullable=False),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payout_frequency", sa.String(length=20), nullable=False),
        sa.Column(
            "total_orders", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("gross_earnings_cents", sa.BigInteger(), nullable=False),
        sa.Column("platform_commission_cents", sa.BigInteger(), nullable=False),
        sa.Column(
            "refunds_paid_by_platform_cents",
            sa.BigInteger(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "refunds_paid_by_restaurant_cents",
            sa.BigInteger(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "already_paid_cents",
            sa.BigInteger(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column("net_payout_cents", sa.BigInteger(), nullable=False),
        sa.Column(
            "status",
            sa.String(length=50),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_method", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("failure_reason", sa.Text(), nullable=True),
        sa.CheckConstraint("net_payout_cents >= 0", name="non_negative_net_payout"),
        sa.CheckConstraint("period_start <= period_end", name="valid_payout_period"),
        sa.CheckConstraint(
            "status IN ('pending', 'processing', 'paid', 'failed')",
            name="valid_payout_status",
        ),
        sa.CheckConstraint(
            "payout_frequency IN ('daily', 'weekly', 'monthly', 'custom')",
            name="valid_payout_frequency",
        ),
        sa.CheckConstraint(
            "(status = 'paid' AND paid_at IS NOT NULL) OR (status != 'paid' AND paid_at IS NULL)",
            name="paid_at_consistency",
        ),
        sa.ForeignKeyConstraint(
            ["restaurant_id"],
            ["restaurants.id"],
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "restaurant_id",
            "period_start",
            "period_end",
            name="uq_payout_restaurant_period",
        ),
    )

    op.create_index(
        "idx_payouts_restaurant_status",
        "payouts",
        ["restaurant_id", "status"],
        unique=False,
    )
    op.create_index(
        "idx_payouts_pending",
        "payouts",
        ["restaurant_id"],
        unique=False,
        postgresql_where=sa.text("status IN ('pending', 'processing')"),
    )
    op.create_index(
        "idx_payouts_created",
        "payouts",
        ["created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_payouts_created", table_name="payouts")
    op.drop_index("idx_payouts_pending", table_name="payouts")
    op.drop_index("idx_payouts_restaurant_status", table_name="payouts")
    op.drop_table("payouts")
    op.drop_index("idx_orders_restaurant_created", table_name="orders")
    op.drop_table("orders")
    op.drop_index("idx_restaurants_active", table_name="restaurants")
    op.drop_table("restaurants")
