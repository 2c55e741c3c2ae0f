from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from payout_service.core.enums import PaymentMethod, PayoutFrequency, PayoutStatus
from payout_service.db.base import Base, BigIntPK


class Payout(Base):
    """Payout statement for one restaurant and period.

    Status lifecycle: pending → processing → paid/failed.
    """

    __tablename__ = "payouts"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    restaurant_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("restaurants.id", ondelete="RESTRICT"), nullable=False
    )
    restaurant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    period_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    period_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    payout_frequency: Mapped[PayoutFrequency] = mapped_column(
        String(20), nullable=False
    )
    total_orders: Mapped[int] = mapped_column(
        Integer, server_default="0", nullable=False
    )
    gross_earnings_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    platform_commission_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    refunds_paid_by_platform_cents: Mapped[int] = mapped_column(
        BigInteger, server_default="0", nullable=False
    )
    refunds_paid_by_restaurant_cents: Mapped[int] = mapped_column(
        BigInteger, server_default="0", nullable=False
    )
    already_paid_cents: Mapped[int] = mapped_column(
        BigInteger, server_default="0", nullable=False
    )
    net_payout_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[PayoutStatus] = mapped_column(
        String(50), server_default="pending", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        String(50), nullable=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("net_payout_cents >= 0", name="non_negative_net_payout"),
        CheckConstraint("period_start <= period_end", name="valid_payout_period"),
        CheckConstraint(
            "status IN ('pending', 'processing', 'paid', 'failed')",
            name="valid_payout_status",
        ),
        CheckConstraint(
            "payout_frequency IN ('daily', 'weekly', 'monthly', 'custom')",
            name="valid_payout_frequency",
        ),
        CheckConstraint(
            "(status = 'paid' AND paid_at IS NOT NULL) OR (status != 'paid' AND paid_at IS NULL)",
            name="paid_at_consistency",
        ),
        UniqueConstraint(
            "restaurant_id",
            "period_start",
            "period_end",
            name="uq_payout_restaurant_period",
        ),
        Index("idx_payouts_restaurant_status", "restaurant_id", "status"),
        Index(
            "idx_payouts_pending",
            "restaurant_id",
            postgresql_where="status IN ('pending', 'processing')",
        ),
        Index("idx_payouts_created", "created_at"),
    )
