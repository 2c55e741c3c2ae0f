from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from payout_service.core.enums import OrderStatus, RefundPaidBy
from payout_service.db.base import Base, BigIntPK


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(
        BigIntPK,
        primary_key=True,
        autoincrement=True,
    )
    restaurant_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("restaurants.id", ondelete="RESTRICT"), nullable=False
    )
    total_cents: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[OrderStatus] = mapped_column(
        String(50), server_default="pending", nullable=False
    )
    refund_amount_cents: Mapped[Optional[int]] = mapped_column(
        BigInteger, nullable=True
    )
    refund_paid_by: Mapped[Optional[RefundPaidBy]] = mapped_column(
        String(20), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("total_cents >= 0", name="non_negative_total"),
        CheckConstraint(
            "refund_amount_cents IS NULL OR refund_amount_cents >= 0",
            name="non_negative_refund",
        ),
        CheckConstraint(
            "refund_paid_by IS NULL OR refund_paid_by IN ('restaurant', 'platform')",
            name="valid_refund_paid_by",
        ),
        Index("idx_orders_restaurant_created", "restaurant_id", "created_at"),
    )
