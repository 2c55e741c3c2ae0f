from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Numeric,
    String,
    func,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column

from payout_service.core.enums import CommissionType, PayoutFrequency
from payout_service.db.base import Base


class Restaurant(Base):
    """Restaurant entity with its commission settings. ID must start with 'res_'."""

    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, server_default=true(), nullable=False
    )
    commission_type: Mapped[CommissionType] = mapped_column(
        String(20), server_default="percentage", nullable=False
    )
    commission_rate: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(5, 2), nullable=True
    )
    fixed_commission_amount_cents: Mapped[Optional[int]] = mapped_column(
        BigInteger, nullable=True
    )
    payout_frequency: Mapped[PayoutFrequency] = mapped_column(
        String(20), server_default="monthly", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("id LIKE 'res_%'", name="restaurant_id_format"),
        CheckConstraint(
            "commission_type IN ('fixed', 'percentage')",
            name="valid_commission_type",
        ),
        CheckConstraint(
            "commission_rate IS NULL OR (commission_rate >= 0 AND commission_rate <= 100)",
            name="commission_rate_range",
        ),
        CheckConstraint(
            "payout_frequency IN ('daily', 'weekly', 'monthly', 'custom')",
            name="valid_payout_frequency",
        ),
        Index(
            "idx_restaurants_active",
            "is_active",
            postgresql_where="is_active = TRUE",
        ),
    )
