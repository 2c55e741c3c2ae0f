from datetime import datetime, date, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from payout_service.core.enums import PaymentMethod, PayoutFrequency, PayoutStatus


class PayoutStatement(BaseModel):
    """Computed payout, ready to be persisted."""

    restaurant_id: str
    restaurant_name: str
    period_start: datetime
    period_end: datetime
    payout_frequency: PayoutFrequency
    total_orders: int
    gross_earnings_cents: int
    platform_commission_cents: int
    refunds_paid_by_platform_cents: int
    refunds_paid_by_restaurant_cents: int
    already_paid_cents: int
    net_payout_cents: int = Field(..., ge=0)
    status: PayoutStatus = PayoutStatus.PENDING


class PayoutCreate(BaseModel):
    restaurant_id: str = Field(..., pattern=r"^res_")
    payout_frequency: Optional[PayoutFrequency] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    # Reference date for frequency periods; omitted means the last complete one.
    as_of: Optional[date] = None

    @model_validator(mode="after")
    def check_period_bounds(self) -> "PayoutCreate":
        if (self.period_start is None) != (self.period_end is None):
            raise ValueError("period_start and period_end must be given together")
        return self


class PayoutRunRequest(BaseModel):
    as_of: date
    payout_frequency: PayoutFrequency = PayoutFrequency.MONTHLY

    @field_validator("payout_frequency")
    @classmethod
    def check_frequency(cls, value: PayoutFrequency) -> PayoutFrequency:
        if value == PayoutFrequency.CUSTOM:
            raise ValueError("batch runs need a daily, weekly or monthly frequency")
        return value


class PayoutMarkPaid(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    notes: Optional[str] = Field(default=None, max_length=2000)


class PayoutStatusUpdate(BaseModel):
    status: PayoutStatus
    failure_reason: Optional[str] = None


class PayoutFilters(BaseModel):
    restaurant_id: Optional[str] = None
    status: Optional[PayoutStatus] = None
    period_start_from: Optional[datetime] = None
    period_end_to: Optional[datetime] = None
    limit: int = Field(default=50, gt=0, le=500)


class PayoutResponse(BaseModel):
    id: int
    restaurant_id: str
    restaurant_name: str
    period_start: datetime
    period_end: datetime
    payout_frequency: PayoutFrequency
    total_orders: int
    gross_earnings_cents: int
    platform_commission_cents: int
    refunds_paid_by_platform_cents: int
    refunds_paid_by_restaurant_cents: int
    net_payout_cents: int
    status: PayoutStatus
    created_at: datetime
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    failure_reason: Optional[str] = None
    meta: dict = Field(
        default_factory=lambda: {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": str(uuid4()),
        }
    )

    model_config = ConfigDict(from_attributes=True)


class PayoutListResponse(BaseModel):
    items: list[PayoutResponse] = Field(default_factory=list)
    count: int = 0


class PayoutSummary(BaseModel):
    payout_count: int
    total_amount_cents: int
    total_paid_cents: int
    total_pending_cents: int
    average_payout_cents: int
    currency: str


class PayoutGenerateResponse(BaseModel):
    message: str
    as_of: date
    payout_frequency: PayoutFrequency
