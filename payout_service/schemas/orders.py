from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from payout_service.core.enums import OrderStatus, RefundPaidBy


class OrderCreate(BaseModel):
    restaurant_id: str = Field(..., pattern=r"^res_")
    total_cents: int = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None


class OrderRefund(BaseModel):
    refund_paid_by: RefundPaidBy
    # Defaults to the full order total.
    refund_amount_cents: Optional[int] = Field(default=None, ge=0)


class OrderResponse(BaseModel):
    id: int
    restaurant_id: str
    total_cents: int
    status: OrderStatus
    refund_amount_cents: Optional[int] = None
    refund_paid_by: Optional[RefundPaidBy] = None
    created_at: datetime
    meta: dict = Field(
        default_factory=lambda: {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": str(uuid4()),
        }
    )

    model_config = ConfigDict(from_attributes=True)
