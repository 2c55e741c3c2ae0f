from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from payout_service.core.enums import CommissionType, PayoutFrequency


class CommissionConfig(BaseModel):
    commission_type: Optional[CommissionType] = CommissionType.PERCENTAGE
    commission_rate: Optional[Decimal] = None
    fixed_commission_amount_cents: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class RestaurantCreate(BaseModel):
    id: str = Field(..., pattern=r"^res_", max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    commission_type: CommissionType = CommissionType.PERCENTAGE
    commission_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    fixed_commission_amount_cents: Optional[int] = Field(default=None, ge=0)
    payout_frequency: PayoutFrequency = PayoutFrequency.MONTHLY


class CommissionUpdate(BaseModel):
    commission_type: CommissionType
    commission_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    fixed_commission_amount_cents: Optional[int] = Field(default=None, ge=0)


class RestaurantResponse(BaseModel):
    id: str
    name: str
    is_active: bool
    commission_type: CommissionType
    commission_rate: Optional[Decimal] = None
    fixed_commission_amount_cents: Optional[int] = None
    payout_frequency: PayoutFrequency
    created_at: datetime
    meta: dict = Field(
        default_factory=lambda: {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": str(uuid4()),
        }
    )

    model_config = ConfigDict(from_attributes=True)


class RestaurantCommission(BaseModel):
    restaurant_id: str
    restaurant_name: str
    commission_type: CommissionType
    commission_rate: Optional[Decimal] = None
    fixed_commission_amount_cents: Optional[int] = None
    order_count: int
    commission_earned_cents: int


class CommissionSummary(BaseModel):
    restaurants: list[RestaurantCommission] = Field(default_factory=list)
    total_commission_cents: int = 0
