import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.enums import CommissionType, PayoutFrequency
from payout_service.db.models import Restaurant

logger = logging.getLogger(__name__)


class RestaurantRepository:

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        restaurant_id: str,
        name: str,
        commission_type: CommissionType = CommissionType.PERCENTAGE,
        commission_rate: Optional[Decimal] = None,
        fixed_commission_amount_cents: Optional[int] = None,
        payout_frequency: PayoutFrequency = PayoutFrequency.MONTHLY,
    ) -> Restaurant:
        restaurant = Restaurant(
            id=restaurant_id,
            name=name,
            commission_type=commission_type,
            commission_rate=commission_rate,
            fixed_commission_amount_cents=fixed_commission_amount_cents,
            payout_frequency=payout_frequency,
        )
        self.session.add(restaurant)
        await self.session.flush()
        logger.info(
            "Created new restaurant restaurant_id=%s",
            restaurant_id,
            extra={"restaurant_id": restaurant_id},
        )
        return restaurant

    async def list_active(self) -> list[Restaurant]:
        stmt = (
            select(Restaurant)
            .where(Restaurant.is_active.is_(True))
            .order_by(Restaurant.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, restaurant_id: str) -> Optional[Restaurant]:
        stmt = select(Restaurant).where(Restaurant.id == restaurant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_commission(
        self,
        restaurant: Restaurant,
        commission_type: CommissionType,
        commission_rate: Optional[Decimal],
        fixed_commission_amount_cents: Optional[int],
    ) -> Restaurant:
        restaurant.commission_type = commission_type
        restaurant.commission_rate = commission_rate
        restaurant.fixed_commission_amount_cents = fixed_commission_amount_cents
        await self.session.flush()
        return restaurant
