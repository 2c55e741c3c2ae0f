import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.enums import CommissionType, OrderStatus
from payout_service.db.models import Restaurant
from payout_service.db.repositories import OrderRepository, RestaurantRepository
from payout_service.exceptions import (
    InvalidConfigurationException,
    RestaurantNotFoundException,
)
from payout_service.schemas.restaurants import (
    CommissionConfig,
    CommissionSummary,
    CommissionUpdate,
    RestaurantCommission,
)
from payout_service.services.commission_policy import resolve_commission_rule
from payout_service.services.payout_calculator import to_cents

logger = logging.getLogger(__name__)


class CommissionService:
    def __init__(self, session: AsyncSession) -> None:
        self.restaurant_repo = RestaurantRepository(session)
        self.order_repo = OrderRepository(session)

    async def update_commission(
        self, restaurant_id: str, update: CommissionUpdate
    ) -> Restaurant:
        """Switch a restaurant between fixed and percentage commission.

        Fixed mode keeps the previous rate on record; percentage mode clears
        the fixed amount.
        """
        restaurant = await self.restaurant_repo.get_by_id(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundException(restaurant_id)

        if update.commission_type == CommissionType.PERCENTAGE:
            if update.commission_rate is None:
                raise InvalidConfigurationException(
                    "percentage commission requires commission_rate",
                    restaurant_id=restaurant_id,
                )
            rate = update.commission_rate
            fixed_amount = None
        else:
            if update.fixed_commission_amount_cents is None:
                raise InvalidConfigurationException(
                    "fixed commission requires fixed_commission_amount_cents",
                    restaurant_id=restaurant_id,
                )
            rate = restaurant.commission_rate
            fixed_amount = update.fixed_commission_amount_cents

        await self.restaurant_repo.update_commission(
            restaurant,
            commission_type=update.commission_type,
            commission_rate=rate,
            fixed_commission_amount_cents=fixed_amount,
        )

        logger.info(
            "Commission updated restaurant_id=%s commission_type=%s",
            restaurant_id,
            update.commission_type.value,
            extra={
                "restaurant_id": restaurant_id,
                "commission_type": update.commission_type.value,
                "commission_rate": str(rate) if rate is not None else None,
                "fixed_commission_amount_cents": fixed_amount,
            },
        )
        return restaurant

    async def commission_summary(self) -> CommissionSummary:
        """Commission earned per active restaurant from delivered orders."""
        restaurants = await self.restaurant_repo.list_active()
        delivered = await self.order_repo.list_by_status(OrderStatus.DELIVERED)

        orders_by_restaurant: dict[str, list[int]] = {}
        for order in delivered:
            orders_by_restaurant.setdefault(order.restaurant_id, []).append(
                order.total_cents
            )

        summary = CommissionSummary()
        for restaurant in restaurants:
            config = CommissionConfig.model_validate(restaurant)
            rule = resolve_commission_rule(config, restaurant_id=restaurant.id)
            totals = orders_by_restaurant.get(restaurant.id, [])
            earned = to_cents(
                sum((rule.commission_for(t) for t in totals), Decimal(0))
            )

            summary.restaurants.append(
                RestaurantCommission(
                    restaurant_id=restaurant.id,
                    restaurant_name=restaurant.name,
                    commission_type=rule.commission_type,
                    commission_rate=rule.rate,
                    fixed_commission_amount_cents=rule.fixed_amount_cents,
                    order_count=len(totals),
                    commission_earned_cents=earned,
                )
            )
            summary.total_commission_cents += earned

        return summary
