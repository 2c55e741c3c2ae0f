import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.enums import (
    EARNING_ORDER_STATUSES,
    OrderStatus,
    PayoutFrequency,
)
from payout_service.db.models import Payout, Restaurant
from payout_service.db.repositories import (
    OrderRepository,
    PayoutRepository,
    RestaurantRepository,
)
from payout_service.exceptions import (
    DuplicatePayoutPeriodException,
    InvalidConfigurationException,
    RestaurantNotFoundException,
)
from payout_service.metrics import (
    payout_amount_cents_total,
    payouts_total,
    pending_payouts_amount,
)
from payout_service.schemas.payouts import PayoutCreate, PayoutRunRequest
from payout_service.schemas.restaurants import CommissionConfig
from payout_service.services.payout_calculator import calculate_payout
from payout_service.services.payout_periods import (
    Period,
    period_for,
    previous_period,
    validate_period,
)

logger = logging.getLogger(__name__)

PAYOUT_ORDER_STATUSES = (*EARNING_ORDER_STATUSES, OrderStatus.REFUNDED)


class PayoutGenerator:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.payout_repo = PayoutRepository(session)
        self.order_repo = OrderRepository(session)
        self.restaurant_repo = RestaurantRepository(session)

    def _resolve_period(
        self, restaurant: Restaurant, payout_data: PayoutCreate
    ) -> tuple[PayoutFrequency, Period]:
        if payout_data.period_start and payout_data.period_end:
            return PayoutFrequency.CUSTOM, validate_period(
                payout_data.period_start, payout_data.period_end
            )

        frequency = payout_data.payout_frequency or PayoutFrequency(
            restaurant.payout_frequency
        )
        if payout_data.as_of is not None and frequency != PayoutFrequency.CUSTOM:
            return frequency, period_for(frequency, payout_data.as_of)
        today = datetime.now(timezone.utc).date()
        return frequency, previous_period(frequency, today)

    async def generate_payout(self, payout_data: PayoutCreate) -> Payout:
        """Compute and store a pending payout for one restaurant.

        Without explicit bounds the period comes from the requested (or the
        restaurant's) frequency: the period containing ``as_of``, or the last
        complete one when ``as_of`` is omitted.
        """
        restaurant_id = payout_data.restaurant_id
        restaurant = await self.restaurant_repo.get_by_id(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundException(restaurant_id)

        frequency, (period_start, period_end) = self._resolve_period(
            restaurant, payout_data
        )

        logger.info(
            "Starting payout generation restaurant_id=%s period_start=%s period_end=%s",
            restaurant_id,
            period_start.isoformat(),
            period_end.isoformat(),
            extra={
                "restaurant_id": restaurant_id,
                "period_start": period_start.isoformat(),
                "period_end": period_end.isoformat(),
            },
        )

        if await self.payout_repo.exists_for_period(
            restaurant_id, period_start, period_end
        ):
            logger.warning(
                "Payout already generated for period, rejecting restaurant_id=%s",
                restaurant_id,
                extra={"restaurant_id": restaurant_id},
            )
            raise DuplicatePayoutPeriodException(restaurant_id, period_start, period_end)

        return await self._create_for_period(
            restaurant, frequency, period_start, period_end
        )

    async def generate_payouts_batch(self, payout_data: PayoutRunRequest) -> int:
        """Generate payouts for every active restaurant for one period.

        Restaurants that already have a payout for the period, or whose
        commission settings cannot be resolved, are skipped. Runs inside a DB
        transaction (caller responsibility).

        Returns number of payouts created.
        """
        frequency = payout_data.payout_frequency
        period_start, period_end = period_for(frequency, payout_data.as_of)

        restaurants = await self.restaurant_repo.list_active()
        payouts_created = 0

        for restaurant in restaurants:
            already_ran = await self.payout_repo.exists_for_period(
                restaurant.id, period_start, period_end
            )
            if already_ran:
                continue

            try:
                await self._create_for_period(
                    restaurant, frequency, period_start, period_end
                )
            except InvalidConfigurationException as exc:
                logger.warning(
                    "Skipping restaurant with invalid commission settings restaurant_id=%s reason=%s",
                    restaurant.id,
                    exc.details.get("reason"),
                    extra={"restaurant_id": restaurant.id, "details": exc.details},
                )
                continue

            payouts_created += 1

        return payouts_created

    async def _create_for_period(
        self,
        restaurant: Restaurant,
        frequency: PayoutFrequency,
        period_start: datetime,
        period_end: datetime,
    ) -> Payout:
        orders = await self.order_repo.list_for_period(
            restaurant.id, period_start, period_end, PAYOUT_ORDER_STATUSES
        )
        prior_paid = await self.payout_repo.list_paid_for_restaurant(restaurant.id)

        statement = calculate_payout(
            restaurant_id=restaurant.id,
            restaurant_name=restaurant.name,
            period_start=period_start,
            period_end=period_end,
            orders=orders,
            commission_config=CommissionConfig.model_validate(restaurant),
            prior_paid_payouts=prior_paid,
            payout_frequency=frequency,
        )

        payout = await self.payout_repo.create_payout(statement)

        payouts_total.labels(status="pending").inc()
        payout_amount_cents_total.inc(statement.net_payout_cents)
        pending_payouts_amount.inc(statement.net_payout_cents)

        logger.info(
            "Payout created payout_id=%s restaurant_id=%s total_orders=%s net_payout_cents=%s",
            payout.id,
            restaurant.id,
            statement.total_orders,
            statement.net_payout_cents,
            extra={
                "payout_id": payout.id,
                "restaurant_id": restaurant.id,
                "total_orders": statement.total_orders,
                "gross_earnings_cents": statement.gross_earnings_cents,
                "platform_commission_cents": statement.platform_commission_cents,
                "already_paid_cents": statement.already_paid_cents,
                "net_payout_cents": statement.net_payout_cents,
            },
        )

        return payout
