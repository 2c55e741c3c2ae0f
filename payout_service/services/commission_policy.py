from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from payout_service.core.config import settings
from payout_service.core.enums import CommissionType
from payout_service.exceptions import InvalidConfigurationException
from payout_service.schemas.restaurants import CommissionConfig

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class CommissionRule:
    """Resolved commission rule applied to every earning order."""

    commission_type: CommissionType
    rate: Optional[Decimal] = None
    fixed_amount_cents: Optional[int] = None

    def commission_for(self, order_total_cents: int) -> Decimal:
        """Unrounded commission in cents for a single order."""
        if self.commission_type == CommissionType.FIXED:
            return Decimal(self.fixed_amount_cents or 0)
        return Decimal(order_total_cents) * (self.rate or Decimal(0)) / HUNDRED


def resolve_commission_rule(
    config: CommissionConfig,
    default_rate: Optional[Decimal] = None,
    restaurant_id: Optional[str] = None,
) -> CommissionRule:
    """Turn stored commission settings into a rule or raise.

    A percentage restaurant without a rate falls back to ``default_rate``
    (``settings.default_commission_rate`` when not given). Passing a
    ``None`` default through settings makes a missing rate an error.
    """
    if default_rate is None:
        default_rate = settings.default_commission_rate

    commission_type = config.commission_type or CommissionType.PERCENTAGE

    if commission_type == CommissionType.FIXED:
        if config.fixed_commission_amount_cents is None:
            raise InvalidConfigurationException(
                "fixed commission requires fixed_commission_amount_cents",
                restaurant_id=restaurant_id,
            )
        if config.fixed_commission_amount_cents < 0:
            raise InvalidConfigurationException(
                "fixed commission amount must not be negative",
                restaurant_id=restaurant_id,
            )
        return CommissionRule(
            commission_type=CommissionType.FIXED,
            fixed_amount_cents=config.fixed_commission_amount_cents,
        )

    rate = config.commission_rate
    if rate is None:
        rate = default_rate
    if rate is None:
        raise InvalidConfigurationException(
            "percentage commission requires commission_rate",
            restaurant_id=restaurant_id,
        )
    rate = Decimal(rate)
    if rate < 0 or rate > HUNDRED:
        raise InvalidConfigurationException(
            "commission_rate must be between 0 and 100",
            restaurant_id=restaurant_id,
        )
    return CommissionRule(commission_type=CommissionType.PERCENTAGE, rate=rate)
