"""Payout statement computation.

Pure and synchronous: callers fetch orders and prior payouts, pass them in,
and persist the returned statement themselves.
"""

from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable, Optional

from payout_service.core.enums import (
    EARNING_ORDER_STATUSES,
    OrderStatus,
    PayoutFrequency,
    PayoutStatus,
    RefundPaidBy,
)
from payout_service.db.models import Order, Payout
from payout_service.schemas.payouts import PayoutStatement
from payout_service.schemas.restaurants import CommissionConfig
from payout_service.services.commission_policy import resolve_commission_rule
from payout_service.services.payout_periods import as_utc, validate_period

ONE_CENT = Decimal("1")


def to_cents(amount: Decimal) -> int:
    return int(amount.quantize(ONE_CENT, rounding=ROUND_HALF_EVEN))


def calculate_payout(
    restaurant_id: str,
    restaurant_name: str,
    period_start: datetime,
    period_end: datetime,
    orders: Iterable[Order],
    commission_config: CommissionConfig,
    prior_paid_payouts: Iterable[Payout] = (),
    payout_frequency: PayoutFrequency = PayoutFrequency.CUSTOM,
    default_commission_rate: Optional[Decimal] = None,
) -> PayoutStatement:
    """Compute one payout statement for a restaurant over a period.

    Orders outside the restaurant or the inclusive period are ignored, as are
    prior payouts not in ``paid`` status. The net figure may go negative while
    refunds and earlier payouts are deducted; it is floored at zero only once,
    at the end.

    Raises:
        InvalidPeriodException: ``period_start`` is after ``period_end``.
        InvalidConfigurationException: commission settings are unresolvable.
    """
    period_start, period_end = validate_period(period_start, period_end)
    rule = resolve_commission_rule(
        commission_config,
        default_rate=default_commission_rate,
        restaurant_id=restaurant_id,
    )

    gross = Decimal(0)
    commission = Decimal(0)
    refunds_by_restaurant = Decimal(0)
    refunds_by_platform = Decimal(0)
    total_orders = 0

    for order in orders:
        if order.restaurant_id != restaurant_id:
            continue
        if not period_start <= as_utc(order.created_at) <= period_end:
            continue

        if order.status in EARNING_ORDER_STATUSES:
            total = order.total_cents or 0
            gross += total
            commission += rule.commission_for(total)
            total_orders += 1
        elif order.status == OrderStatus.REFUNDED:
            refund = Decimal(order.refund_amount_cents or 0)
            if order.refund_paid_by == RefundPaidBy.RESTAURANT:
                refunds_by_restaurant += refund
            elif order.refund_paid_by == RefundPaidBy.PLATFORM:
                refunds_by_platform += refund

    already_paid = sum(
        (
            Decimal(payout.net_payout_cents or 0)
            for payout in prior_paid_payouts
            if payout.restaurant_id == restaurant_id
            and payout.status == PayoutStatus.PAID
        ),
        Decimal(0),
    )

    # Net is derived from the rounded components so the stored figures add up.
    gross_cents = to_cents(gross)
    commission_cents = to_cents(commission)
    refunds_by_restaurant_cents = to_cents(refunds_by_restaurant)
    already_paid_cents = to_cents(already_paid)

    net_cents = gross_cents - commission_cents - refunds_by_restaurant_cents
    final_net_cents = max(0, net_cents - already_paid_cents)

    return PayoutStatement(
        restaurant_id=restaurant_id,
        restaurant_name=restaurant_name,
        period_start=period_start,
        period_end=period_end,
        payout_frequency=payout_frequency,
        total_orders=total_orders,
        gross_earnings_cents=gross_cents,
        platform_commission_cents=commission_cents,
        refunds_paid_by_platform_cents=to_cents(refunds_by_platform),
        refunds_paid_by_restaurant_cents=refunds_by_restaurant_cents,
        already_paid_cents=already_paid_cents,
        net_payout_cents=final_net_cents,
        status=PayoutStatus.PENDING,
    )
