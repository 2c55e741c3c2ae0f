import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.enums import PaymentMethod, PayoutStatus
from payout_service.db.models import Payout
from payout_service.db.repositories import PayoutRepository
from payout_service.exceptions import (
    InvalidPayoutTransitionException,
    PayoutNotFoundException,
)
from payout_service.metrics import payouts_total, pending_payouts_amount

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[PayoutStatus, frozenset[PayoutStatus]] = {
    PayoutStatus.PENDING: frozenset(
        {PayoutStatus.PROCESSING, PayoutStatus.PAID, PayoutStatus.FAILED}
    ),
    PayoutStatus.PROCESSING: frozenset({PayoutStatus.PAID, PayoutStatus.FAILED}),
    PayoutStatus.PAID: frozenset(),
    PayoutStatus.FAILED: frozenset(),
}

OPEN_STATUSES = (PayoutStatus.PENDING, PayoutStatus.PROCESSING)


class PayoutStatusService:
    def __init__(self, session: AsyncSession) -> None:
        self.payout_repo = PayoutRepository(session)

    async def get_payout(self, payout_id: int) -> Payout:
        payout = await self.payout_repo.get_by_id(payout_id)
        if payout is None:
            raise PayoutNotFoundException(payout_id)
        return payout

    async def mark_paid(
        self,
        payout_id: int,
        payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER,
        notes: Optional[str] = None,
    ) -> Payout:
        return await self.transition(
            payout_id,
            PayoutStatus.PAID,
            payment_method=payment_method,
            notes=notes,
        )

    async def mark_failed(self, payout_id: int, failure_reason: str) -> Payout:
        return await self.transition(
            payout_id, PayoutStatus.FAILED, failure_reason=failure_reason
        )

    async def transition(
        self,
        payout_id: int,
        target: PayoutStatus,
        failure_reason: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        notes: Optional[str] = None,
    ) -> Payout:
        payout = await self.get_payout(payout_id)
        current = PayoutStatus(payout.status)

        if target not in ALLOWED_TRANSITIONS[current]:
            logger.warning(
                "Rejected payout status change payout_id=%s current=%s target=%s",
                payout_id,
                current.value,
                target.value,
                extra={
                    "payout_id": payout_id,
                    "current": current.value,
                    "target": target.value,
                },
            )
            raise InvalidPayoutTransitionException(
                payout_id, current.value, target.value
            )

        if target == PayoutStatus.PAID and payment_method is None:
            payment_method = PaymentMethod.BANK_TRANSFER

        await self.payout_repo.update_status(
            payout,
            target,
            failure_reason=failure_reason,
            payment_method=payment_method,
            notes=notes,
        )

        payouts_total.labels(status=target.value).inc()
        if target not in OPEN_STATUSES:
            pending_payouts_amount.dec(payout.net_payout_cents)

        logger.info(
            "Payout status changed payout_id=%s restaurant_id=%s %s -> %s",
            payout_id,
            payout.restaurant_id,
            current.value,
            target.value,
            extra={
                "payout_id": payout_id,
                "restaurant_id": payout.restaurant_id,
                "current": current.value,
                "target": target.value,
            },
        )
        return payout
