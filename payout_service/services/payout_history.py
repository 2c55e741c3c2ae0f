from decimal import ROUND_HALF_EVEN, Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.config import settings
from payout_service.db.models import Payout
from payout_service.db.repositories import PayoutRepository
from payout_service.schemas.payouts import PayoutFilters, PayoutSummary


class PayoutHistory:
    def __init__(self, session: AsyncSession) -> None:
        self.payout_repo = PayoutRepository(session)

    async def list_payouts(self, filters: PayoutFilters) -> list[Payout]:
        return await self.payout_repo.list_payouts(filters)

    async def get_summary(self, filters: PayoutFilters) -> PayoutSummary:
        count, total, paid, pending = await self.payout_repo.get_summary(filters)

        average = 0
        if count:
            average = int(
                (Decimal(total) / count).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN)
            )

        return PayoutSummary(
            payout_count=count,
            total_amount_cents=total,
            total_paid_cents=paid,
            total_pending_cents=pending,
            average_payout_cents=average,
            currency=settings.currency,
        )
