from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.enums import PaymentMethod, PayoutStatus
from payout_service.db.models import Payout
from payout_service.schemas.payouts import PayoutFilters, PayoutStatement


class PayoutRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_payout(self, statement: PayoutStatement) -> Payout:
        payout = Payout(**statement.model_dump())
        self.session.add(payout)
        await self.session.flush()
        return payout

    async def exists_for_period(
        self, restaurant_id: str, period_start: datetime, period_end: datetime
    ) -> bool:
        stmt = (
            select(Payout.id)
            .where(Payout.restaurant_id == restaurant_id)
            .where(Payout.period_start == period_start)
            .where(Payout.period_end == period_end)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_by_id(self, id: int) -> Optional[Payout]:
        stmt = select(Payout).where(Payout.id == id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_paid_for_restaurant(self, restaurant_id: str) -> list[Payout]:
        stmt = (
            select(Payout)
            .where(Payout.restaurant_id == restaurant_id)
            .where(Payout.status == PayoutStatus.PAID.value)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _apply_filters(stmt: Select, filters: PayoutFilters) -> Select:
        if filters.restaurant_id:
            stmt = stmt.where(Payout.restaurant_id == filters.restaurant_id)
        if filters.status:
            stmt = stmt.where(Payout.status == filters.status.value)
        if filters.period_start_from:
            stmt = stmt.where(Payout.period_start >= filters.period_start_from)
        if filters.period_end_to:
            stmt = stmt.where(Payout.period_end <= filters.period_end_to)
        return stmt

    async def list_payouts(self, filters: PayoutFilters) -> list[Payout]:
        stmt = self._apply_filters(select(Payout), filters)
        stmt = stmt.order_by(Payout.created_at.desc(), Payout.id.desc()).limit(
            filters.limit
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_status(
        self,
        payout: Payout,
        status: PayoutStatus,
        failure_reason: Optional[str] = None,
        payment_method: Optional[PaymentMethod] = None,
        notes: Optional[str] = None,
    ) -> Payout:
        payout.status = status
        if status == PayoutStatus.PAID:
            payout.paid_at = datetime.now(timezone.utc)
            payout.payment_method = payment_method
            payout.notes = notes
        if failure_reason:
            payout.failure_reason = failure_reason
        await self.session.flush()
        return payout

    async def get_summary(self, filters: PayoutFilters) -> tuple[int, int, int, int]:
        """
        Aggregate payouts matching ``filters`` (ignoring ``limit``) in one query.

        Returns: (payout_count, total_cents, paid_cents, pending_cents)
        """
        stmt = select(
            func.count(Payout.id).label("payout_count"),
            func.coalesce(func.sum(Payout.net_payout_cents), 0).label("total"),
            func.coalesce(
                func.sum(
                    case(
                        (Payout.status == PayoutStatus.PAID.value, Payout.net_payout_cents),
                        else_=0,
                    )
                ),
                0,
            ).label("paid"),
            func.coalesce(
                func.sum(
                    case(
                        (
                            Payout.status == PayoutStatus.PENDING.value,
                            Payout.net_payout_cents,
                        ),
                        else_=0,
                    )
                ),
                0,
            ).label("pending"),
        )
        stmt = self._apply_filters(stmt, filters)

        result = await self.session.execute(stmt)
        row = result.one()
        return int(row.payout_count), int(row.total), int(row.paid), int(row.pending)
