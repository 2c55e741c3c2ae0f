from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.enums import OrderStatus, RefundPaidBy
from payout_service.db.models import Order


class OrderRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_order(
        self,
        restaurant_id: str,
        total_cents: int,
        status: OrderStatus = OrderStatus.PENDING,
        created_at: Optional[datetime] = None,
    ) -> Order:
        order_kwargs: dict = {
            "restaurant_id": restaurant_id,
            "total_cents": total_cents,
            "status": status,
        }
        if created_at is not None:
            order_kwargs["created_at"] = created_at

        order = Order(**order_kwargs)
        self.session.add(order)
        await self.session.flush()
        return order

    async def get_by_id(self, id: int) -> Optional[Order]:
        stmt = select(Order).where(Order.id == id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_period(
        self,
        restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
        statuses: Sequence[OrderStatus],
    ) -> list[Order]:
        """Orders created within the inclusive period having one of ``statuses``."""
        stmt = (
            select(Order)
            .where(Order.restaurant_id == restaurant_id)
            .where(Order.status.in_([s.value for s in statuses]))
            .where(Order.created_at >= period_start)
            .where(Order.created_at <= period_end)
            .order_by(Order.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_status(self, status: OrderStatus) -> list[Order]:
        stmt = select(Order).where(Order.status == status.value)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def apply_refund(
        self, order: Order, refund_amount_cents: int, refund_paid_by: RefundPaidBy
    ) -> Order:
        order.status = OrderStatus.REFUNDED
        order.refund_amount_cents = refund_amount_cents
        order.refund_paid_by = refund_paid_by
        await self.session.flush()
        return order
