import logging

from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.core.enums import EARNING_ORDER_STATUSES, OrderStatus
from payout_service.db.models import Order
from payout_service.db.repositories import OrderRepository, RestaurantRepository
from payout_service.exceptions import (
    InvalidRefundException,
    OrderNotFoundException,
    RestaurantNotFoundException,
)
from payout_service.metrics import orders_total
from payout_service.schemas.orders import OrderCreate, OrderRefund

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, session: AsyncSession) -> None:
        self.order_repo = OrderRepository(session)
        self.restaurant_repo = RestaurantRepository(session)

    async def create_order(self, order_data: OrderCreate) -> Order:
        if await self.restaurant_repo.get_by_id(order_data.restaurant_id) is None:
            raise RestaurantNotFoundException(order_data.restaurant_id)

        order = await self.order_repo.create_order(
            restaurant_id=order_data.restaurant_id,
            total_cents=order_data.total_cents,
            status=order_data.status,
            created_at=order_data.created_at,
        )
        orders_total.labels(status=order_data.status.value).inc()
        return order

    async def get_order(self, order_id: int) -> Order:
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)
        return order

    async def refund_order(self, order_id: int, refund: OrderRefund) -> Order:
        """Mark a completed order refunded and record who bears the cost."""
        order = await self.get_order(order_id)

        if order.status not in EARNING_ORDER_STATUSES:
            raise InvalidRefundException(
                order_id,
                f"order status {OrderStatus(order.status).value} cannot be refunded",
            )

        amount = refund.refund_amount_cents
        if amount is None:
            amount = order.total_cents
        if amount > order.total_cents:
            raise InvalidRefundException(order_id, "refund exceeds order total")

        await self.order_repo.apply_refund(order, amount, refund.refund_paid_by)
        orders_total.labels(status=OrderStatus.REFUNDED.value).inc()

        logger.info(
            "Order refunded order_id=%s restaurant_id=%s refund_amount_cents=%s paid_by=%s",
            order_id,
            order.restaurant_id,
            amount,
            refund.refund_paid_by.value,
            extra={
                "order_id": order_id,
                "restaurant_id": order.restaurant_id,
                "refund_amount_cents": amount,
                "refund_paid_by": refund.refund_paid_by.value,
            },
        )
        return order
