from fastapi import APIRouter, status

from payout_service.api.dependencies import SessionDep
from payout_service.schemas.orders import OrderCreate, OrderRefund, OrderResponse
from payout_service.services.order_service import OrderService

router = APIRouter()


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(order_data: OrderCreate, session: SessionDep) -> OrderResponse:
    async with session.begin():
        order = await OrderService(session).create_order(order_data)
        return OrderResponse.model_validate(order)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, session: SessionDep) -> OrderResponse:
    order = await OrderService(session).get_order(order_id)
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/refund", response_model=OrderResponse)
async def refund_order(
    order_id: int, refund: OrderRefund, session: SessionDep
) -> OrderResponse:
    async with session.begin():
        order = await OrderService(session).refund_order(order_id, refund)
        return OrderResponse.model_validate(order)
