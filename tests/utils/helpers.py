from datetime import datetime
from typing import List, Optional

from httpx import AsyncClient

from tests.utils.factories import OrderFactory, RestaurantFactory


async def create_restaurant(client: AsyncClient, **overrides) -> dict:
    """Register a restaurant and return the response body."""
    response = await client.post(
        "/v1/restaurants", json=RestaurantFactory.create_restaurant_data(**overrides)
    )
    assert response.status_code == 201, response.text
    return response.json()


async def create_orders_batch(
    client: AsyncClient,
    orders: List[dict],
) -> List[dict]:
    """Create multiple orders and return their responses."""
    responses = []
    for order in orders:
        response = await client.post("/v1/orders", json=order)
        responses.append(response.json())
    return responses


async def create_refunded_order(
    client: AsyncClient,
    restaurant_id: str,
    total_cents: int,
    refund_paid_by: str,
    created_at: Optional[datetime] = None,
) -> dict:
    """Create a delivered order and refund it in full."""
    order = await client.post(
        "/v1/orders",
        json=OrderFactory.create_order_data(
            restaurant_id=restaurant_id,
            total_cents=total_cents,
            created_at=created_at,
        ),
    )
    response = await client.post(
        f"/v1/orders/{order.json()['id']}/refund",
        json={"refund_paid_by": refund_paid_by},
    )
    return response.json()

