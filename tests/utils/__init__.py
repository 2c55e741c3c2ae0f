from tests.utils.factories import (
    CommissionFactory,
    OrderFactory,
    PayoutFactory,
    RestaurantFactory,
)
from tests.utils.helpers import (
    create_orders_batch,
    create_refunded_order,
    create_restaurant,
)

__all__ = [
    "CommissionFactory",
    "OrderFactory",
    "PayoutFactory",
    "RestaurantFactory",
    "create_orders_batch",
    "create_refunded_order",
    "create_restaurant",
]
