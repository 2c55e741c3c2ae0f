from payout_service.db.repositories.order_repository import OrderRepository
from payout_service.db.repositories.payout_repository import PayoutRepository
from payout_service.db.repositories.restaurant_repository import RestaurantRepository

__all__ = [
    "OrderRepository",
    "PayoutRepository",
    "RestaurantRepository",
]
