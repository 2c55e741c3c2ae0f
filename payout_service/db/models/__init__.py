from payout_service.db.models.order import Order
from payout_service.db.models.payout import Payout
from payout_service.db.models.restaurant import Restaurant

__all__ = ["Restaurant", "Order", "Payout"]
