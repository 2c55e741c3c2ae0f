from payout_service.services.commission_service import CommissionService
from payout_service.services.order_service import OrderService
from payout_service.services.payout_calculator import calculate_payout
from payout_service.services.payout_generator import PayoutGenerator
from payout_service.services.payout_history import PayoutHistory
from payout_service.services.payout_status import PayoutStatusService

__all__ = [
    "CommissionService",
    "OrderService",
    "PayoutGenerator",
    "PayoutHistory",
    "PayoutStatusService",
    "calculate_payout",
]
