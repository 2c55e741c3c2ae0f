from payout_service.schemas.common import ErrorDetail, ErrorResponse
from payout_service.schemas.orders import OrderCreate, OrderRefund, OrderResponse
from payout_service.schemas.payouts import (
    PayoutCreate,
    PayoutFilters,
    PayoutListResponse,
    PayoutMarkPaid,
    PayoutResponse,
    PayoutRunRequest,
    PayoutStatement,
    PayoutStatusUpdate,
    PayoutSummary,
)
from payout_service.schemas.restaurants import (
    CommissionConfig,
    CommissionSummary,
    CommissionUpdate,
    RestaurantCreate,
    RestaurantResponse,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "OrderCreate",
    "OrderRefund",
    "OrderResponse",
    "PayoutCreate",
    "PayoutFilters",
    "PayoutListResponse",
    "PayoutMarkPaid",
    "PayoutResponse",
    "PayoutRunRequest",
    "PayoutStatement",
    "PayoutStatusUpdate",
    "PayoutSummary",
    "CommissionConfig",
    "CommissionSummary",
    "CommissionUpdate",
    "RestaurantCreate",
    "RestaurantResponse",
]
