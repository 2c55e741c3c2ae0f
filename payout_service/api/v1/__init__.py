from fastapi import APIRouter

from payout_service.api.v1 import orders, payouts, restaurants

api_router = APIRouter()

api_router.include_router(
    restaurants.router, prefix="/restaurants", tags=["restaurants"]
)
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(payouts.router, prefix="/payouts", tags=["payouts"])
