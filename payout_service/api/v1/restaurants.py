from fastapi import APIRouter, status

from payout_service.api.dependencies import SessionDep
from payout_service.db.repositories import RestaurantRepository
from payout_service.exceptions import (
    RestaurantAlreadyExistsException,
    RestaurantNotFoundException,
)
from payout_service.schemas.restaurants import (
    CommissionConfig,
    CommissionSummary,
    CommissionUpdate,
    RestaurantCreate,
    RestaurantResponse,
)
from payout_service.services.commission_policy import resolve_commission_rule
from payout_service.services.commission_service import CommissionService

router = APIRouter()


@router.post(
    "", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED
)
async def create_restaurant(
    restaurant_data: RestaurantCreate, session: SessionDep
) -> RestaurantResponse:
    resolve_commission_rule(
        CommissionConfig.model_validate(restaurant_data.model_dump()),
        restaurant_id=restaurant_data.id,
    )

    async with session.begin():
        restaurant_repo = RestaurantRepository(session)
        if await restaurant_repo.get_by_id(restaurant_data.id):
            raise RestaurantAlreadyExistsException(restaurant_data.id)

        restaurant = await restaurant_repo.create(
            restaurant_id=restaurant_data.id,
            name=restaurant_data.name,
            commission_type=restaurant_data.commission_type,
            commission_rate=restaurant_data.commission_rate,
            fixed_commission_amount_cents=restaurant_data.fixed_commission_amount_cents,
            payout_frequency=restaurant_data.payout_frequency,
        )
        return RestaurantResponse.model_validate(restaurant)


@router.get("/commission-summary", response_model=CommissionSummary)
async def get_commission_summary(session: SessionDep) -> CommissionSummary:
    service = CommissionService(session)
    return await service.commission_summary()


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(restaurant_id: str, session: SessionDep) -> RestaurantResponse:
    restaurant = await RestaurantRepository(session).get_by_id(restaurant_id)
    if not restaurant:
        raise RestaurantNotFoundException(restaurant_id)
    return RestaurantResponse.model_validate(restaurant)


@router.put("/{restaurant_id}/commission", response_model=RestaurantResponse)
async def update_commission(
    restaurant_id: str, update: CommissionUpdate, session: SessionDep
) -> RestaurantResponse:
    async with session.begin():
        service = CommissionService(session)
        restaurant = await service.update_commission(restaurant_id, update)
        return RestaurantResponse.model_validate(restaurant)
