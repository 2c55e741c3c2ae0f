import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Query, status

from payout_service.api.dependencies import SessionDep
from payout_service.core.enums import PayoutStatus
from payout_service.db.session import AsyncSessionLocal
from payout_service.schemas.payouts import (
    PayoutCreate,
    PayoutFilters,
    PayoutGenerateResponse,
    PayoutListResponse,
    PayoutMarkPaid,
    PayoutResponse,
    PayoutRunRequest,
    PayoutStatusUpdate,
    PayoutSummary,
)
from payout_service.services.payout_generator import PayoutGenerator
from payout_service.services.payout_history import PayoutHistory
from payout_service.services.payout_status import PayoutStatusService

logger = logging.getLogger(__name__)
router = APIRouter()


async def process_batch_payouts(payout_data: PayoutRunRequest) -> None:
    """Background task to generate payouts asynchronously within atomic transaction."""
    try:
        logger.info(
            "Background payout batch task started for frequency=%s as_of=%s",
            payout_data.payout_frequency.value,
            payout_data.as_of,
        )
        async with AsyncSessionLocal() as session:
            async with session.begin():
                generator = PayoutGenerator(session)
                created = await generator.generate_payouts_batch(payout_data)
        logger.info(
            "Background payout batch task completed for frequency=%s as_of=%s created=%s",
            payout_data.payout_frequency.value,
            payout_data.as_of,
            created,
        )
    except Exception as e:
        logger.error(
            "Background payout batch task failed: %s",
            e,
            exc_info=True,
        )


@router.post(
    "/generate",
    response_model=PayoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_payout(
    payout_data: PayoutCreate, session: SessionDep
) -> PayoutResponse:
    async with session.begin():
        generator = PayoutGenerator(session)
        payout = await generator.generate_payout(payout_data)
        return PayoutResponse.model_validate(payout)


@router.post(
    "/run",
    response_model=PayoutGenerateResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def run_payouts(
    payout_data: PayoutRunRequest, background_tasks: BackgroundTasks
) -> PayoutGenerateResponse:
    logger.info(
        "Payout batch initiated for frequency=%s as_of=%s",
        payout_data.payout_frequency.value,
        payout_data.as_of,
    )
    background_tasks.add_task(process_batch_payouts, payout_data)

    return PayoutGenerateResponse(
        message="Payout process initiated",
        as_of=payout_data.as_of,
        payout_frequency=payout_data.payout_frequency,
    )


@router.get("", response_model=PayoutListResponse)
async def list_payouts(
    session: SessionDep,
    restaurant_id: Optional[str] = None,
    status: Optional[PayoutStatus] = None,
    period_start_from: Optional[datetime] = None,
    period_end_to: Optional[datetime] = None,
    limit: int = Query(default=50, gt=0, le=500),
) -> PayoutListResponse:
    filters = PayoutFilters(
        restaurant_id=restaurant_id,
        status=status,
        period_start_from=period_start_from,
        period_end_to=period_end_to,
        limit=limit,
    )
    payouts = await PayoutHistory(session).list_payouts(filters)
    return PayoutListResponse(
        items=[PayoutResponse.model_validate(p) for p in payouts],
        count=len(payouts),
    )


@router.get("/summary", response_model=PayoutSummary)
async def get_payout_summary(
    session: SessionDep,
    restaurant_id: Optional[str] = None,
    status: Optional[PayoutStatus] = None,
    period_start_from: Optional[datetime] = None,
    period_end_to: Optional[datetime] = None,
) -> PayoutSummary:
    filters = PayoutFilters(
        restaurant_id=restaurant_id,
        status=status,
        period_start_from=period_start_from,
        period_end_to=period_end_to,
    )
    return await PayoutHistory(session).get_summary(filters)


@router.get("/{payout_id}", response_model=PayoutResponse)
async def get_payout(payout_id: int, session: SessionDep) -> PayoutResponse:
    payout = await PayoutStatusService(session).get_payout(payout_id)
    return PayoutResponse.model_validate(payout)


@router.post("/{payout_id}/mark-paid", response_model=PayoutResponse)
async def mark_payout_paid(
    payout_id: int, payment: PayoutMarkPaid, session: SessionDep
) -> PayoutResponse:
    async with session.begin():
        payout = await PayoutStatusService(session).mark_paid(
            payout_id, payment_method=payment.payment_method, notes=payment.notes
        )
        return PayoutResponse.model_validate(payout)


@router.post("/{payout_id}/status", response_model=PayoutResponse)
async def update_payout_status(
    payout_id: int, update: PayoutStatusUpdate, session: SessionDep
) -> PayoutResponse:
    async with session.begin():
        payout = await PayoutStatusService(session).transition(
            payout_id, update.status, failure_reason=update.failure_reason
        )
        return PayoutResponse.model_validate(payout)
