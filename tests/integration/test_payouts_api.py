import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from payout_service.db.models import Payout
from tests.utils import (
    OrderFactory,
    PayoutFactory,
    create_orders_batch,
    create_refunded_order,
    create_restaurant,
)


async def _generate(
    client: AsyncClient,
    restaurant_id: str,
    period_start: datetime,
    period_end: datetime,
):
    return await client.post(
        "/v1/payouts/generate",
        json=PayoutFactory.create_generate_data(
            restaurant_id, period_start, period_end
        ),
    )


@pytest.mark.integration
class TestPayoutsAPI:
    async def test_generate_payout_for_explicit_period(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
        in_period: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        await create_orders_batch(
            client,
            [
                OrderFactory.create_order_data(sample_restaurant_id, 6000, created_at=in_period),
                OrderFactory.create_order_data(sample_restaurant_id, 4000, created_at=in_period),
            ],
        )
        await create_refunded_order(
            client, sample_restaurant_id, 2000, "restaurant", created_at=in_period
        )

        response = await _generate(client, sample_restaurant_id, period_start, period_end)

        assert response.status_code == 201
        data = response.json()

        assert data["restaurant_id"] == sample_restaurant_id
        assert data["restaurant_name"] == "Test Kitchen"
        assert data["payout_frequency"] == "custom"
        assert data["total_orders"] == 2
        assert data["gross_earnings_cents"] == 10000
        assert data["platform_commission_cents"] == 1500
        assert data["refunds_paid_by_restaurant_cents"] == 2000
        assert data["refunds_paid_by_platform_cents"] == 0
        assert data["net_payout_cents"] == 6500
        assert data["status"] == "pending"
        assert data["paid_at"] is None

    async def test_generate_ignores_orders_outside_period(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
        in_period: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        await create_orders_batch(
            client,
            [
                OrderFactory.create_order_data(sample_restaurant_id, 1000, created_at=in_period),
                OrderFactory.create_order_data(
                    sample_restaurant_id,
                    9000,
                    created_at=period_end + timedelta(days=1),
                ),
                OrderFactory.create_order_data(
                    sample_restaurant_id, 9000, status="cancelled", created_at=in_period
                ),
            ],
        )

        response = await _generate(client, sample_restaurant_id, period_start, period_end)

        assert response.status_code == 201
        assert response.json()["gross_earnings_cents"] == 1000

    async def test_generate_for_monthly_period_from_as_of(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        in_period: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        await client.post(
            "/v1/orders",
            json=OrderFactory.create_order_data(sample_restaurant_id, 10000, created_at=in_period),
        )

        response = await client.post(
            "/v1/payouts/generate",
            json={
                "restaurant_id": sample_restaurant_id,
                "payout_frequency": "monthly",
                "as_of": "2026-09-15",
            },
        )

        assert response.status_code == 201
        data = response.json()

        assert data["payout_frequency"] == "monthly"
        assert data["period_start"].startswith("2026-09-01")
        assert data["period_end"].startswith("2026-09-30")
        assert data["net_payout_cents"] == 8500

    async def test_generate_duplicate_period_rejected(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)

        first = await _generate(client, sample_restaurant_id, period_start, period_end)
        second = await _generate(client, sample_restaurant_id, period_start, period_end)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "PAYOUT_ALREADY_GENERATED"

    async def test_generate_inverted_period(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)

        response = await _generate(client, sample_restaurant_id, period_end, period_start)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "PAYOUT_INVALID_PERIOD"

    async def test_generate_with_single_bound(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)

        response = await client.post(
            "/v1/payouts/generate",
            json={
                "restaurant_id": sample_restaurant_id,
                "period_start": period_start.isoformat(),
            },
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_generate_unknown_restaurant(
        self,
        client: AsyncClient,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        response = await _generate(client, "res_missing", period_start, period_end)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RESTAURANT_NOT_FOUND"

    async def test_run_payouts_batch(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        in_period: datetime,
    ) -> None:
        for restaurant_id in ("res_batch_a", "res_batch_b"):
            await create_restaurant(client, restaurant_id=restaurant_id)
            await client.post(
                "/v1/orders",
                json=OrderFactory.create_order_data(restaurant_id, 10000, created_at=in_period),
            )

        payout_data = {"as_of": "2026-09-15", "payout_frequency": "monthly"}
        response = await client.post("/v1/payouts/run", json=payout_data)

        assert response.status_code == 202
        data = response.json()

        assert data["message"] == "Payout process initiated"
        assert data["as_of"] == "2026-09-15"
        assert data["payout_frequency"] == "monthly"

        # Wait for background task to complete
        await asyncio.sleep(0.5)

        # A second run for the same period creates nothing new
        await client.post("/v1/payouts/run", json=payout_data)
        await asyncio.sleep(0.5)

        result = await db_session.execute(select(func.count(Payout.id)))
        assert result.scalar() == 2

        listing = await client.get("/v1/payouts", params={"restaurant_id": "res_batch_a"})
        items = listing.json()["items"]
        assert len(items) == 1
        assert items[0]["net_payout_cents"] == 8500
        assert items[0]["payout_frequency"] == "monthly"

    async def test_run_payouts_rejects_custom_frequency(
        self,
        client: AsyncClient,
    ) -> None:
        response = await client.post(
            "/v1/payouts/run",
            json={"as_of": "2026-09-15", "payout_frequency": "custom"},
        )

        assert response.status_code == 422

    async def test_get_payout(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        created = await _generate(client, sample_restaurant_id, period_start, period_end)
        payout_id = created.json()["id"]

        response = await client.get(f"/v1/payouts/{payout_id}")

        assert response.status_code == 200
        data = response.json()

        assert data["id"] == payout_id
        assert data["restaurant_id"] == sample_restaurant_id
        assert "meta" in data

    async def test_get_payout_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/v1/payouts/999999")

        assert response.status_code == 404
        data = response.json()

        assert data["error"]["code"] == "PAYOUT_NOT_FOUND"
        assert data["error"]["details"]["payout_id"] == 999999

    async def test_mark_paid(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        created = await _generate(client, sample_restaurant_id, period_start, period_end)
        payout_id = created.json()["id"]

        response = await client.post(
            f"/v1/payouts/{payout_id}/mark-paid",
            json={"payment_method": "paypal", "notes": "September settlement"},
        )

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "paid"
        assert data["paid_at"] is not None
        assert data["payment_method"] == "paypal"
        assert data["notes"] == "September settlement"

    async def test_mark_paid_twice_rejected(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        created = await _generate(client, sample_restaurant_id, period_start, period_end)
        payout_id = created.json()["id"]

        await client.post(f"/v1/payouts/{payout_id}/mark-paid", json={})
        response = await client.post(f"/v1/payouts/{payout_id}/mark-paid", json={})

        assert response.status_code == 409
        data = response.json()

        assert data["error"]["code"] == "PAYOUT_INVALID_TRANSITION"
        assert data["error"]["details"]["current"] == "paid"

    async def test_status_transitions(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        created = await _generate(client, sample_restaurant_id, period_start, period_end)
        payout_id = created.json()["id"]

        processing = await client.post(
            f"/v1/payouts/{payout_id}/status", json={"status": "processing"}
        )
        assert processing.status_code == 200
        assert processing.json()["status"] == "processing"

        failed = await client.post(
            f"/v1/payouts/{payout_id}/status",
            json={"status": "failed", "failure_reason": "Bank account closed"},
        )
        assert failed.status_code == 200
        assert failed.json()["failure_reason"] == "Bank account closed"

        retry = await client.post(
            f"/v1/payouts/{payout_id}/status", json={"status": "paid"}
        )
        assert retry.status_code == 409

    async def test_status_back_to_pending_rejected(
        self,
        client: AsyncClient,
        sample_restaurant_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id=sample_restaurant_id)
        created = await _generate(client, sample_restaurant_id, period_start, period_end)

        response = await client.post(
            f"/v1/payouts/{created.json()['id']}/status", json={"status": "pending"}
        )

        assert response.status_code == 409

    async def test_list_payouts_with_filters(
        self,
        client: AsyncClient,
        period_start: datetime,
        period_end: datetime,
    ) -> None:
        await create_restaurant(client, restaurant_id="res_list_a")
        await create_restaurant(client, restaurant_id="res_list_b")
        paid = await _generate(client, "res_list_a", period_start, period_end)
        await _generate(client, "res_list_b", period_start, period_end)
        await client.post(f"/v1/payouts/{paid.json()['id']}/mark-paid", json={})

        everything = await client.get("/v1/payouts")
        assert everything.status_code == 200
        assert everything.json()["count"] == 2

        by_restaurant = await client.get("/v1/payouts", params={"restaurant_id": "res_list_b"})
        assert [p["restaurant_id"] for p in by_restaurant.json()["items"]] == [
            "res_list_b"
        ]

        by_status = await client.get("/v1/payouts", params={"status": "paid"})
        assert [p["id"] for p in by_status.json()["items"]] == [paid.json()["id"]]

        later = await client.get(
            "/v1/payouts",
            params={"period_start_from": (period_end + timedelta(days=1)).isoformat()},
        )
        assert later.json()["count"] == 0

        limited = await client.get("/v1/payouts", params={"limit": 1})
        assert limited.json()["count"] == 1

    async def test_list_payouts_invalid_limit(self, client: AsyncClient) -> None:
        response = await client.get("/v1/payouts", params={"limit": 0})

        assert response.status_code == 422

    async def test_payout_summary(
        self,
        client: AsyncClient,
        period_start: datetime,
        period_end: datetime,
        in_period: datetime,
    ) -> None:
        for restaurant_id, total in (("res_sum_a", 10000), ("res_sum_b", 20000)):
            await create_restaurant(client, restaurant_id=restaurant_id)
            await client.post(
                "/v1/orders",
                json=OrderFactory.create_order_data(restaurant_id, total, created_at=in_period),
            )
        paid = await _generate(client, "res_sum_a", period_start, period_end)
        await _generate(client, "res_sum_b", period_start, period_end)
        await client.post(f"/v1/payouts/{paid.json()['id']}/mark-paid", json={})

        response = await client.get("/v1/payouts/summary")

        assert response.status_code == 200
        data = response.json()

        assert data["payout_count"] == 2
        assert data["total_amount_cents"] == 25500
        assert data["total_paid_cents"] == 8500
        assert data["total_pending_cents"] == 17000
        assert data["average_payout_cents"] == 12750
        assert data["currency"] == "GBP"

        filtered = await client.get(
            "/v1/payouts/summary", params={"restaurant_id": "res_sum_b"}
        )
        assert filtered.json()["payout_count"] == 1
        assert filtered.json()["total_pending_cents"] == 17000

    async def test_summary_empty(self, client: AsyncClient) -> None:
        response = await client.get("/v1/payouts/summary")

        assert response.status_code == 200
        data = response.json()

        assert data["payout_count"] == 0
        assert data["average_payout_cents"] == 0


@pytest.mark.integration
class TestHealthAndMetrics:
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "currency": "GBP"}

    async def test_metrics_exposed(self, client: AsyncClient) -> None:
        response = await client.get("/metrics/")

        assert response.status_code == 200
        assert "restaurant_payouts_total" in response.text
