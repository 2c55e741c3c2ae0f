import argparse
import asyncio
from datetime import date

import httpx


async def seed_payouts(api_url: str, as_of: date, frequency: str) -> None:
    timeout = 30.0

    print(f"Starting {frequency} payout run as of {as_of.isoformat()}...\n")

    async with httpx.AsyncClient(base_url=api_url, timeout=timeout) as client:
        response = await client.post(
            "/v1/payouts/run",
            json={"as_of": as_of.isoformat(), "payout_frequency": frequency},
        )
        if response.status_code != 202:
            print(f"Payout run rejected - {response.status_code}: {response.text[:200]}")
            return
        print("Payout run accepted")

        # The run executes as a background task after the response.
        await asyncio.sleep(1)

        print("\n--- Verification ---")

        listing = await client.get("/v1/payouts", params={"limit": 500})
        print("\nPayouts:")
        for payout in listing.json()["items"]:
            print(
                f"  #{payout['id']:<5} {payout['restaurant_id']:<25} "
                f"{payout['period_start'][:10]} .. {payout['period_end'][:10]} "
                f"net={payout['net_payout_cents']:>10} {payout['status']}"
            )

        summary = (await client.get("/v1/payouts/summary")).json()
        print("\nSummary:")
        for key in (
            "payout_count",
            "total_amount_cents",
            "total_paid_cents",
            "total_pending_cents",
            "average_payout_cents",
        ):
            print(f"  {key:<22} {summary[key]}")
        print(f"  {'currency':<22} {summary['currency']}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Trigger a payout run via the API")
    parser.add_argument("--url", default="http://localhost:8000")
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=date.today(),
        help="Any date inside the period to pay out (default: today)",
    )
    parser.add_argument(
        "--frequency", choices=["daily", "weekly", "monthly"], default="monthly"
    )
    args = parser.parse_args()

    asyncio.run(seed_payouts(args.url, args.as_of, args.frequency))


if __name__ == "__main__":
    main()
