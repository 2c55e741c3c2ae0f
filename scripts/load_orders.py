import asyncio
import argparse
import json
from pathlib import Path
from typing import List, Dict, Any, Optional
import httpx


class OrderLoader:
    """Replays restaurants, orders and refunds from a JSONL file against the API.

    Each line is an object with a ``type`` of ``restaurant`` or ``order``.
    Order lines may carry ``refund_paid_by`` (and optionally
    ``refund_amount_cents``) to refund the order right after creating it.
    """

    def __init__(self, api_url: str, timeout: float = 30.0):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    async def load_records_from_file(self, file_path: Path) -> Dict[str, Any]:
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        records = []
        with open(file_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError as e:
                    print(f"Warning: JSON decode error at line {line_num}: {e}")

        print(f"Loaded {len(records)} records from {file_path.name}")
        return await self.send_records(records)

    async def _send(
        self, client: httpx.AsyncClient, path: str, payload: Dict[str, Any]
    ) -> httpx.Response:
        return await client.post(
            f"{self.api_url}{path}",
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    async def _load_order(
        self, client: httpx.AsyncClient, record: Dict[str, Any]
    ) -> httpx.Response:
        refund: Optional[Dict[str, Any]] = None
        if "refund_paid_by" in record:
            refund = {"refund_paid_by": record.pop("refund_paid_by")}
            if "refund_amount_cents" in record:
                refund["refund_amount_cents"] = record.pop("refund_amount_cents")

        response = await self._send(client, "/v1/orders", record)
        if refund is None or response.status_code != 201:
            return response
        order_id = response.json()["id"]
        return await self._send(client, f"/v1/orders/{order_id}/refund", refund)

    async def send_records(self, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        stats: Dict[str, Any] = {
            "total": len(records),
            "success": 0,
            "failed": 0,
            "duplicate": 0,
            "errors": [],
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            print(f"\nSending {len(records)} records to {self.api_url}")
            print("-" * 60)

            for idx, record in enumerate(records, 1):
                record_type = record.pop("type", "order")
                label = record.get("id") or record.get("restaurant_id", "unknown")

                try:
                    if record_type == "restaurant":
                        response = await self._send(client, "/v1/restaurants", record)
                    else:
                        response = await self._load_order(client, record)

                    if response.status_code in (200, 201):
                        stats["success"] += 1
                        print(f"[{idx}/{len(records)}] SUCCESS: {record_type} {label}")
                    elif response.status_code == 409:
                        stats["duplicate"] += 1
                        print(f"[{idx}/{len(records)}] DUPLICATE: {record_type} {label}")
                    else:
                        stats["failed"] += 1
                        error_detail = response.text[:100]
                        print(
                            f"[{idx}/{len(records)}] FAILED: {record_type} {label} - {response.status_code}: {error_detail}"
                        )
                        stats["errors"].append(
                            {
                                "record": label,
                                "status": response.status_code,
                                "detail": error_detail,
                            }
                        )

                except httpx.RequestError as e:
                    stats["failed"] += 1
                    print(
                        f"[{idx}/{len(records)}] ERROR: {label} - Connection error: {str(e)}"
                    )
                    stats["errors"].append({"record": label, "error": str(e)})

        return stats

    def print_summary(self, stats: Dict[str, Any]):
        print("\n" + "=" * 60)
        print("LOADING SUMMARY")
        print("=" * 60)
        print(f"Total records:    {stats['total']}")
        print(f"Successful:       {stats['success']}")
        print(f"Duplicates:       {stats['duplicate']}")
        print(f"Failed:           {stats['failed']}")

        if stats["errors"]:
            print(f"\nWarning: {len(stats['errors'])} errors detected")


async def main():
    parser = argparse.ArgumentParser(
        description="Load restaurants and orders from a JSONL file to the API"
    )
    parser.add_argument(
        "--file", type=str, required=True, help="Path to JSONL file with records"
    )
    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:8000",
        help="Base URL of the API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )

    args = parser.parse_args()
    file_path = Path(args.file)

    print("\nConfiguration:")
    print(f"  File:     {file_path}")
    print(f"  API URL:  {args.url}")
    print(f"  Timeout:  {args.timeout}s")

    loader = OrderLoader(api_url=args.url, timeout=args.timeout)

    try:
        stats = await loader.load_records_from_file(file_path)
        loader.print_summary(stats)

        if stats["failed"] > 0:
            exit(1)
        exit(0)

    except FileNotFoundError as e:
        print(f"\nError: {e}")
        exit(1)


if __name__ == "__main__":
    asyncio.run(main())
