from prometheus_client import Counter, Gauge

orders_total = Counter(
    "restaurant_orders_total", "Total orders recorded", ["status"]
)

payouts_total = Counter(
    "restaurant_payouts_total", "Total payout status changes", ["status"]
)

payout_amount_cents_total = Counter(
    "restaurant_payout_amount_cents_total",
    "Net payout amount generated, in cents",
)

pending_payouts_amount = Gauge(
    "restaurant_pending_payouts_amount_cents",
    "Net amount of payouts currently pending, in cents",
)
