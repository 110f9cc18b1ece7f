from prometheus_client import Counter, Histogram


payment_attempts_total = Counter("payment_attempts_total", "Payment executions by outcome", ["outcome"])

payment_volume_total = Counter("payment_volume_total", "Total payment volume processed", ["currency", "status"])

gateway_latency_seconds = Histogram(
    "payment_gateway_latency_seconds",
    "Time spent waiting on the payment gateway",
    buckets=(0.1, 0.25, 0.5, 1, 2.5, 5, 10, 15, 30),
)

webhook_events_total = Counter("payment_webhook_events_total", "Gateway notifications by result", ["result"])

stale_orders_expired_total = Counter(
    "payment_stale_orders_expired_total", "Orders moved from processing to failed by the sweeper"
)
