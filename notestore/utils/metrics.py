"""
Prometheus-based metrics for production monitoring.
Provides /metrics endpoint for scraping.
"""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response


# Counters
orders_created_total = Counter(
    "orders_created_total",
    "Total number of gateway orders created",
)

orders_failed_total = Counter(
    "orders_failed_total",
    "Total number of failed gateway order creations",
    ["reason"],
)

payments_verified_total = Counter(
    "payments_verified_total",
    "Total verify-payment calls",
    ["outcome"],  # granted, noop
)

entitlements_granted_total = Counter(
    "entitlements_granted_total",
    "Total entitlements granted",
    ["source"],  # free, payment
)

notification_failures_total = Counter(
    "notification_failures_total",
    "Best-effort notification failures (email, audit sheet)",
    ["sink"],
)

# Histograms
gateway_request_duration_seconds = Histogram(
    "gateway_request_duration_seconds",
    "Payment gateway request duration",
    ["method"],
    buckets=[0.1, 0.5, 1, 2, 5, 10, 15],
)


# Metrics endpoint router
router = APIRouter()


@router.get("/metrics")
def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint for scraping."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
