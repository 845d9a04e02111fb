# app/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

decision_counter = Counter(
    "tiered_discount_decisions_total",
    "Number of discount function evaluations",
    ["outcome"],  # applied|configuration_mismatch|no_eligible_target|no_matching_tier|non_positive_discount|invalid_configuration
)

validation_counter = Counter(
    "tiered_discount_validations_total",
    "Number of editor tier validations",
    ["result"],  # valid|invalid
)

evaluation_latency_hist = Histogram(
    "tiered_discount_evaluation_seconds",
    "Time spent evaluating one cart",
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
