# paintperfect/observability/metrics.py
from fastapi import APIRouter
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.responses import Response

router = APIRouter(tags=["observability"])

requests_created_counter = Counter(
    "paintperfect_requests_created_total",
    "Painting requests created",
    ["source"],  # dialog|checkout
)

checkout_items_counter = Counter(
    "paintperfect_checkout_items_total",
    "Cart items processed by checkout",
    ["result"],  # converted|skipped|error
)

upload_counter = Counter(
    "paintperfect_uploads_total",
    "File uploads",
    ["bucket", "result"],  # success|error
)

upload_size_hist = Histogram(
    "paintperfect_upload_size_bytes",
    "Uploaded file sizes",
    buckets=(1e4, 1e5, 3e5, 1e6, 3e6, 1e7, 3e7),
)

vendor_approvals_counter = Counter(
    "paintperfect_vendor_approvals_total",
    "Vendors approved by admins",
)

status_transitions_counter = Counter(
    "paintperfect_status_transitions_total",
    "Request status changes",
    ["to_status"],
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
