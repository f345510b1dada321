"""Prometheus metrics for monitoring risk outcomes, liabilities, and filing performance"""

from prometheus_client import Counter, Histogram

from taxmate_gateway.domain.models import ComputedSnapshot

# Snapshot metrics
snapshot_counter = Counter(
    "taxmate_snapshot_total",
    "Total tax snapshots computed",
    ["business_type"],  # personal | organization
)

risk_band_counter = Counter(
    "taxmate_risk_band",
    "Snapshots by audit-risk band",
    ["band"],  # low | medium | high
)

risk_flag_counter = Counter(
    "taxmate_risk_flag_total",
    "Audit-risk flags raised",
    ["flag"],
)

# Filing metrics
filing_counter = Counter(
    "taxmate_filing_total",
    "Return drafts queued for filing",
    ["return_type"],
)

filing_latency_histogram = Histogram(
    "filing_latency_seconds",
    "Filing service response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

filing_failure_counter = Counter(
    "filing_failures_total",
    "Failed filing submissions",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_snapshot(snapshot: ComputedSnapshot, business_type: str, risk_band: str) -> None:
    """Record snapshot metrics for monitoring risk distribution"""
    snapshot_counter.labels(business_type=business_type).inc()
    risk_band_counter.labels(band=risk_band).inc()

    for flag in snapshot.risk_flags:
        risk_flag_counter.labels(flag=flag.id).inc()
