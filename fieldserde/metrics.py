"""
Serializer Metrics
fieldserde

Prometheus instrumentation for top-level serialize() calls.
"""

from prometheus_client import Counter, Histogram

SERIALIZE_CALLS_TOTAL = Counter(
    "fieldserde_serialize_calls_total",
    "Total top-level serialize calls by serializer and mode",
    ["serializer", "mode"],
)

FIELD_ERRORS_TOTAL = Counter(
    "fieldserde_field_errors_total",
    "Total field errors reported by serializer",
    ["serializer"],
)

SERIALIZE_DURATION = Histogram(
    "fieldserde_serialize_duration_seconds",
    "Top-level serialize duration in seconds",
    ["serializer"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)


def record_call(serializer: str, mode: str, error_count: int, duration: float) -> None:
    """Record one finished top-level call."""
    SERIALIZE_CALLS_TOTAL.labels(serializer=serializer, mode=mode).inc()
    if error_count:
        FIELD_ERRORS_TOTAL.labels(serializer=serializer).inc(error_count)
    SERIALIZE_DURATION.labels(serializer=serializer).observe(duration)
