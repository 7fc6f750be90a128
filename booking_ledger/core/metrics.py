"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_operations = Counter(
    'booking_operations_total',
    'Booking ledger operations',
    ['operation', 'status']  # create/confirm/cancel, success/rejected/error
)

# Auth metrics
login_attempts = Counter(
    'login_attempts_total',
    'Login attempts',
    ['result']  # success, failure
)

# Persistence metrics
persistence_flushes = Counter(
    'persistence_flushes_total',
    'Persistence flushes',
    ['result']  # success, retry, error, timeout
)

persistence_flush_latency = Histogram(
    'persistence_flush_latency_seconds',
    'Time spent writing the data file',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0]
)

# HTTP metrics
request_latency = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency',
    ['method', 'status_code'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_operation(operation: str, status: str):
    """Record ledger operation. Status: success, rejected, error"""
    booking_operations.labels(operation=operation, status=status).inc()


def record_login(success: bool):
    login_attempts.labels(result="success" if success else "failure").inc()


def record_flush(result: str):
    """Record flush outcome. Result: success, retry, error, timeout"""
    persistence_flushes.labels(result=result).inc()
