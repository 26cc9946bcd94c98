"""
Prometheus Metrics

Defines application metrics for monitoring:
- Request counters
- Duration histograms
- Registry and sweep metrics
- Upstream API metrics
"""

from prometheus_client import Counter, Histogram, Gauge, Info

from tempbox import __version__


# ===================================
# HTTP Metrics
# ===================================

requests_total = Counter(
    "tempbox_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status"],
)

requests_duration = Histogram(
    "tempbox_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

active_requests = Gauge(
    "tempbox_active_requests",
    "Number of active HTTP requests",
)

rate_limited_total = Counter(
    "tempbox_rate_limited_total",
    "Total number of requests rejected by the rate limiter",
)


# ===================================
# Registry Metrics
# ===================================

registry_resources = Gauge(
    "tempbox_registry_resources",
    "Number of resources currently tracked by the expiry registry",
)

resources_registered_total = Counter(
    "tempbox_resources_registered_total",
    "Total number of resources registered for expiry",
)


# ===================================
# Sweep Metrics
# ===================================

sweep_runs_total = Counter(
    "tempbox_sweep_runs_total",
    "Total number of expiry sweeps",
    ["trigger", "outcome"],  # manual/scheduled, noop/completed/failed/skipped
)

sweep_duration = Histogram(
    "tempbox_sweep_duration_seconds",
    "Expiry sweep duration in seconds",
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0],
)

sweep_resources_deleted = Counter(
    "tempbox_sweep_resources_deleted_total",
    "Total number of resources deleted from the file host",
)

sweep_batch_failures = Counter(
    "tempbox_sweep_batch_failures_total",
    "Total number of failed deletion batches",
)


# ===================================
# Upstream API Metrics
# ===================================

mail_api_requests_total = Counter(
    "tempbox_mail_api_requests_total",
    "Total number of Mail.tm API calls",
    ["operation"],
)

mail_api_errors_total = Counter(
    "tempbox_mail_api_errors_total",
    "Total number of failed Mail.tm API calls",
    ["operation", "error_type"],
)

file_host_requests_total = Counter(
    "tempbox_file_host_requests_total",
    "Total number of file host deletion calls",
    ["status"],  # ok, error
)


# ===================================
# Application Info
# ===================================

app_info = Info(
    "tempbox_app",
    "Application information",
)

app_info.info({
    "version": __version__,
    "name": "TempBox",
})


# ===================================
# Helper Functions
# ===================================

def record_request(method: str, endpoint: str, status: int, duration: float):
    """
    Record HTTP request metrics.

    Args:
        method: HTTP method
        endpoint: Endpoint path
        status: HTTP status code
        duration: Request duration in seconds
    """
    requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
    requests_duration.labels(method=method, endpoint=endpoint).observe(duration)


def record_sweep(trigger: str, outcome: str, duration: float = None):
    """
    Record a sweep invocation.

    Args:
        trigger: What started the sweep (manual, scheduled)
        outcome: noop, completed, failed or skipped
        duration: Sweep duration in seconds, when it ran
    """
    sweep_runs_total.labels(trigger=trigger, outcome=outcome).inc()
    if duration is not None:
        sweep_duration.observe(duration)


def record_mail_api_call(operation: str):
    """Record a Mail.tm API call."""
    mail_api_requests_total.labels(operation=operation).inc()


def record_mail_api_error(operation: str, error_type: str):
    """Record a failed Mail.tm API call."""
    mail_api_errors_total.labels(operation=operation, error_type=error_type).inc()
