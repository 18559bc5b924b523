"""Application metrics using the Prometheus client library.

All metrics are defined here so there is one inventory of what the
service measures.  Other modules import and increment them at the point
of action.

Counters only go up, gauges go up and down, histograms bucket
observations so Prometheus can compute percentiles.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Progression metrics
# ---------------------------------------------------------------------------

ITEM_COMPLETIONS = Counter(
    "curriculum_item_completions_total",
    "Completion events that changed a progress record",
    ["item_type"],  # lesson|quiz
)

QUIZ_ATTEMPTS = Counter(
    "quiz_attempts_total",
    "Graded quiz attempts by outcome",
    ["result"],  # passed|failed
)

LOCKED_REJECTIONS = Counter(
    "curriculum_locked_rejections_total",
    "Navigation or completion attempts rejected because the item was locked",
    ["operation"],  # navigate|complete
)

COURSES_COMPLETED = Counter(
    "courses_completed_total",
    "Progress records that reached Completed",
)
