"""Prometheus metric objects for the circles service.

HTTP traffic is recorded by PrometheusMiddleware. The remaining metrics
cover event filtering, category resolution, custom vibe creation and the
health of stored event documents.
"""
from prometheus_client import Counter, Histogram, Gauge

# -- HTTP --

HTTP_REQUESTS_TOTAL = Counter(
    "circles_http_requests_total",
    "HTTP requests by route template and status",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "circles_http_request_duration_seconds",
    "HTTP request handling time",
    ["method", "endpoint"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "circles_http_requests_in_progress",
    "HTTP requests currently in flight",
    ["method", "endpoint"],
)

HTTP_REQUEST_SIZE_BYTES = Histogram(
    "circles_http_request_size_bytes",
    "Declared request body size",
    ["method", "endpoint"],
    buckets=(64, 256, 1024, 4096, 16384),
)

HTTP_RESPONSE_SIZE_BYTES = Histogram(
    "circles_http_response_size_bytes",
    "Declared response body size",
    ["method", "endpoint"],
    buckets=(256, 1024, 4096, 16384, 65536, 262144, 1048576),
)

# -- EVENT FILTER --

# One increment per active dimension per request ("none" when unconstrained)
EVENT_FILTER_REQUESTS_TOTAL = Counter(
    "circles_event_filter_requests_total",
    "Event filter requests by active dimension",
    ["dimension"],
)

EVENT_FILTER_RESULT_SIZE = Histogram(
    "circles_event_filter_result_size",
    "Number of events returned by a filter request",
    buckets=(0, 1, 5, 10, 25, 50, 100, 250, 500, 1000),
)

EVENT_FILTER_DURATION_SECONDS = Histogram(
    "circles_event_filter_duration_seconds",
    "Time spent loading, filtering and annotating events",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

# -- TAXONOMY --

CATEGORY_RESOLUTIONS_TOTAL = Counter(
    "circles_category_resolutions_total",
    "Category resolutions by derivation step",
    ["source"],  # source: main_category, vibe, legacy_category, default
)

CUSTOM_VIBE_RESULTS_TOTAL = Counter(
    "circles_custom_vibe_results_total",
    "Custom vibe creation outcomes",
    ["result"],  # result: created, or a rejection reason
)

# -- DOCUMENT STORE --

EVENTS_DECODE_ERRORS_TOTAL = Counter(
    "circles_events_decode_errors_total",
    "Event documents skipped because they could not be decoded",
)

EVENTS_STORED = Gauge(
    "circles_events_stored",
    "Number of event documents seen on the last full listing",
)
