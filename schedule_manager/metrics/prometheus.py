# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "schedule_requests_total",
    "Total HTTP requests to schedule service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "schedule_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "schedule_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
SCHEDULES_CREATED = Counter(
    "schedule_schedules_created_total",
    "Total schedules created",
    ["category"],
)
OCCURRENCES_GENERATED = Counter(
    "schedule_occurrences_generated_total",
    "Total recurring occurrences generated",
    ["repeat_type"],
)
SCHEDULES_DELETED = Counter(
    "schedule_schedules_deleted_total",
    "Total schedules deleted",
)
SCHEDULES_IMPORTED = Counter(
    "schedule_schedules_imported_total",
    "Total schedules imported",
    ["status"],
)
TEMPLATES_USED = Counter(
    "schedule_templates_used_total",
    "Total schedules materialised from templates",
)
PERSISTENCE_FAILURES = Counter(
    "schedule_persistence_failures_total",
    "Total failed writes to the JSON data files",
    ["collection"],
)
ACTIVE_SCHEDULES = Gauge(
    "schedule_active_schedules",
    "Number of schedules currently stored",
)
ACTIVE_TEMPLATES = Gauge(
    "schedule_active_templates",
    "Number of templates currently stored",
)
