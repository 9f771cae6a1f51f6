"""
Prometheus Metrics for the group chat service.

DATA FLOW:
    This file                  presentation/api/metrics.py         Observability Stack
    ─────────                  ────────────────────────────         ───────────────────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus scraper

METRIC TYPES:
    - Gauge: Value goes up/down (e.g., tasks currently running)
    - Counter: Value only goes up (e.g., messages posted)
    - Histogram: Distribution (for percentiles like P95, e.g., latency)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
REQUEST_LATENCY = Histogram(
    "http_server_request_duration_seconds",
    "Http request latency in seconds",
    ["method", "route", "http_status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10],
)

MESSAGES_POSTED_TOTAL = Counter(
    "groupchat_messages_posted_total",
    "Total number of messages posted",
    ["notify"],
)

PUSH_SENDS_TOTAL = Counter(
    "groupchat_push_sends_total",
    "Push notification sends by outcome",
    ["result"],
)

SNAPSHOTS_REPAIRED_TOTAL = Counter(
    "groupchat_sender_snapshots_repaired_total",
    "Message sender snapshots rewritten by the repair task",
    ["result"],
)

ACTIVE_TASKS = Gauge(
    "groupchat_active_tasks", "Number of background tasks currently executing"
)

TASKS_TOTAL = Counter(
    "groupchat_tasks_total",
    "Background tasks by operation and final status",
    ["operation", "status"],
)

TASK_LATENCY = Histogram(
    "groupchat_task_duration_seconds",
    "Background task execution time in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.5, 1, 2, 5, 10, 30],
)

ERRORS_TOTAL = Counter(
    "groupchat_errors_total",
    "Total number of errors by type",
    ["error_type"],
)


# =============================================================================
# LABEL CONSTANTS
# =============================================================================
class MetricsErrorType:
    """Error type labels for groupchat_errors_total metric."""

    TASK_DISPATCH_FAILED = "task_dispatch_failed"
    TASK_FAILED = "task_failed"
    PUSH_FAILED = "push_failed"
    MISSING_TOKEN = "missing_token"
    STORAGE_FAILED = "storage_failed"


class PushResult:
    SENT = "sent"
    FAILED = "failed"
    INVALID_TOKEN = "invalid_token"
    MISSING_TOKEN = "missing_token"


class TaskStatus:
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNKNOWN_OPERATION = "unknown_operation"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def observe_request_latency(method: str, route: str, status_code: int, duration: float):
    """Call to record request latency. Integration point: fastapi_app.py middleware"""
    REQUEST_LATENCY.labels(
        method=method, route=route, http_status_code=str(status_code)
    ).observe(duration)


def increment_messages_posted(notify: bool):
    MESSAGES_POSTED_TOTAL.labels(notify=str(bool(notify)).lower()).inc()


def increment_push_sends(result: str, count: int = 1):
    """Integration point: application/commands/tasks/send_push_notifications.py"""
    if count:
        PUSH_SENDS_TOTAL.labels(result=result).inc(count)


def increment_snapshots_repaired(updated: int, skipped: int):
    """Integration point: application/commands/tasks/repair_sender_snapshots.py"""
    if updated:
        SNAPSHOTS_REPAIRED_TOTAL.labels(result="updated").inc(updated)
    if skipped:
        SNAPSHOTS_REPAIRED_TOTAL.labels(result="skipped").inc(skipped)


def increment_active_tasks():
    ACTIVE_TASKS.inc()


def decrement_active_tasks():
    ACTIVE_TASKS.dec()


def observe_task(operation: str, status: str, duration: float):
    """Call once per executed task. Integration point: setup/task_runner.py"""
    TASKS_TOTAL.labels(operation=operation, status=status).inc()
    TASK_LATENCY.labels(operation=operation).observe(duration)


def increment_error(error_type: str):
    """
    Call to record an error occurrence.

    Args:
        error_type: One of MetricsErrorType
    """
    ERRORS_TOTAL.labels(error_type=error_type).inc()


# =============================================================================
# HELPER FOR /metrics ENDPOINT
# =============================================================================
def get_metrics_content():
    """
    Generate Prometheus metrics output.

    Called by: presentation/api/metrics.py

    Returns:
        Tuple of (content_bytes, content_type_string)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "observe_request_latency",
    "increment_messages_posted",
    "increment_push_sends",
    "increment_snapshots_repaired",
    "increment_active_tasks",
    "decrement_active_tasks",
    "observe_task",
    "increment_error",
    "get_metrics_content",
    "MetricsErrorType",
    "PushResult",
    "TaskStatus",
]
