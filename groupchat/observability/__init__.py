"""Observability package for the group chat service."""

from groupchat.observability.metrics import (
    observe_request_latency,
    increment_messages_posted,
    increment_push_sends,
    increment_snapshots_repaired,
    increment_active_tasks,
    decrement_active_tasks,
    observe_task,
    increment_error,
    get_metrics_content,
    MetricsErrorType,
    PushResult,
    TaskStatus,
)

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
