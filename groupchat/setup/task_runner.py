"""
Task Runner - executes a dispatched operation by name.

Used by every task backend (in-process, inline and the Redis worker).

Flow:
    operation name + JSON payload
        ↓ _build_command()
    Command + handler type
        ↓ new dishka REQUEST scope
    handler.execute(command)
        ↓
    outcome logged and counted; nothing is raised to the caller
"""

import logging
import time
from typing import Any, Optional

from dishka import AsyncContainer

from groupchat.application.commands.tasks import (
    RepairSenderSnapshotsCommand,
    RepairSenderSnapshotsHandler,
    SendPushNotificationsCommand,
    SendPushNotificationsHandler,
)
from groupchat.config.logging_config import correlation_id_var
from groupchat.domain.exceptions import MissingTokenError
from groupchat.domain.ports.task_dispatcher import (
    REPAIR_SENDER_SNAPSHOTS,
    SEND_PUSH_NOTIFICATIONS,
)
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId
from groupchat.observability.metrics import (
    MetricsErrorType,
    TaskStatus,
    decrement_active_tasks,
    increment_active_tasks,
    increment_error,
    observe_task,
)

logger = logging.getLogger(__name__)


def _build_command(operation: str, payload: dict[str, Any]):
    if operation == SEND_PUSH_NOTIFICATIONS:
        return SendPushNotificationsHandler, SendPushNotificationsCommand(
            conversation_id=ConversationId(payload["conversationId"]),
            sender_id=UserId(payload["senderId"]),
            text=payload.get("message", ""),
            dry_run=bool(payload.get("dryRun", False)),
        )
    if operation == REPAIR_SENDER_SNAPSHOTS:
        return RepairSenderSnapshotsHandler, RepairSenderSnapshotsCommand(
            user_id=UserId(payload["userId"]),
        )
    return None, None


class TaskRunner:
    def __init__(self, container: AsyncContainer):
        self._container = container

    async def run(
        self,
        operation: str,
        payload: dict[str, Any],
        correlation_id: Optional[str] = None,
    ) -> bool:
        """Execute one task. Returns True on success, False on any failure."""
        token = correlation_id_var.set(correlation_id) if correlation_id else None
        started = time.perf_counter()
        status = TaskStatus.FAILED
        increment_active_tasks()
        try:
            try:
                handler_type, command = _build_command(operation, payload)
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"[Tasks] Bad payload for {operation}: {e!r}")
                increment_error(MetricsErrorType.TASK_FAILED)
                return False
            if handler_type is None:
                status = TaskStatus.UNKNOWN_OPERATION
                logger.error(f"[Tasks] Unknown operation {operation!r}, dropped")
                return False

            async with self._container() as request_container:
                handler = await request_container.get(handler_type)
                result = await handler.execute(command)

            status = TaskStatus.SUCCEEDED
            logger.info(f"[Tasks] {operation} finished: {result}")
            return True
        except MissingTokenError as e:
            logger.warning(f"[Tasks] {operation} incomplete: {e} ({e.result})")
            return False
        except Exception:
            increment_error(MetricsErrorType.TASK_FAILED)
            logger.exception(f"[Tasks] {operation} failed")
            return False
        finally:
            decrement_active_tasks()
            observe_task(operation, status, time.perf_counter() - started)
            if token is not None:
                correlation_id_var.reset(token)
