"""
Task dispatchers that execute in the API process.

- InProcessTaskDispatcher: schedules an asyncio task and returns at once.
  Tasks still pending at shutdown are awaited by drain(); anything lost to a
  crash is lost (at-most-once).
- InlineTaskDispatcher: awaits the task before returning. For development
  and tests, where "eventually" should mean "before the response".
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from groupchat.config.logging_config import correlation_id_var
from groupchat.domain.ports.task_dispatcher import TaskDispatcher

if TYPE_CHECKING:
    from groupchat.setup.task_runner import TaskRunner

logger = logging.getLogger(__name__)


class InProcessTaskDispatcher(TaskDispatcher):
    def __init__(self, runner: "TaskRunner"):
        self._runner = runner
        self._pending: set[asyncio.Task] = set()

    async def dispatch(self, operation: str, payload: dict[str, Any]) -> None:
        task = asyncio.create_task(
            self._runner.run(operation, dict(payload), correlation_id_var.get()),
            name=f"task:{operation}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        logger.debug(f"[Tasks] Scheduled {operation} in process")

    async def drain(self) -> None:
        """Wait for every task scheduled so far."""
        if self._pending:
            logger.info(f"[Tasks] Waiting for {len(self._pending)} pending tasks")
            await asyncio.gather(*self._pending, return_exceptions=True)


class InlineTaskDispatcher(TaskDispatcher):
    def __init__(self, runner: "TaskRunner"):
        self._runner = runner

    async def dispatch(self, operation: str, payload: dict[str, Any]) -> None:
        await self._runner.run(operation, dict(payload), correlation_id_var.get())
