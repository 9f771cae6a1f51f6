"""
Redis Task Queue - dispatch to a separate worker process.

Redis Data Structure (LIST):
- Key: Config.TASK_QUEUE_KEY (default "groupchat:tasks:queue")
- Producer: LPUSH one JSON envelope per task
- Consumer: BRPOP (oldest first), one task at a time per worker

Envelope:
    {"operation": "...", "payload": {...}, "correlation_id": "...", "queued_at": "<iso>"}

Delivery is at-most-once: a worker that dies mid-task loses it.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from groupchat.config.logging_config import correlation_id_var
from groupchat.domain.exceptions import UpstreamError
from groupchat.domain.ports.task_dispatcher import TaskDispatcher

if TYPE_CHECKING:
    from groupchat.setup.task_runner import TaskRunner

logger = logging.getLogger(__name__)


class RedisTaskQueue(TaskDispatcher):
    def __init__(self, redis: Redis, queue_key: str):
        self._redis = redis
        self._queue_key = queue_key

    async def dispatch(self, operation: str, payload: dict[str, Any]) -> None:
        envelope = {
            "operation": operation,
            "payload": payload,
            "correlation_id": correlation_id_var.get(),
            "queued_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            await self._redis.lpush(self._queue_key, json.dumps(envelope))
        except RedisError as e:
            raise UpstreamError(f"Could not enqueue {operation}: {e}") from e
        logger.debug(f"[Tasks] Queued {operation} on {self._queue_key}")

    async def depth(self) -> int:
        return await self._redis.llen(self._queue_key)


class TaskWorker:
    """BRPOP loop executing queued tasks through a TaskRunner until stopped."""

    def __init__(
        self,
        redis: Redis,
        queue_key: str,
        runner: "TaskRunner",
        poll_seconds: int = 5,
    ):
        self._redis = redis
        self._queue_key = queue_key
        self._runner = runner
        self._poll_seconds = poll_seconds
        self._running = False

    def stop(self) -> None:
        self._running = False

    async def run_once(self) -> bool:
        """Pop and run at most one task. Returns False if the queue stayed empty."""
        item = await self._redis.brpop([self._queue_key], timeout=self._poll_seconds)
        if not item:
            return False
        _, raw = item
        try:
            envelope = json.loads(raw)
            operation = envelope["operation"]
            payload = envelope.get("payload") or {}
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"[Worker] Dropping malformed task {raw!r}: {e}")
            return True
        await self._runner.run(operation, payload, envelope.get("correlation_id"))
        return True

    async def run(self) -> None:
        self._running = True
        logger.info(f"[Worker] Listening on {self._queue_key}")
        while self._running:
            try:
                await self.run_once()
            except RedisError as e:
                logger.error(f"[Worker] Redis error: {e}, retrying in {self._poll_seconds}s")
                await asyncio.sleep(self._poll_seconds)
        logger.info("[Worker] Stopped")
