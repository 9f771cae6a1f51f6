from groupchat.infrastructure.jobs.local_dispatchers import (
    InlineTaskDispatcher,
    InProcessTaskDispatcher,
)
from groupchat.infrastructure.jobs.redis_task_queue import RedisTaskQueue, TaskWorker

__all__ = [
    "InlineTaskDispatcher",
    "InProcessTaskDispatcher",
    "RedisTaskQueue",
    "TaskWorker",
]
