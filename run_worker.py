"""
Entry point for the background task worker.

Consumes the Redis task queue (TASK_BACKEND=redis) and executes
sendPushNotifications / repairSenderSnapshots tasks.

Usage:
    python run_worker.py
"""

import asyncio
import logging
import signal

from dotenv import load_dotenv

load_dotenv()

from redis.asyncio import Redis

from groupchat.config.logging_config import setup_logging
from groupchat.config.settings import get_config
from groupchat.infrastructure.jobs import TaskWorker
from groupchat.setup.ioc.container import create_container
from groupchat.setup.task_runner import TaskRunner

logger = logging.getLogger("groupchat.worker")


async def main() -> None:
    config = get_config()
    setup_logging(config.LOG_LEVEL, config.LOG_PATH)

    container = create_container(config)
    try:
        worker = TaskWorker(
            redis=await container.get(Redis),
            queue_key=config.TASK_QUEUE_KEY,
            runner=await container.get(TaskRunner),
            poll_seconds=config.TASK_WORKER_POLL_SECONDS,
        )

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, worker.stop)
            except NotImplementedError:
                # Windows event loops have no signal handler support
                pass

        await worker.run()
    finally:
        await container.close()


if __name__ == "__main__":
    asyncio.run(main())
