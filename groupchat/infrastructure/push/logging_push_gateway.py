"""Logging Push Gateway - development backend that only logs what it would send."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from groupchat.domain.ports.push_gateway import (
    PushGateway,
    PushNotification,
    PushSession,
)

logger = logging.getLogger(__name__)


class LoggingPushSession(PushSession):
    def __init__(self):
        self.sent: list[tuple[str, PushNotification]] = []

    async def send(
        self, device_token: str, notification: PushNotification, dry_run: bool = False
    ) -> str:
        self.sent.append((device_token, notification))
        logger.info(
            f"[Push] (log backend{', dry run' if dry_run else ''}) "
            f"{notification.title!r} → {device_token[:8]}…: {notification.body!r}"
        )
        return f"logged/{len(self.sent)}"


class LoggingPushGateway(PushGateway):
    @asynccontextmanager
    async def connect(self) -> AsyncIterator[PushSession]:
        yield LoggingPushSession()
