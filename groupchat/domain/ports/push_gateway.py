"""
Push Gateway Port - delivers one notification to one device token.

A PushGateway holds configuration only. Network resources live in a
PushSession, opened with `async with gateway.connect() as session:` for the
duration of a single fan-out and released on every exit path.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PushNotification:
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)


class PushSession(ABC):
    @abstractmethod
    async def send(
        self, device_token: str, notification: PushNotification, dry_run: bool = False
    ) -> str:
        """
        Send one notification. Returns the gateway's message name/id.

        Raises:
            InvalidDeviceTokenError: token unknown or expired
            PushGatewayError: any other gateway failure
        """
        ...


class PushGateway(ABC):
    @abstractmethod
    def connect(self) -> AbstractAsyncContextManager[PushSession]: ...
