"""
Task Dispatcher Port - fire-and-forget invocation of a named operation.

Semantics callers may rely on: none. A dispatched task may run later, run
concurrently with the caller, or never run at all (at-most-once). No result
or error ever comes back to the dispatcher's caller.
"""

from abc import ABC, abstractmethod
from typing import Any

SEND_PUSH_NOTIFICATIONS = "sendPushNotifications"
REPAIR_SENDER_SNAPSHOTS = "repairSenderSnapshots"


class TaskDispatcher(ABC):
    @abstractmethod
    async def dispatch(self, operation: str, payload: dict[str, Any]) -> None:
        """Hand the operation off. Raises only if the hand-off itself fails."""
        ...
