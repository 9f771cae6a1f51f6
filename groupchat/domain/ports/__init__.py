"""
PORTS - Interfaces that infrastructure implements

A "port" is an abstract interface that defines WHAT the domain needs,
without specifying HOW it's done.

Subfolders:
- repositories/      → Data persistence interfaces
- push_gateway.py    → Push notification delivery
- task_dispatcher.py → Fire-and-forget background operations
"""

from groupchat.domain.ports.push_gateway import PushGateway, PushNotification, PushSession
from groupchat.domain.ports.task_dispatcher import (
    TaskDispatcher,
    SEND_PUSH_NOTIFICATIONS,
    REPAIR_SENDER_SNAPSHOTS,
)

__all__ = [
    "PushGateway",
    "PushNotification",
    "PushSession",
    "TaskDispatcher",
    "SEND_PUSH_NOTIFICATIONS",
    "REPAIR_SENDER_SNAPSHOTS",
]
