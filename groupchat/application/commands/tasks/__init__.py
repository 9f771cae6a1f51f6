from groupchat.application.commands.tasks.send_push_notifications import (
    FanOutResult,
    SendPushNotificationsCommand,
    SendPushNotificationsHandler,
)
from groupchat.application.commands.tasks.repair_sender_snapshots import (
    RepairResult,
    RepairSenderSnapshotsCommand,
    RepairSenderSnapshotsHandler,
)

__all__ = [
    "FanOutResult",
    "SendPushNotificationsCommand",
    "SendPushNotificationsHandler",
    "RepairResult",
    "RepairSenderSnapshotsCommand",
    "RepairSenderSnapshotsHandler",
]
