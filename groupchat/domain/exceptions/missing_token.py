"""
MissingTokenError - Push fan-out precondition unmet for one or more recipients.
Only raised inside the notification task; never reaches an HTTP caller.
"""

from typing import Any, Optional


class MissingTokenError(Exception):
    def __init__(self, user_ids: list[str], result: Optional[Any] = None):
        self.user_ids = list(user_ids)
        # outcome of the sends that did go out to recipients with a token
        self.result = result
        super().__init__(
            f"fcmToken not set for users {', '.join(self.user_ids)} to send push notification"
        )
