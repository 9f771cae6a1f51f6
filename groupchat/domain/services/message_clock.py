"""
MessageClock - issues message timestamps that never go backwards.

Two posts landing in the same microsecond would otherwise share a sort key.
The clock bumps the second one by one microsecond, which keeps lexicographic
order intact. Uniqueness across processes is enforced by the conditional
message write, not here.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from groupchat.domain.value_objects.message_timestamp import MessageTimestamp


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageClock:
    def __init__(self, now: Callable[[], datetime] = _utc_now):
        self._now = now
        self._last: Optional[datetime] = None

    def next(self) -> MessageTimestamp:
        current = self._now()
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return MessageTimestamp.from_datetime(current)
