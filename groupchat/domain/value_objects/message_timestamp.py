"""
MessageTimestamp Value Object - ISO-8601 UTC sort key of a message.

The string form has fixed width (microseconds, "Z" suffix) so that
lexicographic order equals chronological order.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from groupchat.domain.exceptions.validation_error import DomainValidationError

_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


@dataclass(frozen=True, order=True)
class MessageTimestamp:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise DomainValidationError("Timestamp cannot be empty")
        try:
            datetime.fromisoformat(self.value.replace("Z", "+00:00"))
        except ValueError as e:
            raise DomainValidationError(
                f"Timestamp must be ISO-8601: {self.value}"
            ) from e

    @classmethod
    def from_datetime(cls, moment: datetime) -> "MessageTimestamp":
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return cls(moment.astimezone(timezone.utc).strftime(_FORMAT))

    @classmethod
    def parse(cls, raw: str) -> "MessageTimestamp":
        """Accept any ISO-8601 string and re-render it in the fixed-width form."""
        return cls.from_datetime(cls(raw).to_datetime())

    def to_datetime(self) -> datetime:
        return datetime.fromisoformat(self.value.replace("Z", "+00:00"))

    def __str__(self) -> str:
        return self.value
