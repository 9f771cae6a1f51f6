"""
UserEmail Value Object - Wraps user email with validation.

Addresses are stored lowercased, so one mailbox maps to one user whatever
case it was typed in.
"""

import re
from dataclasses import dataclass

from groupchat.domain.exceptions.validation_error import DomainValidationError

_EMAIL_PATTERN = re.compile(
    r"^(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))@"
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)


@dataclass(frozen=True)
class UserEmail:
    value: str  # user_email, presented as email

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise DomainValidationError("Email cannot be empty")
        normalized = self.value.strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise DomainValidationError(f"Invalid email {self.value}")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
