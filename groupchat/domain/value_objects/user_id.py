"""
UserId Value Object - opaque identifier issued by the identity provider.
"""

from dataclasses import dataclass

from groupchat.domain.exceptions.validation_error import DomainValidationError


@dataclass(frozen=True)
class UserId:
    value: str  # user_id, the verified token subject

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise DomainValidationError("UserId must be a non-empty string")

    def __str__(self) -> str:
        return self.value
