"""
ConversationId Value Object - opaque identity shared by a set of memberships.
"""

from dataclasses import dataclass
from uuid import uuid1

from groupchat.domain.exceptions.validation_error import DomainValidationError


@dataclass(frozen=True)
class ConversationId:
    value: str  # conversation_id, uuid1 string when minted here

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise DomainValidationError("ConversationId must be a non-empty string")

    @classmethod
    def generate(cls) -> "ConversationId":
        """Mint a new id. uuid1 keeps ids roughly ordered by creation time."""
        return cls(str(uuid1()))

    def __str__(self) -> str:
        return self.value
