"""
Message Entity - A single message in a conversation.

The sender is a denormalized snapshot of the user taken at post time. It goes
stale when the user updates their profile until the repair task rewrites it.
"""

from __future__ import annotations
from dataclasses import dataclass

from groupchat.domain.entities.user import User
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.message_timestamp import MessageTimestamp
from groupchat.domain.value_objects.user_id import UserId


@dataclass
class Message:
    conversation_id: ConversationId
    timestamp: MessageTimestamp
    text: str
    sender: User

    @classmethod
    def create(
        cls,
        conversation_id: ConversationId,
        text: str,
        sender: User,
        timestamp: MessageTimestamp,
    ) -> Message:
        """Factory method embedding a fresh snapshot of the sender."""
        return cls(
            conversation_id=conversation_id,
            timestamp=timestamp,
            text=text,
            sender=sender.snapshot(),
        )

    def is_from(self, user_id: UserId) -> bool:
        return self.sender.id == user_id
