"""
Message Repository Port - Interface for message persistence.
Implementation: groupchat/infrastructure/persistence/document_message_repository.py
"""

from abc import ABC, abstractmethod
from typing import Optional

from groupchat.domain.entities.message import Message
from groupchat.domain.entities.user import User
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.message_timestamp import MessageTimestamp


class MessageRepository(ABC):
    @abstractmethod
    async def add(self, message: Message) -> None:
        """Insert. Raises MessageTimestampConflictError if the slot is taken."""
        ...

    @abstractmethod
    async def list_by_conversation(
        self,
        conversation_id: ConversationId,
        since: Optional[MessageTimestamp] = None,
    ) -> list[Message]:
        """Messages in timestamp order, only those strictly after `since` if given."""
        ...

    @abstractmethod
    async def replace_sender(
        self,
        conversation_id: ConversationId,
        timestamp: MessageTimestamp,
        sender: User,
    ) -> bool:
        """
        Overwrite the sender snapshot if the stored sender is still `sender.id`.

        Returns False when that condition no longer holds.
        """
        ...
