"""
Document Message Repository Implementation.

Messages live under (conversationId, timestamp). The sender attribute is a
full copy of the user document at post time.
"""

from typing import Optional

from groupchat.domain.entities.message import Message
from groupchat.domain.entities.user import User
from groupchat.domain.exceptions import MessageTimestampConflictError
from groupchat.domain.ports.repositories import MessageRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.message_timestamp import MessageTimestamp
from groupchat.infrastructure.persistence.records import (
    message_from_record,
    message_to_record,
    user_to_record,
)
from groupchat.infrastructure.storage import (
    AttributeEquals,
    AttributeNotExists,
    ConditionFailedError,
    DocumentStore,
    MESSAGES,
)


class DocumentMessageRepository(MessageRepository):
    _store: DocumentStore

    def __init__(self, store: DocumentStore):
        self._store = store

    async def add(self, message: Message) -> None:
        try:
            await self._store.put(
                MESSAGES.name,
                message_to_record(message),
                AttributeNotExists("timestamp"),
            )
        except ConditionFailedError:
            raise MessageTimestampConflictError(
                f"Message slot {message.conversation_id}@{message.timestamp} is taken"
            ) from None

    async def list_by_conversation(
        self,
        conversation_id: ConversationId,
        since: Optional[MessageTimestamp] = None,
    ) -> list[Message]:
        records = await self._store.query(
            MESSAGES.name,
            None,
            conversation_id.value,
            after=since.value if since else None,
        )
        return [message_from_record(record) for record in records]

    async def replace_sender(
        self,
        conversation_id: ConversationId,
        timestamp: MessageTimestamp,
        sender: User,
    ) -> bool:
        try:
            await self._store.update(
                MESSAGES.name,
                {"conversationId": conversation_id.value, "timestamp": timestamp.value},
                {"sender": user_to_record(sender)},
                AttributeEquals("sender.userId", sender.id.value),
            )
        except ConditionFailedError:
            return False
        return True
