"""Conversation DTOs for API request/response."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from groupchat.application.dto.message import MessageDTO
from groupchat.application.dto.user import UserProfileDTO

if TYPE_CHECKING:
    from groupchat.application.queries.messages.get_conversation import (
        ConversationSnapshot,
    )


class ConversationDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")
    users: list[UserProfileDTO]
    messages: list[MessageDTO]

    @classmethod
    def from_snapshot(cls, snapshot: "ConversationSnapshot") -> "ConversationDTO":
        return cls(
            conversation_id=snapshot.conversation_id.value,
            users=[UserProfileDTO.from_entity(user) for user in snapshot.users],
            messages=[MessageDTO.from_entity(message) for message in snapshot.messages],
        )


class ConversationIdsDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_ids: list[str] = Field(alias="conversationIds")


class ConversationHistoryDTO(BaseModel):
    conversations: list[ConversationDTO]
