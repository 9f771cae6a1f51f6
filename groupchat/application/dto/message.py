"""Message DTOs for API request/response."""

from pydantic import BaseModel, ConfigDict, Field

from groupchat.application.dto.user import UserProfileDTO
from groupchat.domain.entities.message import Message


class MessageDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")
    timestamp: str
    message: str
    sender: UserProfileDTO

    @classmethod
    def from_entity(cls, message: Message) -> "MessageDTO":
        return cls(
            conversation_id=message.conversation_id.value,
            timestamp=message.timestamp.value,
            message=message.text,
            sender=UserProfileDTO.from_entity(message.sender),
        )
