from groupchat.application.dto.user import UserDTO, UserProfileDTO
from groupchat.application.dto.message import MessageDTO
from groupchat.application.dto.conversation import (
    ConversationDTO,
    ConversationIdsDTO,
    ConversationHistoryDTO,
)

__all__ = [
    "UserDTO",
    "UserProfileDTO",
    "MessageDTO",
    "ConversationDTO",
    "ConversationIdsDTO",
    "ConversationHistoryDTO",
]
