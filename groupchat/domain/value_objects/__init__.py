"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
- Pure Python apart from phone number parsing
"""

from groupchat.domain.value_objects.user_id import UserId
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.message_timestamp import MessageTimestamp

__all__ = [
    "UserId",
    "UserEmail",
    "PhoneNumber",
    "ConversationId",
    "MessageTimestamp",
]
