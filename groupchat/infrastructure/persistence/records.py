"""
Mapping between domain entities and stored documents.

Stored attribute names are camelCase and shared with other consumers of the
store. Optional attributes are omitted rather than stored as null, so that
attribute-existence conditions and secondary indexes see them as absent.
"""

from typing import Any

from groupchat.domain.entities.membership import Membership
from groupchat.domain.entities.message import Message
from groupchat.domain.entities.user import User
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.message_timestamp import MessageTimestamp
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId


def user_to_record(user: User) -> dict[str, Any]:
    record: dict[str, Any] = {
        "userId": user.id.value,
        "displayName": user.display_name,
    }
    if user.phone_number is not None:
        record["phoneNumber"] = user.phone_number.value
    if user.email is not None:
        record["email"] = user.email.value
    if user.fcm_token:
        record["fcmToken"] = user.fcm_token
    return record


def user_from_record(record: dict[str, Any]) -> User:
    phone = record.get("phoneNumber")
    email = record.get("email")
    return User(
        id=UserId(record["userId"]),
        display_name=record["displayName"],
        phone_number=PhoneNumber(phone) if phone else None,
        email=UserEmail(email) if email else None,
        fcm_token=record.get("fcmToken") or None,
    )


def membership_to_record(membership: Membership) -> dict[str, Any]:
    return {
        "userId": membership.user_id.value,
        "conversationId": membership.conversation_id.value,
    }


def message_to_record(message: Message) -> dict[str, Any]:
    return {
        "conversationId": message.conversation_id.value,
        "timestamp": message.timestamp.value,
        "message": message.text,
        "sender": user_to_record(message.sender),
    }


def message_from_record(record: dict[str, Any]) -> Message:
    return Message(
        conversation_id=ConversationId(record["conversationId"]),
        timestamp=MessageTimestamp(record["timestamp"]),
        text=record.get("message", ""),
        sender=user_from_record(record["sender"]),
    )
