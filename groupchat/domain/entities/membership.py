"""
Membership Entity - the fact that a user participates in a conversation.

A conversation has no row of its own; it is the set of memberships sharing
a conversation id.
"""

from dataclasses import dataclass

from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class Membership:
    user_id: UserId
    conversation_id: ConversationId
