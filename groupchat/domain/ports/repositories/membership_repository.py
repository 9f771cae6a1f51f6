"""
Membership Repository Port - both directions of the user/conversation relation.
Implementation: groupchat/infrastructure/persistence/document_membership_repository.py
"""

from abc import ABC, abstractmethod

from groupchat.domain.entities.membership import Membership
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId


class MembershipRepository(ABC):
    @abstractmethod
    async def list_conversation_ids(self, user_id: UserId) -> list[ConversationId]: ...

    @abstractmethod
    async def list_member_ids(self, conversation_id: ConversationId) -> list[UserId]: ...

    @abstractmethod
    async def add(self, membership: Membership) -> None: ...

    @abstractmethod
    async def remove(self, membership: Membership) -> None: ...
