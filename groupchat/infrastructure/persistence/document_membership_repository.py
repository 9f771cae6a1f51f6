"""Document Membership Repository Implementation."""

from groupchat.domain.entities.membership import Membership
from groupchat.domain.ports.repositories import MembershipRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId
from groupchat.infrastructure.persistence.records import membership_to_record
from groupchat.infrastructure.storage import DocumentStore, MEMBERSHIPS

CONVERSATION_INDEX = "memberships-cid-index"


class DocumentMembershipRepository(MembershipRepository):
    _store: DocumentStore

    def __init__(self, store: DocumentStore):
        self._store = store

    async def list_conversation_ids(self, user_id: UserId) -> list[ConversationId]:
        records = await self._store.query(MEMBERSHIPS.name, None, user_id.value)
        return [ConversationId(record["conversationId"]) for record in records]

    async def list_member_ids(self, conversation_id: ConversationId) -> list[UserId]:
        records = await self._store.query(
            MEMBERSHIPS.name, CONVERSATION_INDEX, conversation_id.value
        )
        return [UserId(record["userId"]) for record in records]

    async def add(self, membership: Membership) -> None:
        await self._store.put(MEMBERSHIPS.name, membership_to_record(membership))

    async def remove(self, membership: Membership) -> None:
        await self._store.delete(MEMBERSHIPS.name, membership_to_record(membership))
