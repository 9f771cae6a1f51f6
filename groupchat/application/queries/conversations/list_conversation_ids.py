"""List Conversation Ids Query."""

from dataclasses import dataclass

from groupchat.application.common.interfaces import Query, QueryHandler
from groupchat.domain.ports.repositories import MembershipRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListConversationIdsQuery(Query[list[ConversationId]]):
    user_id: UserId


class ListConversationIdsHandler(QueryHandler[list[ConversationId]]):
    def __init__(self, membership_repository: MembershipRepository):
        self._membership_repository = membership_repository

    async def execute(self, query: ListConversationIdsQuery) -> list[ConversationId]:
        return await self._membership_repository.list_conversation_ids(query.user_id)
