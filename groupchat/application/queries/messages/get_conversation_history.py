"""
GetConversationHistory Query - every conversation of a user, in full.

Conversations load concurrently. Any failure fails the whole call and the
remaining loads are cancelled.
"""

from dataclasses import dataclass

from groupchat.application.common.interfaces import Query, QueryHandler
from groupchat.application.queries.messages.get_conversation import (
    ConversationSnapshot,
    GetConversationHandler,
    GetConversationQuery,
)
from groupchat.domain.ports.repositories import MembershipRepository
from groupchat.domain.value_objects.user_id import UserId
from groupchat.utils.concurrency import gather_all


@dataclass(frozen=True)
class GetConversationHistoryQuery(Query[list[ConversationSnapshot]]):
    user_id: UserId


class GetConversationHistoryHandler(QueryHandler[list[ConversationSnapshot]]):
    def __init__(
        self,
        membership_repository: MembershipRepository,
        get_conversation: GetConversationHandler,
    ):
        self._membership_repository = membership_repository
        self._get_conversation = get_conversation

    async def execute(
        self, query: GetConversationHistoryQuery
    ) -> list[ConversationSnapshot]:
        conversation_ids = await self._membership_repository.list_conversation_ids(
            query.user_id
        )
        return await gather_all(
            self._get_conversation.execute(
                GetConversationQuery(conversation_id=cid, requester_id=query.user_id)
            )
            for cid in conversation_ids
        )
