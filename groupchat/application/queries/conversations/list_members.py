"""
List Members Query.

Member rows are resolved to user records concurrently. Rows pointing at a
user that has since been deleted are left out of the result.
"""

from dataclasses import dataclass

from groupchat.application.common.interfaces import Query, QueryHandler
from groupchat.domain.entities.user import User
from groupchat.domain.ports.repositories import MembershipRepository, UserRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.utils.concurrency import gather_all


@dataclass(frozen=True)
class ListMembersQuery(Query[list[User]]):
    conversation_id: ConversationId


class ListMembersHandler(QueryHandler[list[User]]):
    def __init__(
        self,
        membership_repository: MembershipRepository,
        user_repository: UserRepository,
    ):
        self._membership_repository = membership_repository
        self._user_repository = user_repository

    async def execute(self, query: ListMembersQuery) -> list[User]:
        member_ids = await self._membership_repository.list_member_ids(
            query.conversation_id
        )
        users = await gather_all(
            self._user_repository.get_by_id(user_id) for user_id in member_ids
        )
        return [user for user in users if user is not None]
