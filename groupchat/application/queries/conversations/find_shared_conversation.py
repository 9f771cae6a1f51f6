"""
Find Shared Conversation Query.

Intersects the conversation-id sets of every given user. A single common id
is the answer. No common id, or more than one, yields None.

With exact_membership=True the common ids are first narrowed to
conversations whose member set is exactly the given set, so a larger group
that happens to contain all of them is not reused.
"""

from dataclasses import dataclass
from typing import Optional

from groupchat.application.common.interfaces import Query, QueryHandler
from groupchat.domain.ports.repositories import MembershipRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId
from groupchat.utils.concurrency import gather_all


@dataclass(frozen=True)
class FindSharedConversationQuery(Query[Optional[ConversationId]]):
    user_ids: tuple[UserId, ...]
    exact_membership: bool = False


class FindSharedConversationHandler(QueryHandler[Optional[ConversationId]]):
    def __init__(self, membership_repository: MembershipRepository):
        self._membership_repository = membership_repository

    async def execute(
        self, query: FindSharedConversationQuery
    ) -> Optional[ConversationId]:
        user_ids = set(query.user_ids)
        if not user_ids:
            return None

        per_user = await gather_all(
            self._membership_repository.list_conversation_ids(user_id)
            for user_id in user_ids
        )
        common = set(per_user[0]).intersection(*per_user[1:])

        if query.exact_membership and common:
            candidates = sorted(common, key=lambda cid: cid.value)
            member_sets = await gather_all(
                self._membership_repository.list_member_ids(cid) for cid in candidates
            )
            common = {
                cid
                for cid, members in zip(candidates, member_sets)
                if set(members) == user_ids
            }

        if len(common) == 1:
            return next(iter(common))
        return None
