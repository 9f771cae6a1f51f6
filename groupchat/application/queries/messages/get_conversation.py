"""
GetConversation Query - members and messages of one conversation.

Only members may read. With `since`, only messages strictly after that
timestamp are returned.
"""

from dataclasses import dataclass
from typing import Optional

from groupchat.application.common.interfaces import Query, QueryHandler
from groupchat.application.queries.conversations.list_members import (
    ListMembersHandler,
    ListMembersQuery,
)
from groupchat.domain.entities.message import Message
from groupchat.domain.entities.user import User
from groupchat.domain.exceptions import NotAMemberError
from groupchat.domain.ports.repositories import MessageRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.message_timestamp import MessageTimestamp
from groupchat.domain.value_objects.user_id import UserId


@dataclass
class ConversationSnapshot:
    """A conversation as seen by one of its members."""

    conversation_id: ConversationId
    users: list[User]
    messages: list[Message]


@dataclass(frozen=True)
class GetConversationQuery(Query[ConversationSnapshot]):
    conversation_id: ConversationId
    requester_id: UserId
    since: Optional[MessageTimestamp] = None


class GetConversationHandler(QueryHandler[ConversationSnapshot]):
    def __init__(
        self,
        list_members: ListMembersHandler,
        message_repository: MessageRepository,
    ):
        self._list_members = list_members
        self._message_repository = message_repository

    async def execute(self, query: GetConversationQuery) -> ConversationSnapshot:
        """
        Raises:
            NotAMemberError: requester is not among the conversation's users
        """
        users = await self._list_members.execute(ListMembersQuery(query.conversation_id))
        if query.requester_id not in {user.id for user in users}:
            raise NotAMemberError()

        messages = await self._message_repository.list_by_conversation(
            query.conversation_id, since=query.since
        )
        return ConversationSnapshot(
            conversation_id=query.conversation_id,
            users=users,
            messages=messages,
        )
