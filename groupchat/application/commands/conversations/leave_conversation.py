"""Leave Conversation Command."""

from dataclasses import dataclass

from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.domain.entities.membership import Membership
from groupchat.domain.exceptions import NotMemberError
from groupchat.domain.ports.repositories import MembershipRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class LeaveConversationCommand(Command[None]):
    user_id: UserId
    conversation_id: ConversationId


class LeaveConversationHandler(CommandHandler[None]):
    def __init__(self, membership_repository: MembershipRepository):
        self._membership_repository = membership_repository

    async def execute(self, command: LeaveConversationCommand) -> None:
        member_ids = await self._membership_repository.list_member_ids(
            command.conversation_id
        )
        if command.user_id not in member_ids:
            raise NotMemberError()
        await self._membership_repository.remove(
            Membership(command.user_id, command.conversation_id)
        )
