"""
Initiate Conversation Command.

Steps:
1. Validate the participant list (a non-empty list/tuple without the initiator)
2. Check every participant exists (all-or-nothing)
3. Reuse the conversation whose members are exactly these participants
4. Otherwise mint a new id and write one membership per participant

Not atomic: concurrent calls with the same set can each mint a conversation,
and a failure between membership writes leaves the rows already written.
"""

import logging
from dataclasses import dataclass

from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.application.queries.conversations.find_shared_conversation import (
    FindSharedConversationHandler,
    FindSharedConversationQuery,
)
from groupchat.domain.entities.membership import Membership
from groupchat.domain.exceptions import DomainValidationError, EntityNotFoundError
from groupchat.domain.ports.repositories import MembershipRepository, UserRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId
from groupchat.utils.concurrency import gather_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitiateConversationCommand(Command[ConversationId]):
    initiator_id: UserId
    other_user_ids: tuple[UserId, ...]


class InitiateConversationHandler(CommandHandler[ConversationId]):
    def __init__(
        self,
        user_repository: UserRepository,
        membership_repository: MembershipRepository,
        find_shared_conversation: FindSharedConversationHandler,
    ):
        self._user_repository = user_repository
        self._membership_repository = membership_repository
        self._find_shared_conversation = find_shared_conversation

    async def execute(self, command: InitiateConversationCommand) -> ConversationId:
        """
        Raises:
            DomainValidationError: not a list, empty, or contains the initiator
            EntityNotFoundError: some participant is not a registered user
        """
        others = command.other_user_ids
        if not isinstance(others, (list, tuple)):
            raise DomainValidationError("initiateConversation requires a list of users")
        if not others:
            raise DomainValidationError("initiateConversation requires other users")
        if command.initiator_id in others:
            raise DomainValidationError("You should not talk to yourself")

        participants = [command.initiator_id]
        for user_id in others:
            if user_id not in participants:
                participants.append(user_id)

        users = await gather_all(
            self._user_repository.get_by_id(user_id) for user_id in participants
        )
        missing = [str(uid) for uid, user in zip(participants, users) if user is None]
        if missing:
            raise EntityNotFoundError(f"UserIds not valid: {', '.join(missing)}")

        existing = await self._find_shared_conversation.execute(
            FindSharedConversationQuery(
                user_ids=tuple(participants), exact_membership=True
            )
        )
        if existing is not None:
            logger.info(f"[Conversations] Reusing {existing} for {len(participants)} users")
            return existing

        conversation_id = ConversationId.generate()
        await gather_all(
            self._membership_repository.add(Membership(user_id, conversation_id))
            for user_id in participants
        )
        logger.info(
            f"[Conversations] {command.initiator_id} started {conversation_id} "
            f"with {len(participants) - 1} others"
        )
        return conversation_id
