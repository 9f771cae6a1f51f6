"""
Repair Sender Snapshots Command - task entry point.

After a profile update, rewrites the sender snapshot embedded in each of the
user's messages. Every rewrite is conditioned on the stored sender still
being this user; a failed condition is a benign race and only counted.
Only conversations the user currently belongs to are visited.
"""

import logging
from dataclasses import dataclass

from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.application.queries.messages.get_conversation_history import (
    GetConversationHistoryHandler,
    GetConversationHistoryQuery,
)
from groupchat.domain.ports.repositories import MessageRepository, UserRepository
from groupchat.domain.value_objects.user_id import UserId
from groupchat.observability.metrics import increment_snapshots_repaired
from groupchat.utils.concurrency import gather_all

logger = logging.getLogger(__name__)


@dataclass
class RepairResult:
    updated: int = 0
    skipped: int = 0


@dataclass(frozen=True)
class RepairSenderSnapshotsCommand(Command[RepairResult]):
    user_id: UserId


class RepairSenderSnapshotsHandler(CommandHandler[RepairResult]):
    def __init__(
        self,
        user_repository: UserRepository,
        message_repository: MessageRepository,
        conversation_history: GetConversationHistoryHandler,
    ):
        self._user_repository = user_repository
        self._message_repository = message_repository
        self._conversation_history = conversation_history

    async def execute(self, command: RepairSenderSnapshotsCommand) -> RepairResult:
        user = await self._user_repository.get_by_id(command.user_id)
        if user is None:
            logger.info(f"[Repair] User {command.user_id} no longer exists, nothing to do")
            return RepairResult()

        history = await self._conversation_history.execute(
            GetConversationHistoryQuery(user.id)
        )
        stale = [
            message
            for conversation in history
            for message in conversation.messages
            if message.is_from(user.id)
        ]

        snapshot = user.snapshot()
        outcomes = await gather_all(
            self._message_repository.replace_sender(
                message.conversation_id, message.timestamp, snapshot
            )
            for message in stale
        )

        result = RepairResult(
            updated=sum(1 for ok in outcomes if ok),
            skipped=sum(1 for ok in outcomes if not ok),
        )
        increment_snapshots_repaired(result.updated, result.skipped)
        logger.info(
            f"[Repair] {user.id}: {result.updated} snapshots updated, "
            f"{result.skipped} skipped across {len(history)} conversations"
        )
        return result
