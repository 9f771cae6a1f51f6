"""
Post Message Command.

Steps:
1. Resolve the sender (unknown sender → InvalidSenderError)
2. Check the conversation is one of the sender's (else NotAMemberError)
3. Write the message under a fresh server-side timestamp; a taken slot
   ticks the clock and retries, a bounded number of times
4. Optionally schedule push notifications; a failed hand-off is logged only
"""

import logging
from dataclasses import dataclass

from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.config.settings import Config
from groupchat.domain.entities.message import Message
from groupchat.domain.exceptions import (
    DomainValidationError,
    InvalidSenderError,
    MessageTimestampConflictError,
    NotAMemberError,
)
from groupchat.domain.ports.repositories import (
    MembershipRepository,
    MessageRepository,
    UserRepository,
)
from groupchat.domain.ports.task_dispatcher import (
    SEND_PUSH_NOTIFICATIONS,
    TaskDispatcher,
)
from groupchat.domain.services.message_clock import MessageClock
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId
from groupchat.observability.metrics import (
    MetricsErrorType,
    increment_error,
    increment_messages_posted,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostMessageCommand(Command[Message]):
    sender_id: UserId
    conversation_id: ConversationId
    text: str
    notify: bool = False


class PostMessageHandler(CommandHandler[Message]):
    def __init__(
        self,
        user_repository: UserRepository,
        membership_repository: MembershipRepository,
        message_repository: MessageRepository,
        clock: MessageClock,
        task_dispatcher: TaskDispatcher,
        write_attempts: int = Config.MESSAGE_WRITE_ATTEMPTS,
    ):
        self._user_repository = user_repository
        self._membership_repository = membership_repository
        self._message_repository = message_repository
        self._clock = clock
        self._task_dispatcher = task_dispatcher
        self._write_attempts = max(1, write_attempts)

    async def execute(self, command: PostMessageCommand) -> Message:
        if not isinstance(command.text, str):
            raise DomainValidationError("Message text must be a string")

        logger.info(
            f"[Messages] {command.sender_id} posting to {command.conversation_id} "
            f"(notify={command.notify})"
        )

        sender = await self._user_repository.get_by_id(command.sender_id)
        if sender is None:
            raise InvalidSenderError()

        conversation_ids = await self._membership_repository.list_conversation_ids(
            sender.id
        )
        if command.conversation_id not in conversation_ids:
            raise NotAMemberError("Sender is not part of the conversation")

        message = await self._write(command, sender)
        increment_messages_posted(command.notify)

        if command.notify:
            try:
                await self._task_dispatcher.dispatch(
                    SEND_PUSH_NOTIFICATIONS,
                    {
                        "conversationId": message.conversation_id.value,
                        "senderId": sender.id.value,
                        "message": message.text,
                        "dryRun": False,
                    },
                )
            except Exception:
                increment_error(MetricsErrorType.TASK_DISPATCH_FAILED)
                logger.exception(
                    f"[Messages] Could not schedule push notifications for "
                    f"{message.conversation_id}"
                )

        return message

    async def _write(self, command: PostMessageCommand, sender) -> Message:
        for attempt in range(1, self._write_attempts + 1):
            message = Message.create(
                conversation_id=command.conversation_id,
                text=command.text,
                sender=sender,
                timestamp=self._clock.next(),
            )
            try:
                await self._message_repository.add(message)
                return message
            except MessageTimestampConflictError:
                if attempt == self._write_attempts:
                    raise
                logger.warning(
                    f"[Messages] Timestamp {message.timestamp} taken in "
                    f"{message.conversation_id}, retrying"
                )
