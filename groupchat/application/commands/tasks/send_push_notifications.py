"""
Send Push Notifications Command - task entry point.

Notifies every member of a conversation except the sender.

Delivery policy (best-effort to all):
- every recipient with an fcmToken gets a send
- a send the gateway rejects is logged and counted, never raised
- recipients without a token are collected and, once every send has settled,
  reported together in one MissingTokenError

The gateway session lives for exactly one fan-out.
"""

import json
import logging
from dataclasses import dataclass, field

from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.application.dto.user import UserProfileDTO
from groupchat.application.queries.conversations.list_members import (
    ListMembersHandler,
    ListMembersQuery,
)
from groupchat.config.settings import Config
from groupchat.domain.entities.user import User
from groupchat.domain.exceptions import (
    InvalidDeviceTokenError,
    MissingTokenError,
    PushGatewayError,
)
from groupchat.domain.ports.push_gateway import (
    PushGateway,
    PushNotification,
    PushSession,
)
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.user_id import UserId
from groupchat.observability.metrics import (
    MetricsErrorType,
    PushResult,
    increment_error,
    increment_push_sends,
)
from groupchat.utils.concurrency import gather_all

logger = logging.getLogger(__name__)


@dataclass
class FanOutResult:
    sent: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    missing_token: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SendPushNotificationsCommand(Command[FanOutResult]):
    conversation_id: ConversationId
    sender_id: UserId
    text: str
    dry_run: bool = False


class SendPushNotificationsHandler(CommandHandler[FanOutResult]):
    def __init__(
        self,
        list_members: ListMembersHandler,
        user_repository: UserRepository,
        push_gateway: PushGateway,
        title: str = Config.PUSH_TITLE,
        force_dry_run: bool = Config.PUSH_DRY_RUN,
    ):
        self._list_members = list_members
        self._user_repository = user_repository
        self._push_gateway = push_gateway
        self._title = title
        self._force_dry_run = force_dry_run

    async def execute(self, command: SendPushNotificationsCommand) -> FanOutResult:
        """
        Raises:
            MissingTokenError: some recipients have no fcmToken (after all
                other sends settled; the exception carries the FanOutResult)
        """
        members = await self._list_members.execute(
            ListMembersQuery(command.conversation_id)
        )
        sender = next((m for m in members if m.id == command.sender_id), None)
        if sender is None:
            sender = await self._user_repository.get_by_id(command.sender_id)

        recipients = [m for m in members if m.id != command.sender_id]
        reachable = [m for m in recipients if m.can_receive_push()]
        result = FanOutResult(
            missing_token=[m.id.value for m in recipients if not m.can_receive_push()]
        )
        for user_id in result.missing_token:
            logger.warning(
                f"[Push] fcmToken not set for user {user_id}, skipping notification"
            )

        if reachable:
            notification = self._build_notification(command, sender)
            dry_run = command.dry_run or self._force_dry_run
            async with self._push_gateway.connect() as session:
                outcomes = await gather_all(
                    self._send(session, user, notification, dry_run)
                    for user in reachable
                )
            for user, delivered in zip(reachable, outcomes):
                (result.sent if delivered else result.failed).append(user.id.value)

        increment_push_sends(PushResult.SENT, len(result.sent))
        increment_push_sends(PushResult.MISSING_TOKEN, len(result.missing_token))
        logger.info(
            f"[Push] {command.conversation_id}: sent={len(result.sent)} "
            f"failed={len(result.failed)} missing_token={len(result.missing_token)}"
        )

        if result.missing_token:
            increment_error(MetricsErrorType.MISSING_TOKEN)
            raise MissingTokenError(result.missing_token, result=result)
        return result

    def _build_notification(
        self, command: SendPushNotificationsCommand, sender: User
    ) -> PushNotification:
        if sender is not None:
            sender_data = UserProfileDTO.from_entity(sender).model_dump(
                by_alias=True, exclude_none=True
            )
        else:
            sender_data = {"userId": command.sender_id.value}
        return PushNotification(
            title=self._title,
            body=command.text,
            data={
                "conversationId": command.conversation_id.value,
                "sender": json.dumps(sender_data),
                "message": command.text,
            },
        )

    async def _send(
        self,
        session: PushSession,
        user: User,
        notification: PushNotification,
        dry_run: bool,
    ) -> bool:
        try:
            response = await session.send(user.fcm_token, notification, dry_run=dry_run)
        except InvalidDeviceTokenError as e:
            increment_push_sends(PushResult.INVALID_TOKEN)
            logger.warning(f"[Push] Stale token for user {user.id}: {e}")
            return False
        except PushGatewayError as e:
            increment_push_sends(PushResult.FAILED)
            increment_error(MetricsErrorType.PUSH_FAILED)
            logger.error(f"[Push] Sending to user {user.id} failed: {e}")
            return False
        except Exception as e:
            # one recipient's failure must not cancel the other sends
            increment_push_sends(PushResult.FAILED)
            increment_error(MetricsErrorType.PUSH_FAILED)
            logger.exception(f"[Push] Unexpected error sending to user {user.id}: {e}")
            return False
        logger.debug(f"[Push] Sent notification to {user.id}: {response}")
        return True
