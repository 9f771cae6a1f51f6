"""
Update User Command.

Writes only the supplied attributes, then schedules the repair of the sender
snapshots embedded in the user's past messages. The caller gets the updated
user back without waiting for the repair.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.domain.entities.user import User
from groupchat.domain.exceptions import DomainValidationError
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.ports.task_dispatcher import (
    REPAIR_SENDER_SNAPSHOTS,
    TaskDispatcher,
)
from groupchat.domain.value_objects.user_id import UserId
from groupchat.observability.metrics import MetricsErrorType, increment_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateUserCommand(Command[User]):
    user_id: UserId
    display_name: Optional[str] = None
    fcm_token: Optional[str] = None


class UpdateUserHandler(CommandHandler[User]):
    def __init__(self, user_repository: UserRepository, task_dispatcher: TaskDispatcher):
        self._user_repository = user_repository
        self._task_dispatcher = task_dispatcher

    async def execute(self, command: UpdateUserCommand) -> User:
        """
        Raises:
            DomainValidationError: nothing to update, or an empty display name
            EntityNotFoundError: no such user
        """
        if command.display_name is None and command.fcm_token is None:
            raise DomainValidationError(
                "Either displayName or fcmToken is required to update user"
            )
        if command.display_name is not None and not command.display_name.strip():
            raise DomainValidationError("Display name cannot be empty")

        user = await self._user_repository.update_profile(
            command.user_id,
            display_name=command.display_name,
            fcm_token=command.fcm_token,
        )

        try:
            await self._task_dispatcher.dispatch(
                REPAIR_SENDER_SNAPSHOTS, {"userId": user.id.value}
            )
        except Exception:
            increment_error(MetricsErrorType.TASK_DISPATCH_FAILED)
            logger.exception(
                f"[Users] Could not schedule snapshot repair for {user.id}"
            )

        return user
