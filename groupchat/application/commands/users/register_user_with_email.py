"""Register User With Email Command."""

from dataclasses import dataclass
from typing import Optional

from groupchat.application.commands.users.registration import register_user
from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.domain.entities.user import User, email_identity
from groupchat.domain.exceptions import AlreadyExistsError
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class RegisterUserWithEmailCommand(Command[User]):
    user_id: UserId
    email: UserEmail
    display_name: str
    fcm_token: Optional[str] = None


class RegisterUserWithEmailHandler(CommandHandler[User]):
    _user_repository: UserRepository

    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, command: RegisterUserWithEmailCommand) -> User:
        """
        Raises:
            DomainValidationError: empty display name
            AlreadyExistsError: the email or the user id is already registered
        """
        user = User(
            id=command.user_id,
            display_name=command.display_name,
            email=command.email,
            fcm_token=command.fcm_token or None,
        )

        # Advisory: the index can lag, the identity claim is authoritative
        if await self._user_repository.get_by_email(command.email):
            raise AlreadyExistsError(f"User with email {command.email} already exists")

        return await register_user(
            self._user_repository, user, email_identity(command.email)
        )
