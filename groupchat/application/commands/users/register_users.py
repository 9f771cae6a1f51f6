"""
Register Users Command - bulk registration.

Each entry registers by phone when it has one, else by email. Every entry is
validated before anything is written. Registrations then run concurrently and
the first failure fails the whole call; entries already written stay written.
"""

from dataclasses import dataclass
from typing import Optional

from groupchat.application.commands.users.register_user_with_email import (
    RegisterUserWithEmailCommand,
    RegisterUserWithEmailHandler,
)
from groupchat.application.commands.users.register_user_with_phone import (
    RegisterUserWithPhoneCommand,
    RegisterUserWithPhoneHandler,
)
from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.domain.entities.user import User
from groupchat.domain.exceptions import DomainValidationError
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId
from groupchat.utils.concurrency import gather_all


@dataclass(frozen=True)
class NewUser:
    user_id: UserId
    display_name: str
    phone_number: Optional[str] = None
    email: Optional[str] = None
    fcm_token: Optional[str] = None


@dataclass(frozen=True)
class RegisterUsersCommand(Command[list[User]]):
    users: tuple[NewUser, ...]


class RegisterUsersHandler(CommandHandler[list[User]]):
    def __init__(
        self,
        register_with_phone: RegisterUserWithPhoneHandler,
        register_with_email: RegisterUserWithEmailHandler,
        default_region: str,
    ):
        self._register_with_phone = register_with_phone
        self._register_with_email = register_with_email
        self._default_region = default_region

    def _to_command(self, new_user: NewUser):
        if not new_user.display_name or not new_user.display_name.strip():
            raise DomainValidationError(
                f"Display name cannot be empty for {new_user.user_id}"
            )
        if new_user.phone_number:
            PhoneNumber.parse(new_user.phone_number, self._default_region)
            return RegisterUserWithPhoneCommand(
                user_id=new_user.user_id,
                phone_number=new_user.phone_number,
                display_name=new_user.display_name,
                fcm_token=new_user.fcm_token,
            )
        if new_user.email:
            return RegisterUserWithEmailCommand(
                user_id=new_user.user_id,
                email=UserEmail(new_user.email),
                display_name=new_user.display_name,
                fcm_token=new_user.fcm_token,
            )
        raise DomainValidationError(
            f"User {new_user.user_id} needs a phone number or an email"
        )

    async def _register(self, command) -> User:
        if isinstance(command, RegisterUserWithPhoneCommand):
            return await self._register_with_phone.execute(command)
        return await self._register_with_email.execute(command)

    async def execute(self, command: RegisterUsersCommand) -> list[User]:
        commands = [self._to_command(new_user) for new_user in command.users]
        return await gather_all(self._register(cmd) for cmd in commands)
