"""Register User With Phone Command."""

from dataclasses import dataclass
from typing import Optional

from groupchat.application.commands.users.registration import register_user
from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.config.settings import Config
from groupchat.domain.entities.user import User, phone_identity
from groupchat.domain.exceptions import AlreadyExistsError
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class RegisterUserWithPhoneCommand(Command[User]):
    user_id: UserId
    phone_number: str  # raw input, normalized to E.164 by the handler
    display_name: str
    fcm_token: Optional[str] = None


class RegisterUserWithPhoneHandler(CommandHandler[User]):
    _user_repository: UserRepository

    def __init__(
        self,
        user_repository: UserRepository,
        default_region: str = Config.DEFAULT_PHONE_REGION,
    ):
        self._user_repository = user_repository
        self._default_region = default_region

    async def execute(self, command: RegisterUserWithPhoneCommand) -> User:
        """
        Raises:
            DomainValidationError: unparseable/invalid number or empty display name
            AlreadyExistsError: the number or the user id is already registered
        """
        phone_number = PhoneNumber.parse(command.phone_number, self._default_region)
        user = User(
            id=command.user_id,
            display_name=command.display_name,
            phone_number=phone_number,
            fcm_token=command.fcm_token or None,
        )

        if await self._user_repository.get_by_phone(phone_number):
            raise AlreadyExistsError(f"User with phone {phone_number} already exists")

        return await register_user(
            self._user_repository, user, phone_identity(phone_number)
        )
