"""Delete User Command - no cascade to memberships or messages."""

from dataclasses import dataclass

from groupchat.application.common.interfaces import Command, CommandHandler
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class DeleteUserCommand(Command[None]):
    user_id: UserId


class DeleteUserHandler(CommandHandler[None]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, command: DeleteUserCommand) -> None:
        user = await self._user_repository.get_by_id(command.user_id)
        await self._user_repository.delete(command.user_id)
        if user is not None:
            for identity in user.identities():
                await self._user_repository.release_identity(identity, user.id)
