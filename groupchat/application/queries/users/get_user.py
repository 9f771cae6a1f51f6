"""Get User Query - None when the user does not exist."""

from dataclasses import dataclass
from typing import Optional

from groupchat.application.common.interfaces import Query, QueryHandler
from groupchat.domain.entities.user import User
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetUserQuery(Query[Optional[User]]):
    user_id: UserId


class GetUserHandler(QueryHandler[Optional[User]]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, query: GetUserQuery) -> Optional[User]:
        return await self._user_repository.get_by_id(query.user_id)
