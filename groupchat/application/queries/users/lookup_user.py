"""Lookup User Queries - find a user by phone number or email."""

from dataclasses import dataclass
from typing import Optional

from groupchat.application.common.interfaces import Query, QueryHandler
from groupchat.config.settings import Config
from groupchat.domain.entities.user import User
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.user_email import UserEmail


@dataclass(frozen=True)
class LookupUserByPhoneQuery(Query[Optional[User]]):
    phone_number: str


@dataclass(frozen=True)
class LookupUserByEmailQuery(Query[Optional[User]]):
    email: UserEmail


class LookupUserByPhoneHandler(QueryHandler[Optional[User]]):
    def __init__(
        self,
        user_repository: UserRepository,
        default_region: str = Config.DEFAULT_PHONE_REGION,
    ):
        self._user_repository = user_repository
        self._default_region = default_region

    async def execute(self, query: LookupUserByPhoneQuery) -> Optional[User]:
        """Raises DomainValidationError for an invalid number."""
        phone_number = PhoneNumber.parse(query.phone_number, self._default_region)
        return await self._user_repository.get_by_phone(phone_number)


class LookupUserByEmailHandler(QueryHandler[Optional[User]]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, query: LookupUserByEmailQuery) -> Optional[User]:
        return await self._user_repository.get_by_email(query.email)
