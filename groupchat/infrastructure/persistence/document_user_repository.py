"""
Document User Repository Implementation.

Guidelines:
- Implements UserRepository port over a DocumentStore
- Phone/email lookups go through secondary indexes (advisory, may lag)
- Uniqueness of phone/email is enforced by identity claims: one record per
  identity in the identity_claims collection, written with a conditional put
- Storage-level condition failures are translated to domain exceptions
"""

import logging
from typing import Optional

from groupchat.domain.entities.user import User
from groupchat.domain.exceptions import AlreadyExistsError, EntityNotFoundError
from groupchat.domain.ports.repositories import UserRepository
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId
from groupchat.infrastructure.persistence.records import (
    user_from_record,
    user_to_record,
)
from groupchat.infrastructure.storage import (
    AttributeEquals,
    AttributeExists,
    AttributeNotExists,
    ConditionFailedError,
    DocumentStore,
    IDENTITY_CLAIMS,
    USERS,
)

logger = logging.getLogger(__name__)

PHONE_INDEX = "users-phone-index"
EMAIL_INDEX = "users-email-index"


class DocumentUserRepository(UserRepository):
    _store: DocumentStore

    def __init__(self, store: DocumentStore):
        self._store = store

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        record = await self._store.get(USERS.name, {"userId": user_id.value})
        return user_from_record(record) if record else None

    async def _first_by_index(self, index: str, value: str) -> Optional[User]:
        records = await self._store.query(USERS.name, index, value)
        return user_from_record(records[0]) if records else None

    async def get_by_phone(self, phone_number: PhoneNumber) -> Optional[User]:
        return await self._first_by_index(PHONE_INDEX, phone_number.value)

    async def get_by_email(self, email: UserEmail) -> Optional[User]:
        return await self._first_by_index(EMAIL_INDEX, email.value)

    async def add(self, user: User) -> None:
        try:
            await self._store.put(
                USERS.name, user_to_record(user), AttributeNotExists("userId")
            )
        except ConditionFailedError:
            raise AlreadyExistsError(f"User {user.id} already exists") from None

    async def update_profile(
        self,
        user_id: UserId,
        display_name: Optional[str] = None,
        fcm_token: Optional[str] = None,
    ) -> User:
        patch = {}
        if display_name is not None:
            patch["displayName"] = display_name
        if fcm_token is not None:
            patch["fcmToken"] = fcm_token
        try:
            record = await self._store.update(
                USERS.name,
                {"userId": user_id.value},
                patch,
                AttributeExists("userId"),
            )
        except ConditionFailedError:
            raise EntityNotFoundError(f"User {user_id} not found") from None
        return user_from_record(record)

    async def delete(self, user_id: UserId) -> None:
        await self._store.delete(USERS.name, {"userId": user_id.value})

    async def claim_identity(self, identity: str, user_id: UserId) -> bool:
        try:
            await self._store.put(
                IDENTITY_CLAIMS.name,
                {"identity": identity, "userId": user_id.value},
                AttributeNotExists("identity"),
            )
            return True
        except ConditionFailedError:
            pass

        claim = await self._store.get(IDENTITY_CLAIMS.name, {"identity": identity})
        if claim and claim.get("userId") == user_id.value:
            return False
        raise AlreadyExistsError(f"{identity} is already registered")

    async def release_identity(self, identity: str, user_id: UserId) -> None:
        try:
            await self._store.delete(
                IDENTITY_CLAIMS.name,
                {"identity": identity},
                AttributeEquals("userId", user_id.value),
            )
        except ConditionFailedError:
            logger.debug(f"[Users] {identity} not held by {user_id}, left as is")
