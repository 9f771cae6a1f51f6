"""
User Repository Port - Interface for user persistence.
Implementation: groupchat/infrastructure/persistence/document_user_repository.py
"""

from abc import ABC, abstractmethod
from typing import Optional

from groupchat.domain.entities.user import User
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]: ...

    @abstractmethod
    async def get_by_phone(self, phone_number: PhoneNumber) -> Optional[User]: ...

    @abstractmethod
    async def get_by_email(self, email: UserEmail) -> Optional[User]: ...

    @abstractmethod
    async def add(self, user: User) -> None:
        """Insert a new user. Raises AlreadyExistsError if the id is taken."""
        ...

    @abstractmethod
    async def update_profile(
        self,
        user_id: UserId,
        display_name: Optional[str] = None,
        fcm_token: Optional[str] = None,
    ) -> User:
        """Set only the given attributes. Raises EntityNotFoundError if absent."""
        ...

    @abstractmethod
    async def delete(self, user_id: UserId) -> None: ...

    @abstractmethod
    async def claim_identity(self, identity: str, user_id: UserId) -> bool:
        """
        Reserve a phone/email identity for user_id.

        Returns True if this call created the claim, False if user_id already
        held it. Raises AlreadyExistsError if another user holds it.
        """
        ...

    @abstractmethod
    async def release_identity(self, identity: str, user_id: UserId) -> None:
        """Drop the claim if (and only if) user_id holds it."""
        ...
