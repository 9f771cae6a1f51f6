"""
User Entity - A registered participant.
"""

from dataclasses import dataclass, replace
from typing import Optional

from groupchat.domain.exceptions.validation_error import DomainValidationError
from groupchat.domain.value_objects.phone_number import PhoneNumber
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId


@dataclass
class User:
    # Required fields (no defaults) - must come first
    id: UserId
    display_name: str
    # Optional fields (with defaults) - must come last
    phone_number: Optional[PhoneNumber] = None
    email: Optional[UserEmail] = None
    fcm_token: Optional[str] = None

    def __post_init__(self):
        if not self.display_name or not self.display_name.strip():
            raise DomainValidationError("Display name cannot be empty")

    def snapshot(self) -> "User":
        """Copy of the profile as it is right now, for embedding in a message."""
        return replace(self)

    def can_receive_push(self) -> bool:
        return bool(self.fcm_token)

    def identities(self) -> list[str]:
        """Unique login identities this user holds ("phone:<e164>", "email:<addr>")."""
        identities = []
        if self.phone_number is not None:
            identities.append(phone_identity(self.phone_number))
        if self.email is not None:
            identities.append(email_identity(self.email))
        return identities


def phone_identity(phone_number: PhoneNumber) -> str:
    return f"phone:{phone_number.value}"


def email_identity(email: UserEmail) -> str:
    return f"email:{email.value}"
