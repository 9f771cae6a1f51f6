"""User DTOs for API request/response."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from groupchat.domain.entities.user import User


class UserProfileDTO(BaseModel):
    """What any caller may see of a user. The device token is not part of it."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    display_name: str = Field(alias="displayName")
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    email: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserProfileDTO":
        return cls(
            user_id=user.id.value,
            display_name=user.display_name,
            phone_number=user.phone_number.value if user.phone_number else None,
            email=user.email.value if user.email else None,
        )


class UserDTO(UserProfileDTO):
    """The caller's own record, fcmToken included."""

    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            **UserProfileDTO.from_entity(user).model_dump(),
            fcm_token=user.fcm_token,
        )
