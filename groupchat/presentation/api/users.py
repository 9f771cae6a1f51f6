"""
Users API Router - registration, lookup and profile of users.

The caller's identity is the verified token: registration and profile
operations always act on the token subject. Email, phone and display name
fall back to the token claims when the body leaves them out.

Flow:
  HTTP Request → Router → Command/Query → Handler → Repository → DocumentStore
"""

from logging import getLogger
from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from groupchat.application.commands.users import (
    DeleteUserCommand,
    DeleteUserHandler,
    NewUser,
    RegisterUserWithEmailCommand,
    RegisterUserWithEmailHandler,
    RegisterUserWithPhoneCommand,
    RegisterUserWithPhoneHandler,
    RegisterUsersCommand,
    RegisterUsersHandler,
    UpdateUserCommand,
    UpdateUserHandler,
)
from groupchat.application.dto.user import UserDTO, UserProfileDTO
from groupchat.application.queries.users import (
    GetUserHandler,
    GetUserQuery,
    LookupUserByEmailHandler,
    LookupUserByEmailQuery,
    LookupUserByPhoneHandler,
    LookupUserByPhoneQuery,
)
from groupchat.domain.exceptions import DomainValidationError, EntityNotFoundError
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId
from groupchat.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterWithEmailRequest(_CamelModel):
    email: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")


class RegisterWithPhoneRequest(_CamelModel):
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")


class NewUserRequest(_CamelModel):
    user_id: str = Field(alias="userId")
    display_name: str = Field(alias="displayName")
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    email: Optional[str] = None
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")


class RegisterUsersRequest(BaseModel):
    users: list[NewUserRequest]


class RegisterUsersResponse(BaseModel):
    users: list[UserProfileDTO]


class UpdateUserRequest(_CamelModel):
    display_name: Optional[str] = Field(default=None, alias="displayName")
    fcm_token: Optional[str] = Field(default=None, alias="fcmToken")


class UserLookupResponse(BaseModel):
    """`user` is null when nobody matches; absence is not an error."""

    user: Optional[UserProfileDTO] = None


# ==================== ROUTER ====================

router = APIRouter(prefix="/users", tags=["users"])


def _required(value: Optional[str], name: str) -> str:
    if not value or not value.strip():
        raise DomainValidationError(f"{name} is required")
    return value


# ==================== ENDPOINTS ====================


@router.post(
    "/register/email",
    response_model=UserDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def register_with_email(
    request: RegisterWithEmailRequest,
    handler: FromDishka[RegisterUserWithEmailHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    command = RegisterUserWithEmailCommand(
        user_id=current_user.user_id,
        email=UserEmail(_required(request.email or current_user.email, "email")),
        display_name=_required(
            request.display_name or current_user.name, "displayName"
        ),
        fcm_token=request.fcm_token,
    )
    user = await handler.execute(command)
    return UserDTO.from_entity(user)


@router.post(
    "/register/phone",
    response_model=UserDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def register_with_phone(
    request: RegisterWithPhoneRequest,
    handler: FromDishka[RegisterUserWithPhoneHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    command = RegisterUserWithPhoneCommand(
        user_id=current_user.user_id,
        phone_number=_required(
            request.phone_number or current_user.phone_number, "phoneNumber"
        ),
        display_name=_required(
            request.display_name or current_user.name, "displayName"
        ),
        fcm_token=request.fcm_token,
    )
    user = await handler.execute(command)
    return UserDTO.from_entity(user)


@router.post(
    "/bulk",
    response_model=RegisterUsersResponse,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def register_users(
    request: RegisterUsersRequest,
    handler: FromDishka[RegisterUsersHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Register several users at once (phone when given, else email)."""
    if not request.users:
        raise DomainValidationError("users must not be empty")
    logger.info(f"[Users] {current_user.user_id} bulk-registering {len(request.users)} users")
    command = RegisterUsersCommand(
        users=tuple(
            NewUser(
                user_id=UserId(item.user_id),
                display_name=item.display_name,
                phone_number=item.phone_number,
                email=item.email,
                fcm_token=item.fcm_token,
            )
            for item in request.users
        )
    )
    users = await handler.execute(command)
    return RegisterUsersResponse(users=[UserProfileDTO.from_entity(user) for user in users])


@router.get("/me", response_model=UserDTO)
@inject
async def get_me(
    handler: FromDishka[GetUserHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    user = await handler.execute(GetUserQuery(current_user.user_id))
    if user is None:
        raise EntityNotFoundError(f"User {current_user.user_id} is not registered")
    return UserDTO.from_entity(user)


@router.patch("/me", response_model=UserDTO)
@inject
async def update_me(
    request: UpdateUserRequest,
    handler: FromDishka[UpdateUserHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Update displayName and/or fcmToken. Past messages are refreshed in the background."""
    user = await handler.execute(
        UpdateUserCommand(
            user_id=current_user.user_id,
            display_name=request.display_name,
            fcm_token=request.fcm_token,
        )
    )
    return UserDTO.from_entity(user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_me(
    handler: FromDishka[DeleteUserHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    await handler.execute(DeleteUserCommand(current_user.user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/lookup", response_model=UserLookupResponse)
@inject
async def lookup_user(
    phone_handler: FromDishka[LookupUserByPhoneHandler],
    email_handler: FromDishka[LookupUserByEmailHandler],
    phone: Optional[str] = Query(default=None),
    email: Optional[str] = Query(default=None),
    current_user: AuthUser = Depends(get_current_user),
):
    """Find a user by exactly one of `phone` or `email`."""
    if bool(phone) == bool(email):
        raise DomainValidationError("Provide exactly one of phone or email")
    if phone:
        user = await phone_handler.execute(LookupUserByPhoneQuery(phone))
    else:
        user = await email_handler.execute(LookupUserByEmailQuery(UserEmail(email)))
    return UserLookupResponse(user=UserProfileDTO.from_entity(user) if user else None)


@router.get("/{user_id}", response_model=UserLookupResponse)
@inject
async def get_user(
    user_id: str,
    handler: FromDishka[GetUserHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    user = await handler.execute(GetUserQuery(UserId(user_id)))
    return UserLookupResponse(user=UserProfileDTO.from_entity(user) if user else None)
