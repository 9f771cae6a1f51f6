"""
Authentication Dependency for FastAPI.

The bearer token is a HS256 JWT from the identity provider. Its verified
claims are the caller's identity: `sub` is the userId, and the optional
email, phone_number and name claims feed registration.

Config needed (from groupchat.config.settings):
- SERVICE_AUTH_SECRET
- SERVICE_AUTH_ISSUER
- SERVICE_AUTH_AUDIENCE
"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from groupchat.config.settings import Config
from groupchat.domain.exceptions import DomainValidationError
from groupchat.domain.value_objects.user_id import UserId

REQUIRED_CLAIMS = ["exp", "iat", "aud", "iss", "sub"]


@dataclass
class AuthUser:
    user_id: UserId
    email: Optional[str] = None
    phone_number: Optional[str] = None
    name: Optional[str] = None


security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _decode(token: str) -> dict:
    return jwt.decode(
        token,
        Config.SERVICE_AUTH_SECRET,
        algorithms=["HS256"],
        audience=Config.SERVICE_AUTH_AUDIENCE,
        issuer=Config.SERVICE_AUTH_ISSUER,
        options={"require": REQUIRED_CLAIMS},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    """Resolve the caller from the bearer token, or fail with 401."""
    try:
        claims = _decode(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {e}")

    try:
        user_id = UserId(claims.get("sub"))
    except DomainValidationError:
        raise _unauthorized("Token subject is not a valid user id")

    return AuthUser(
        user_id=user_id,
        email=claims.get("email"),
        phone_number=claims.get("phone_number"),
        name=claims.get("name"),
    )
