"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain and application logic and caught by the
presentation layer, which maps them to HTTP status codes.
"""

from groupchat.domain.exceptions.entity_not_found import EntityNotFoundError
from groupchat.domain.exceptions.access_denied import (
    AccessDeniedError,
    InvalidSenderError,
    NotAMemberError,
)
from groupchat.domain.exceptions.validation_error import DomainValidationError
from groupchat.domain.exceptions.conflict import (
    ConflictError,
    AlreadyExistsError,
    AlreadyMemberError,
    NotMemberError,
    MessageTimestampConflictError,
)
from groupchat.domain.exceptions.missing_token import MissingTokenError
from groupchat.domain.exceptions.upstream import (
    UpstreamError,
    PushGatewayError,
    InvalidDeviceTokenError,
)

__all__ = [
    "EntityNotFoundError",
    "AccessDeniedError",
    "InvalidSenderError",
    "NotAMemberError",
    "DomainValidationError",
    "ConflictError",
    "AlreadyExistsError",
    "AlreadyMemberError",
    "NotMemberError",
    "MessageTimestampConflictError",
    "MissingTokenError",
    "UpstreamError",
    "PushGatewayError",
    "InvalidDeviceTokenError",
]
