"""
AccessDeniedError - The caller is a known entity but not permitted for this action.
Maps to: HTTP 403 Forbidden
"""


class AccessDeniedError(Exception):
    """Raised when user lacks permission to act on a resource"""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class InvalidSenderError(AccessDeniedError):
    """The sender of a message does not resolve to a registered user."""

    def __init__(self, message: str = "Sender is not valid"):
        super().__init__(message)


class NotAMemberError(AccessDeniedError):
    """The caller is not part of the conversation it tries to read or post to."""

    def __init__(self, message: str = "User is not part of the conversation"):
        super().__init__(message)
