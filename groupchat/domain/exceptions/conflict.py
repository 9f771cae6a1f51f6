"""
Conflict errors - The request clashes with the current state.
Maps to: HTTP 409 Conflict
"""


class ConflictError(Exception):
    def __init__(self, message: str = "Conflict with current state"):
        super().__init__(message)


class AlreadyExistsError(ConflictError):
    """A user with the same id, phone number or email is already registered."""


class AlreadyMemberError(ConflictError):
    def __init__(self, message: str = "User already part of conversation"):
        super().__init__(message)


class NotMemberError(ConflictError):
    def __init__(self, message: str = "User is not part of conversation"):
        super().__init__(message)


class MessageTimestampConflictError(ConflictError):
    """Another message already occupies this (conversationId, timestamp) slot."""
