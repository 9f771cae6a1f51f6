"""
EntityNotFoundError - Raised when a required entity does not exist.
Maps to: HTTP 404 Not Found

Lookup-style operations return None instead; this is for call sites where
absence is a hard failure.
"""


class EntityNotFoundError(Exception):
    """Exception raised when a requested entity is not found."""

    def __init__(self, message: str = "The requested entity was not found."):
        super().__init__(message)
