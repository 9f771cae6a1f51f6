"""
DomainValidationError - Malformed or missing input.
Maps to: HTTP 400 Bad Request
"""


class DomainValidationError(ValueError):
    """Exception raised for domain validation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
