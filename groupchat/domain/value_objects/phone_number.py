"""
PhoneNumber Value Object - a dialable number normalized to E.164.

Parsing and validity rules come from `phonenumbers` (libphonenumber metadata).
National numbers are interpreted in the configured default region.
"""

from dataclasses import dataclass

import phonenumbers

from groupchat.domain.exceptions.validation_error import DomainValidationError


@dataclass(frozen=True)
class PhoneNumber:
    value: str  # always E.164, e.g. +16502530000

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.startswith("+"):
            raise DomainValidationError(
                f"PhoneNumber must be in E.164 format: {self.value}"
            )

    @classmethod
    def parse(cls, raw: str, default_region: str = "US") -> "PhoneNumber":
        """Parse user input and normalize it. Raises DomainValidationError if invalid."""
        if not isinstance(raw, str) or not raw.strip():
            raise DomainValidationError("Phone number cannot be empty")
        try:
            parsed = phonenumbers.parse(raw, default_region)
        except phonenumbers.NumberParseException as e:
            raise DomainValidationError(f"Invalid phone number {raw}") from e
        if not phonenumbers.is_valid_number(parsed):
            raise DomainValidationError(f"Invalid phone number {raw}")
        return cls(
            phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
        )

    def __str__(self) -> str:
        return self.value
