"""
Validation and data processing utilities for onboarding forms.

This module provides common validation patterns, text normalization helpers,
and the Brazilian phone mask used by the owner form.
"""

import re
import unicodedata
from typing import Any, Dict, Generic, List, Optional, TypeVar

# Type variable for generic validation functions
T = TypeVar("T")


class ValidationError(Exception):
    """Custom validation error with structured error information."""

    def __init__(
        self, message: str, field: Optional[str] = None, code: Optional[str] = None
    ):
        self.message = message
        self.field = field
        self.code = code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary format."""
        return {"message": self.message, "field": self.field, "code": self.code}


class ValidationResult(Generic[T]):
    """Result of a validation operation."""

    def __init__(
        self, value: Optional[T] = None, errors: Optional[List[ValidationError]] = None
    ):
        self.value = value
        self.errors = errors or []
        self.is_valid = len(self.errors) == 0

    def add_error(self, error: ValidationError) -> None:
        """Add an error to the result."""
        self.errors.append(error)
        self.is_valid = False

    def field_errors(self) -> Dict[str, str]:
        """Map each failing field to its first error message."""
        errors: Dict[str, str] = {}
        for error in self.errors:
            key = error.field or "root"
            errors.setdefault(key, error.message)
        return errors


NON_DIGIT_PATTERN = re.compile(r"\D")

# Up to ten digits: (XX) XXXXX-XXXX built progressively while typing
PARTIAL_PHONE_PATTERN = re.compile(r"^(\d{0,2})(\d{0,5})(\d{0,4})$")
# Exactly eleven digits: (XX) 9XXXX-XXXX
MOBILE_PHONE_PATTERN = re.compile(r"^(\d{2})(\d{5})(\d{4})$")


def fold_text(value: str) -> str:
    """Lowercase and strip accents, for accent-insensitive matching."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def digits_only(value: Optional[str]) -> str:
    """
    Strip every non-digit character from a value.

    Args:
        value: Raw or masked input

    Returns:
        String containing only the digits of the input
    """
    if not value:
        return ""
    return NON_DIGIT_PATTERN.sub("", value)


def format_br_phone(value: str) -> str:
    """
    Apply the Brazilian phone mask to user input.

    Up to ten digits are formatted progressively as ``(XX) XXXXX-XXXX``;
    exactly eleven digits become ``(XX) XXXXX-XXXX``. Anything longer is
    returned untouched.

    Args:
        value: Raw text typed into the phone field

    Returns:
        Masked phone for display

    Example:
        >>> format_br_phone("11999991234")
        '(11) 99999-1234'
        >>> format_br_phone("119")
        '(11) 9'
    """
    cleaned = digits_only(value)

    if len(cleaned) <= 10:
        match = PARTIAL_PHONE_PATTERN.match(cleaned)
        if match:
            area, prefix, suffix = match.groups()
            formatted = ""
            if area:
                formatted += f"({area}"
            if len(area) == 2:
                formatted += ") "
            if prefix:
                formatted += prefix
            if suffix:
                formatted += f"-{suffix}"
            return formatted
    else:
        match = MOBILE_PHONE_PATTERN.match(cleaned)
        if match:
            return f"({match.group(1)}) {match.group(2)}-{match.group(3)}"

    return value


def is_blank(value: Optional[str]) -> bool:
    """Return True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


def validate_required(
    value: Optional[str], field: str, message: str, trim: bool = True
) -> Optional[ValidationError]:
    """
    Check that a form field has been filled in.

    Args:
        value: The field value
        field: Field name reported on failure
        message: User-facing message reported on failure
        trim: Whether whitespace-only values count as missing

    Returns:
        A ValidationError when the field is missing, otherwise None
    """
    missing = is_blank(value) if trim else not value
    if missing:
        return ValidationError(message, field, "required")
    return None


def validate_choice(
    value: Optional[str], field: str, choices: List[str], message: str
) -> Optional[ValidationError]:
    """
    Check that a selection field holds one of the allowed values.

    Args:
        value: The selected value
        field: Field name reported on failure
        choices: Allowed values
        message: User-facing message reported when nothing is selected

    Returns:
        A ValidationError when the value is unset or unknown, otherwise None
    """
    if not value:
        return ValidationError(message, field, "required")
    if value not in choices:
        return ValidationError(
            f"Invalid {field}: {value!r}. Must be one of: {', '.join(choices)}",
            field,
            "invalid_choice",
        )
    return None
