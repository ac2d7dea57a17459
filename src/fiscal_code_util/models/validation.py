"""Validation result data models.

This module defines the outcome of a fiscal code validation: a closed error
taxonomy plus an immutable result record built once per validation call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class ErrorKind(Enum):
    """Closed set of validation error kinds."""

    NONE = "NONE"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_CHECKSUM = "INVALID_CHECKSUM"
    INVALID_DATE = "INVALID_DATE"
    INVALID_PLACE_CODE = "INVALID_PLACE_CODE"
    PERSONAL_DATA_MISMATCH = "PERSONAL_DATA_MISMATCH"
    LOOKUP_FAILURE = "LOOKUP_FAILURE"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a fiscal code validation.

    Attributes:
        is_valid: Whether the fiscal code passed every check
        message: Human-readable description of the outcome
        error_kind: Which check failed (ErrorKind.NONE when valid)
        is_homograph: Whether the input used homograph letters in place of digits

    Example:
        >>> result = ValidationResult(
        ...     is_valid=False,
        ...     message="Invalid check character",
        ...     error_kind=ErrorKind.INVALID_CHECKSUM,
        ... )
        >>> result.is_formally_valid
        False
    """

    is_valid: bool
    message: str
    error_kind: ErrorKind
    is_homograph: bool = False

    @property
    def is_formally_valid(self) -> bool:
        """Check if the code is well formed regardless of personal data.

        Returns:
            True if valid, or invalid only because it does not match the
            supplied personal data
        """
        return self.is_valid or self.error_kind == ErrorKind.PERSONAL_DATA_MISMATCH

    def to_dict(self) -> Dict[str, Any]:
        """Export the result as a dictionary for JSON serialization.

        Returns:
            Dictionary with all result fields
        """
        return {
            "is_valid": self.is_valid,
            "message": self.message,
            "error_kind": self.error_kind.value,
            "is_homograph": self.is_homograph,
        }
