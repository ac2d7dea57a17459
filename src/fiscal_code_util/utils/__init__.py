"""Utilities module.

This module provides the exception hierarchy shared by all components.
"""

from fiscal_code_util.utils.exceptions import (
    ConfigurationError,
    FiscalCodeUtilError,
    InvalidBirthDateError,
    PlaceCodeDataError,
    PlaceCodeLookupError,
    ValidationError,
)

__all__ = [
    "FiscalCodeUtilError",
    "ConfigurationError",
    "ValidationError",
    "InvalidBirthDateError",
    "PlaceCodeLookupError",
    "PlaceCodeDataError",
]
