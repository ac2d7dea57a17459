"""Models module.

This module provides data models and dataclasses for the application.
"""

from fiscal_code_util.models.personal_data import FOREIGN_PROVINCE, PersonalData, Sex
from fiscal_code_util.models.validation import ErrorKind, ValidationResult

__all__ = [
    "ErrorKind",
    "ValidationResult",
    "PersonalData",
    "Sex",
    "FOREIGN_PROVINCE",
]
