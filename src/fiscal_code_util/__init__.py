"""Fiscal Code Utility.

Validation and generation of Italian fiscal codes (codice fiscale),
including homograph codes, backed by a place-code lookup.
"""

from fiscal_code_util.codec.validator import FiscalCodeValidator
from fiscal_code_util.generator import FiscalCodeGenerator
from fiscal_code_util.models import ErrorKind, PersonalData, Sex, ValidationResult
from fiscal_code_util.place_codes import (
    CachingPlaceCodeLookup,
    InMemoryPlaceCodeLookup,
    PlaceCodeLookup,
    PlaceCodeRecord,
    SqlitePlaceCodeLookup,
    build_place_code_lookup,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "FiscalCodeValidator",
    "FiscalCodeGenerator",
    "ValidationResult",
    "ErrorKind",
    "PersonalData",
    "Sex",
    "PlaceCodeLookup",
    "PlaceCodeRecord",
    "InMemoryPlaceCodeLookup",
    "SqlitePlaceCodeLookup",
    "CachingPlaceCodeLookup",
    "build_place_code_lookup",
]
