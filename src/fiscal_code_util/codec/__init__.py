"""Codec module.

This module provides the pure fiscal code primitives: check character,
homograph normalization and birth date extraction. The validator lives in
fiscal_code_util.codec.validator.
"""

from fiscal_code_util.codec.birth_date import MONTH_CODES, extract_birth_date
from fiscal_code_util.codec.checksum import compute_checksum
from fiscal_code_util.codec.homograph import (
    HOMOGRAPH_TO_DIGIT,
    NUMERIC_POSITIONS,
    is_homograph,
    normalize,
)

__all__ = [
    "compute_checksum",
    "normalize",
    "is_homograph",
    "extract_birth_date",
    "MONTH_CODES",
    "HOMOGRAPH_TO_DIGIT",
    "NUMERIC_POSITIONS",
]
