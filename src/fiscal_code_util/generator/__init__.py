"""Generator module.

This module builds fiscal codes from personal data.
"""

from fiscal_code_util.generator.fiscal_code import FiscalCodeGenerator, encode_birth_date
from fiscal_code_util.generator.name_code import (
    NameVariant,
    extract_name_code,
    name_code,
    surname_code,
)

__all__ = [
    "FiscalCodeGenerator",
    "encode_birth_date",
    "NameVariant",
    "extract_name_code",
    "name_code",
    "surname_code",
]
