"""Batch module.

This module validates files of fiscal codes and reports the results.
"""

from fiscal_code_util.batch.validator import (
    BatchValidationReport,
    RowResult,
    export_invalid_rows,
    parse_fiscal_code_csv,
    validate_fiscal_code_file,
    validate_fiscal_codes,
)

__all__ = [
    "BatchValidationReport",
    "RowResult",
    "parse_fiscal_code_csv",
    "validate_fiscal_codes",
    "validate_fiscal_code_file",
    "export_invalid_rows",
]
