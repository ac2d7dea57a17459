"""Batch validation of fiscal codes from CSV files.

A batch file is a UTF-8 CSV with a required fiscal_code column. Rows that
also carry every personal-data column are checked against that data;
other rows are checked on the code alone. All rows are validated before
reporting (not fail-fast).
"""

import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pandas as pd

from fiscal_code_util.codec.validator import FiscalCodeValidator
from fiscal_code_util.logging_audit import get_logger, log_audit_event
from fiscal_code_util.models.validation import ErrorKind, ValidationResult
from fiscal_code_util.utils.exceptions import ValidationError


logger = get_logger(__name__)

# Required CSV columns
REQUIRED_COLUMNS = ["fiscal_code"]

# Personal-data columns; all of them must be filled for a full check
PERSONAL_DATA_COLUMNS = [
    "first_name",
    "last_name",
    "birth_date",
    "sex",
    "birth_place",
    "province",
]

BIRTH_DATE_FORMAT = "%Y-%m-%d"

# Rows listed per section in format_report()
REPORT_ROW_LIMIT = 20


@dataclass(frozen=True)
class RowResult:
    """Validation outcome of one CSV row.

    Attributes:
        row_number: 1-indexed row number (including header) for user readability
        fiscal_code: Fiscal code as read from the file ("" when empty)
        result: Validation result for the row
    """

    row_number: int
    fiscal_code: str
    result: ValidationResult


@dataclass
class BatchValidationReport:
    """Validation results of a whole batch with statistics.

    Attributes:
        rows: One RowResult per data row, in file order
        input_file: Source file, if the batch was read from disk
    """

    rows: list[RowResult] = field(default_factory=list)
    input_file: Optional[Path] = None

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def valid_rows(self) -> int:
        return sum(1 for row in self.rows if row.result.is_valid)

    @property
    def invalid_rows(self) -> int:
        return self.total_rows - self.valid_rows

    @property
    def homograph_rows(self) -> int:
        return sum(1 for row in self.rows if row.result.is_homograph)

    @property
    def invalid_results(self) -> list[RowResult]:
        return [row for row in self.rows if not row.result.is_valid]

    @property
    def errors_by_kind(self) -> dict[ErrorKind, int]:
        """Count invalid rows per error kind."""
        return dict(Counter(row.result.error_kind for row in self.invalid_results))

    @property
    def has_errors(self) -> bool:
        return self.invalid_rows > 0

    def format_report(self) -> str:
        """Format batch results as human-readable report.

        Returns:
            Multi-line string with summary, error breakdown and invalid rows
        """
        lines = []
        lines.append("=" * 60)
        lines.append("FISCAL CODE VALIDATION REPORT")
        lines.append("=" * 60)
        lines.append("")

        lines.append("SUMMARY:")
        if self.input_file is not None:
            lines.append(f"  Input file: {self.input_file}")
        lines.append(f"  Total rows: {self.total_rows}")
        lines.append(f"  Valid rows: {self.valid_rows}")
        lines.append(f"  Invalid rows: {self.invalid_rows}")
        lines.append(f"  Homograph codes: {self.homograph_rows}")
        lines.append("")

        if self.has_errors:
            lines.append("ERRORS BY KIND:")
            for kind, count in sorted(
                self.errors_by_kind.items(), key=lambda item: item[0].value
            ):
                lines.append(f"  {kind.value}: {count}")
            lines.append("")

            invalid = self.invalid_results
            lines.append(f"INVALID ROWS ({len(invalid)}):")
            for row in invalid[:REPORT_ROW_LIMIT]:
                lines.append(
                    f"  Row {row.row_number} [{row.fiscal_code or '<empty>'}]: "
                    f"{row.result.message}"
                )
            if len(invalid) > REPORT_ROW_LIMIT:
                lines.append(f"  ... and {len(invalid) - REPORT_ROW_LIMIT} more invalid rows")
            lines.append("")

        lines.append("=" * 60)
        if self.has_errors:
            lines.append("RESULT: ✗ Some fiscal codes are invalid - see rows above")
        else:
            lines.append("RESULT: ✓ All fiscal codes are valid")
        lines.append("=" * 60)

        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Export batch results as structured dictionary for JSON serialization.

        Returns:
            Dictionary with statistics and per-row results
        """
        return {
            "input_file": str(self.input_file) if self.input_file else None,
            "total_rows": self.total_rows,
            "valid_rows": self.valid_rows,
            "invalid_rows": self.invalid_rows,
            "homograph_rows": self.homograph_rows,
            "errors_by_kind": {
                kind.value: count for kind, count in self.errors_by_kind.items()
            },
            "rows": [
                {
                    "row_number": row.row_number,
                    "fiscal_code": row.fiscal_code,
                    **row.result.to_dict(),
                }
                for row in self.rows
            ],
        }


def parse_fiscal_code_csv(file_path: Path) -> pd.DataFrame:
    """Load a batch CSV file.

    All columns are read as text so that codes and province codes (e.g. "NA")
    are kept verbatim.

    Args:
        file_path: Path to a UTF-8 CSV file with a fiscal_code column

    Returns:
        DataFrame with the CSV rows

    Raises:
        FileNotFoundError: If the CSV file does not exist
        ValidationError: If the file cannot be read or columns are missing
    """
    file_path = Path(file_path)
    logger.info(f"Loading fiscal codes from {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"CSV file not found: {file_path}")

    try:
        df = pd.read_csv(
            file_path, encoding="utf-8", dtype=str, keep_default_na=False, na_values=[""]
        )
    except Exception as e:
        raise ValidationError(
            f"Failed to read CSV file {file_path}. Ensure file is valid CSV with UTF-8 encoding. Error: {e}"
        ) from e

    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        raise ValidationError(
            f"Missing required columns: {', '.join(missing_columns)}. "
            f"Required columns are: {', '.join(REQUIRED_COLUMNS)}"
        )

    all_valid_columns = set(REQUIRED_COLUMNS + PERSONAL_DATA_COLUMNS)
    unknown_columns = [col for col in df.columns if col not in all_valid_columns]
    if unknown_columns:
        logger.warning(
            f"CSV contains unknown columns that will be ignored: {', '.join(unknown_columns)}"
        )

    logger.info(f"Successfully parsed {len(df)} row(s)")
    return df


def validate_fiscal_codes(
    df: pd.DataFrame,
    validator: FiscalCodeValidator,
    input_file: Optional[Path] = None,
) -> BatchValidationReport:
    """Validate every fiscal code in a DataFrame.

    Args:
        df: DataFrame from parse_fiscal_code_csv() (or any frame with a
            fiscal_code column)
        validator: Validator to use
        input_file: Source file name, recorded in the report and audit trail

    Returns:
        BatchValidationReport with one RowResult per row

    Raises:
        ValidationError: If the fiscal_code column is missing
    """
    if "fiscal_code" not in df.columns:
        raise ValidationError("DataFrame missing required column: fiscal_code")

    start_time = time.time()
    logger.info(f"Batch validation started ({len(df)} rows)")

    has_personal_columns = all(col in df.columns for col in PERSONAL_DATA_COLUMNS)
    report = BatchValidationReport(input_file=input_file)

    for position, (_, row) in enumerate(df.iterrows()):
        row_num = position + 2  # +2 for 1-indexed + header row
        code = _cell_text(row["fiscal_code"])

        if has_personal_columns and _has_personal_data(row):
            result = _validate_with_personal_data(validator, code, row)
        else:
            result = validator.validate_format(code)

        report.rows.append(RowResult(row_number=row_num, fiscal_code=code or "", result=result))

    logger.info(
        f"Batch validation complete: {report.valid_rows} valid, "
        f"{report.invalid_rows} invalid"
    )
    log_audit_event("BATCH_VALIDATED", {
        "status": "success",
        "input_file": str(input_file) if input_file else "<dataframe>",
        "record_count": report.total_rows,
        "valid_count": report.valid_rows,
        "invalid_count": report.invalid_rows,
        "duration": time.time() - start_time,
    })
    return report


def validate_fiscal_code_file(
    file_path: Path, validator: FiscalCodeValidator
) -> BatchValidationReport:
    """Parse a batch CSV file and validate all of its rows."""
    df = parse_fiscal_code_csv(file_path)
    return validate_fiscal_codes(df, validator, input_file=Path(file_path))


def _cell_text(value: object) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _has_personal_data(row: pd.Series) -> bool:
    return all(_cell_text(row[col]) is not None for col in PERSONAL_DATA_COLUMNS)


def _validate_with_personal_data(
    validator: FiscalCodeValidator, code: Optional[str], row: pd.Series
) -> ValidationResult:
    birth_date_text = _cell_text(row["birth_date"])
    parsed = pd.to_datetime(birth_date_text, format=BIRTH_DATE_FORMAT, errors="coerce")

    if pd.isna(parsed):
        # The code itself may still be malformed; report that first
        result = validator.validate_format(code)
        if not result.is_valid:
            return result
        return ValidationResult(
            is_valid=False,
            message=f"Invalid birth_date {birth_date_text!r}. Expected format: YYYY-MM-DD",
            error_kind=ErrorKind.PERSONAL_DATA_MISMATCH,
            is_homograph=result.is_homograph,
        )

    return validator.validate(
        code,
        _cell_text(row["first_name"]),
        _cell_text(row["last_name"]),
        parsed.date(),
        _cell_text(row["sex"]),
        _cell_text(row["birth_place"]),
        _cell_text(row["province"]),
    )


def export_invalid_rows(
    df: pd.DataFrame, report: BatchValidationReport, output_path: Path
) -> None:
    """Export rows with invalid fiscal codes to a separate CSV file.

    Args:
        df: Original DataFrame with all rows
        report: BatchValidationReport for that DataFrame
        output_path: Path where the error CSV should be written

    Raises:
        ValueError: If the report has no invalid rows
        FileNotFoundError: If output_path parent directory doesn't exist
    """
    output_path = Path(output_path)
    logger.info(f"Exporting invalid rows to {output_path}")

    if not report.has_errors:
        raise ValueError("No invalid fiscal codes to export")

    if not output_path.parent.exists():
        raise FileNotFoundError(
            f"Output directory does not exist: {output_path.parent}"
        )

    invalid = report.invalid_results

    # Convert to 0-indexed positions (row_num is 1-indexed + header)
    error_df = df.iloc[[row.row_number - 2 for row in invalid]].copy()
    error_df["error_kind"] = [row.result.error_kind.value for row in invalid]
    error_df["error_description"] = [row.result.message for row in invalid]

    error_df.to_csv(output_path, index=False, encoding="utf-8")
    logger.info(f"Exported {len(error_df)} invalid rows to {output_path}")
