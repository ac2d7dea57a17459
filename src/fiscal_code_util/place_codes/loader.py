"""Import of place-code tables from CSV or Excel files.

The source table has five columns, identified by header name or, when the
headers are not recognized, by position:

    0  sigla_provincia        province code, "EE" for foreign countries
    1  denominazione_ita      municipality or country name
    2  codice_belfiore        4-character place code
    3  data_inizio_validita   start of validity (optional)
    4  data_fine_validita     end of validity (optional)
"""

import time
from datetime import date
from pathlib import Path
from typing import Optional

import pandas as pd

from fiscal_code_util.logging_audit import get_logger, log_audit_event
from fiscal_code_util.place_codes.lookup import PlaceCodeRecord
from fiscal_code_util.utils.exceptions import PlaceCodeDataError


logger = get_logger(__name__)

PROVINCE_COLUMN = "sigla_provincia"
NAME_COLUMN = "denominazione_ita"
CODE_COLUMN = "codice_belfiore"
VALID_FROM_COLUMN = "data_inizio_validita"
VALID_TO_COLUMN = "data_fine_validita"

COLUMNS = [PROVINCE_COLUMN, NAME_COLUMN, CODE_COLUMN, VALID_FROM_COLUMN, VALID_TO_COLUMN]
REQUIRED_COLUMNS = COLUMNS[:3]

CSV_EXTENSIONS = {".csv"}
EXCEL_EXTENSIONS = {".xlsx"}

# ISO (also Excel cells read as text) first, then Italian day-first
DATE_FORMATS = ("ISO8601", "%d/%m/%Y")


def load_place_code_records(file_path: Path) -> list[PlaceCodeRecord]:
    """Load place-code records from a CSV (UTF-8) or .xlsx file.

    Rows missing the province, the name or the code are skipped with a
    warning. Validity dates are read as YYYY-MM-DD or DD/MM/YYYY; dates that
    cannot be parsed are treated as missing.

    Args:
        file_path: Path to the CSV or Excel file

    Returns:
        List of PlaceCodeRecord in file order

    Raises:
        PlaceCodeDataError: If the file is missing, has an unsupported
            extension, cannot be read, or lacks the required columns
    """
    file_path = Path(file_path)
    start_time = time.time()
    logger.info(f"Loading place codes from {file_path}")

    df = _read_table(file_path)
    df = _select_columns(df, file_path)

    records: list[PlaceCodeRecord] = []
    skipped = 0

    for idx, row in df.iterrows():
        row_num = idx + 2  # +2 for 1-indexed + header row

        province = _cell_text(row[PROVINCE_COLUMN])
        place_name = _cell_text(row[NAME_COLUMN])
        place_code = _cell_text(row[CODE_COLUMN])

        if province is None or place_name is None or place_code is None:
            logger.warning(
                f"Row {row_num}: incomplete place-code record skipped "
                f"(province={province}, name={place_name}, code={place_code})"
            )
            skipped += 1
            continue

        records.append(
            PlaceCodeRecord(
                province=province.upper(),
                place_name=place_name.upper(),
                place_code=place_code.upper(),
                valid_from=_cell_date(row[VALID_FROM_COLUMN]),
                valid_to=_cell_date(row[VALID_TO_COLUMN]),
            )
        )

    logger.info(f"Loaded {len(records)} place-code record(s), skipped {skipped}")
    log_audit_event("PLACE_CODES_LOADED", {
        "status": "success",
        "input_file": str(file_path),
        "record_count": len(records),
        "skipped_count": skipped,
        "duration": time.time() - start_time,
    })
    return records


def _read_table(file_path: Path) -> pd.DataFrame:
    if not file_path.exists():
        raise PlaceCodeDataError(f"Place-code file not found: {file_path}")

    suffix = file_path.suffix.lower()
    # "NA" is the province code of Napoli, not a missing value
    read_options = {"dtype": str, "keep_default_na": False, "na_values": [""]}

    try:
        if suffix in CSV_EXTENSIONS:
            return pd.read_csv(file_path, encoding="utf-8", **read_options)
        if suffix in EXCEL_EXTENSIONS:
            return pd.read_excel(file_path, engine="openpyxl", **read_options)
    except Exception as e:
        raise PlaceCodeDataError(
            f"Failed to read place-code file {file_path}. Error: {e}"
        ) from e

    raise PlaceCodeDataError(
        f"Unsupported place-code file type: {file_path.suffix}. "
        f"Supported: {', '.join(sorted(CSV_EXTENSIONS | EXCEL_EXTENSIONS))}"
    )


def _select_columns(df: pd.DataFrame, file_path: Path) -> pd.DataFrame:
    """Return a frame with exactly the five COLUMNS, matched by name or position."""
    normalized = {
        str(col).strip().lower().replace(" ", "_"): col for col in df.columns
    }

    if all(name in normalized for name in REQUIRED_COLUMNS):
        selected = pd.DataFrame(
            {name: df[normalized[name]] if name in normalized else None for name in COLUMNS}
        )
        return selected

    if len(df.columns) < len(REQUIRED_COLUMNS):
        raise PlaceCodeDataError(
            f"Place-code file {file_path} has {len(df.columns)} column(s); "
            f"at least {len(REQUIRED_COLUMNS)} are required: {', '.join(REQUIRED_COLUMNS)}"
        )

    logger.debug(
        f"Headers of {file_path} not recognized, using column positions"
    )
    selected = pd.DataFrame(index=df.index)
    for position, name in enumerate(COLUMNS):
        selected[name] = df.iloc[:, position] if position < len(df.columns) else None
    return selected


def _cell_text(value: object) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _cell_date(value: object) -> Optional[date]:
    text = _cell_text(value)
    if text is None:
        return None

    for date_format in DATE_FORMATS:
        parsed = pd.to_datetime(text, format=date_format, errors="coerce")
        if not pd.isna(parsed):
            return parsed.date()

    logger.debug(f"Unparseable validity date ignored: {text!r}")
    return None
