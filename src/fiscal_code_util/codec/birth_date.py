"""Birth date extraction from fiscal codes."""

from datetime import date
from typing import Optional

from fiscal_code_util.utils.exceptions import InvalidBirthDateError

# Month letters, January to December
MONTH_CODES = "ABCDEHLMPRST"

# Days of women are stored with this offset
FEMALE_DAY_OFFSET = 40


def extract_birth_date(normalized_code: str, today: Optional[date] = None) -> date:
    """Extract the birth date from a normalized fiscal code.

    The two-digit year is placed in the current century, or in the previous
    one when that would put the birth date after the current year.

    Args:
        normalized_code: Fiscal code in standard digit form (see normalize())
        today: Reference date for century resolution (defaults to date.today())

    Returns:
        Birth date encoded in the code

    Raises:
        InvalidBirthDateError: If the month letter is unknown or the
            day/month combination is not a calendar date

    Example:
        >>> extract_birth_date("RSSMRA85M01H501Q", today=date(2026, 1, 1))
        datetime.date(1985, 8, 1)
    """
    if today is None:
        today = date.today()

    try:
        year_in_century = int(normalized_code[6:8])
        day = int(normalized_code[9:11])
    except (ValueError, TypeError) as e:
        raise InvalidBirthDateError(
            f"Non-numeric year or day in {normalized_code!r}"
        ) from e

    month_index = MONTH_CODES.find(normalized_code[8])
    if month_index < 0:
        raise InvalidBirthDateError(f"Invalid month letter: {normalized_code[8]!r}")

    # Strictly greater: day 40 stays 40 and is rejected below
    if day > FEMALE_DAY_OFFSET:
        day -= FEMALE_DAY_OFFSET

    year = (today.year // 100) * 100 + year_in_century
    if year > today.year:
        year -= 100

    try:
        return date(year, month_index + 1, day)
    except ValueError as e:
        raise InvalidBirthDateError(
            f"Invalid date {year:04d}-{month_index + 1:02d}-{day:02d}: {e}"
        ) from e
