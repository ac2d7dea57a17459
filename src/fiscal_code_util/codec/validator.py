"""Fiscal code validation, including homograph codes.

Validation runs a fixed sequence of checks and reports the first one that
fails:

1. format (null input, 16-character positional grammar)
2. birth date (month letter, day, calendar date)
3. place code (existence in the place-code lookup)
4. check character

Validating against personal data additionally regenerates the expected code
and compares it with the normalized input. Outcomes are always returned as a
ValidationResult; nothing is raised to the caller.
"""

import re
from datetime import date
from typing import Optional, Union

from fiscal_code_util.codec.birth_date import extract_birth_date
from fiscal_code_util.codec.checksum import compute_checksum
from fiscal_code_util.codec.homograph import is_homograph, normalize
from fiscal_code_util.generator.fiscal_code import FiscalCodeGenerator
from fiscal_code_util.logging_audit import get_logger
from fiscal_code_util.models.personal_data import PersonalData, Sex
from fiscal_code_util.models.validation import ErrorKind, ValidationResult
from fiscal_code_util.place_codes.lookup import PlaceCodeLookup
from fiscal_code_util.utils.exceptions import InvalidBirthDateError, PlaceCodeLookupError


logger = get_logger(__name__)

# Numeric-bearing slots accept a digit or a homograph letter;
# the month slot only accepts the 12 month letters
FORMAT_PATTERN = re.compile(
    r"^[A-Z]{6}"
    r"[0-9LMNPQRSTUV]{2}"
    r"[ABCDEHLMPRST]"
    r"[0-9LMNPQRSTUV]{2}"
    r"[A-Z]"
    r"[0-9LMNPQRSTUV]{3}"
    r"[A-Z]$"
)

MESSAGE_VALID = "Valid fiscal code"
MESSAGE_VALID_HOMOGRAPH = "Valid homograph fiscal code"


def _success(homograph: bool) -> ValidationResult:
    return ValidationResult(
        is_valid=True,
        message=MESSAGE_VALID_HOMOGRAPH if homograph else MESSAGE_VALID,
        error_kind=ErrorKind.NONE,
        is_homograph=homograph,
    )


def _failure(message: str, kind: ErrorKind, homograph: bool = False) -> ValidationResult:
    logger.debug(f"Fiscal code rejected ({kind.value}): {message}")
    return ValidationResult(
        is_valid=False,
        message=message,
        error_kind=kind,
        is_homograph=homograph,
    )


class FiscalCodeValidator:
    """Validates fiscal codes using an injected place-code lookup.

    Attributes:
        lookup: Place-code lookup used to check place codes
        generator: Generator used to rebuild the expected code from personal data

    Example:
        >>> validator = FiscalCodeValidator(lookup)
        >>> result = validator.validate_format("RSSMRA85M01H501Q")
        >>> result.is_valid, result.error_kind
        (True, <ErrorKind.NONE: 'NONE'>)
    """

    def __init__(
        self,
        lookup: PlaceCodeLookup,
        generator: Optional[FiscalCodeGenerator] = None,
    ) -> None:
        self.lookup = lookup
        self.generator = generator or FiscalCodeGenerator(lookup)

    # Thin delegates so callers only need the validator object

    def normalize(self, code: Optional[str]) -> Optional[str]:
        """Convert a homograph code to its digit form (see codec.homograph)."""
        return normalize(code)

    def is_homograph(self, code: Optional[str]) -> bool:
        """Check for homograph letters in numeric positions (see codec.homograph)."""
        return is_homograph(code)

    def compute_checksum(self, first15: str) -> str:
        """Compute the check character (see codec.checksum)."""
        return compute_checksum(first15)

    def validate_format(self, code: Optional[str]) -> ValidationResult:
        """Validate a fiscal code on its own.

        Args:
            code: Fiscal code; case and surrounding whitespace are ignored

        Returns:
            ValidationResult; error_kind reports the first failing check
            (INVALID_FORMAT, INVALID_DATE, INVALID_PLACE_CODE,
            LOOKUP_FAILURE, INVALID_CHECKSUM) or NONE
        """
        if code is None:
            return _failure("Fiscal code is missing", ErrorKind.INVALID_FORMAT)

        code = code.upper().strip()

        if not FORMAT_PATTERN.match(code):
            return _failure(
                "Fiscal code does not match the expected format",
                ErrorKind.INVALID_FORMAT,
            )

        homograph = is_homograph(code)
        normalized = normalize(code)

        try:
            extract_birth_date(normalized)
        except InvalidBirthDateError as e:
            return _failure(
                f"Invalid birth date in fiscal code: {e}",
                ErrorKind.INVALID_DATE,
                homograph,
            )

        place_code = normalized[11:15]
        try:
            place_known = self.lookup.place_code_exists(place_code)
        except PlaceCodeLookupError as e:
            logger.error(f"Place-code lookup failed for {place_code}: {e}")
            return _failure(
                f"Error while checking place code: {e}",
                ErrorKind.LOOKUP_FAILURE,
                homograph,
            )
        if not place_known:
            return _failure(
                f"Unknown municipality or country code: {place_code}",
                ErrorKind.INVALID_PLACE_CODE,
                homograph,
            )

        if normalized[15] != compute_checksum(normalized[:15]):
            return _failure(
                "Invalid check character",
                ErrorKind.INVALID_CHECKSUM,
                homograph,
            )

        return _success(homograph)

    def validate(
        self,
        code: Optional[str],
        first_name: str,
        last_name: str,
        birth_date: date,
        sex: Union[Sex, str],
        birth_place: str,
        province: str,
    ) -> ValidationResult:
        """Validate a fiscal code against the personal data it should encode.

        Format-level failures are returned unchanged. A well-formed code is
        then compared, in digit form, with the code generated from the
        personal data.

        Args:
            code: Fiscal code to check
            first_name: Given name(s)
            last_name: Surname(s)
            birth_date: Date of birth
            sex: Sex member or "M"/"F"
            birth_place: Municipality name, or country name for people born abroad
            province: Province code, or "EE" for foreign countries

        Returns:
            ValidationResult; PERSONAL_DATA_MISMATCH when the code does not
            belong to the person or the expected code cannot be generated
        """
        result = self.validate_format(code)
        if not result.is_formally_valid:
            return result

        code = code.upper().strip()
        homograph = is_homograph(code)
        normalized = normalize(code)

        try:
            expected = self.generator.generate(
                first_name, last_name, birth_date, sex, birth_place, province
            )
        except PlaceCodeLookupError as e:
            logger.error(f"Place-code lookup failed for {province}/{birth_place}: {e}")
            return _failure(
                f"Error while resolving birth place: {e}",
                ErrorKind.LOOKUP_FAILURE,
                homograph,
            )
        except ValueError as e:
            return _failure(
                f"Cannot generate fiscal code from personal data: {e}",
                ErrorKind.PERSONAL_DATA_MISMATCH,
                homograph,
            )

        if expected is None:
            return _failure(
                "Cannot generate fiscal code from personal data: "
                f"unknown birth place {birth_place} ({province})",
                ErrorKind.PERSONAL_DATA_MISMATCH,
                homograph,
            )

        if normalized != expected:
            return _failure(
                "Fiscal code does not match the personal data",
                ErrorKind.PERSONAL_DATA_MISMATCH,
                homograph,
            )

        return _success(homograph)

    def validate_personal_data(
        self, code: Optional[str], person: PersonalData
    ) -> ValidationResult:
        """Validate a fiscal code against a PersonalData record."""
        return self.validate(
            code,
            person.first_name,
            person.last_name,
            person.birth_date,
            person.sex,
            person.birth_place,
            person.province,
        )
