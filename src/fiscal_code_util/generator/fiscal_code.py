"""Fiscal code generation from personal data.

This module builds the standard (non-homograph) fiscal code of a person:
surname code, name code, birth year, month letter, birth day (plus 40 for
women), place code and check character.
"""

from datetime import date
from typing import Optional, Union

from fiscal_code_util.codec.birth_date import FEMALE_DAY_OFFSET, MONTH_CODES
from fiscal_code_util.codec.checksum import compute_checksum
from fiscal_code_util.generator.name_code import name_code, surname_code
from fiscal_code_util.logging_audit import get_logger
from fiscal_code_util.models.personal_data import PersonalData, Sex
from fiscal_code_util.place_codes.lookup import PlaceCodeLookup


logger = get_logger(__name__)


def encode_birth_date(birth_date: date, sex: Union[Sex, str]) -> str:
    """Encode birth date and sex as year, month letter and day.

    Args:
        birth_date: Date of birth
        sex: Sex member or "M"/"F"

    Returns:
        5-character string, e.g. "85M01" or "85M41"
    """
    day = birth_date.day
    if Sex.parse(sex) is Sex.FEMALE:
        day += FEMALE_DAY_OFFSET

    return f"{birth_date.year % 100:02d}{MONTH_CODES[birth_date.month - 1]}{day:02d}"


class FiscalCodeGenerator:
    """Generates fiscal codes using an injected place-code lookup.

    The generator is stateless apart from the lookup and may be shared
    between threads if the lookup can.

    Attributes:
        lookup: Place-code lookup used to resolve the birth place

    Example:
        >>> generator = FiscalCodeGenerator(lookup)
        >>> generator.generate("Mario", "Rossi", date(1985, 8, 1), "M", "Roma", "RM")
        'RSSMRA85M01H501Q'
    """

    def __init__(self, lookup: PlaceCodeLookup) -> None:
        self.lookup = lookup

    def generate(
        self,
        first_name: str,
        last_name: str,
        birth_date: date,
        sex: Union[Sex, str],
        birth_place: str,
        province: str,
    ) -> Optional[str]:
        """Generate the standard fiscal code for a person.

        Args:
            first_name: Given name(s)
            last_name: Surname(s)
            birth_date: Date of birth
            sex: Sex member or "M"/"F" (case-insensitive)
            birth_place: Municipality name, or country name for people born abroad
            province: Province code, or "EE" for foreign countries

        Returns:
            16-character fiscal code, or None if the birth place cannot be resolved

        Raises:
            ValueError: If sex is not recognized
            PlaceCodeLookupError: If the lookup fails (as opposed to not
                finding the place)
        """
        date_part = encode_birth_date(birth_date, sex)

        place_code = self.lookup.lookup_place_code(province, birth_place)
        if place_code is None:
            logger.debug(
                f"Place not found: province={province} place={birth_place}"
            )
            return None

        partial = (
            surname_code(last_name)
            + name_code(first_name)
            + date_part
            + place_code.strip().upper()
        )
        return partial + compute_checksum(partial)

    def generate_from(self, person: PersonalData) -> Optional[str]:
        """Generate the fiscal code for a PersonalData record.

        Args:
            person: Personal data

        Returns:
            16-character fiscal code, or None if the birth place cannot be resolved
        """
        return self.generate(
            person.first_name,
            person.last_name,
            person.birth_date,
            person.sex,
            person.birth_place,
            person.province,
        )
