"""Personal data model.

This module defines the PersonalData dataclass used as input for fiscal code
generation and for validating a code against the person it belongs to.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Union

# Province marker used for people born abroad (place is a country name)
FOREIGN_PROVINCE = "EE"


class Sex(Enum):
    """Sex as encoded in the fiscal code (female days are offset by 40)."""

    MALE = "M"
    FEMALE = "F"

    @classmethod
    def parse(cls, value: Union["Sex", str]) -> "Sex":
        """Parse a Sex from an enum member or an "M"/"F" string.

        Args:
            value: Sex member or case-insensitive "M"/"F"

        Returns:
            Matching Sex member

        Raises:
            ValueError: If value is not a recognized sex
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Invalid sex: {value!r}. Must be one of: M, F"
            ) from None


@dataclass(frozen=True)
class PersonalData:
    """Personal data encoded in a fiscal code.

    Attributes:
        first_name: Given name(s)
        last_name: Surname(s)
        birth_date: Date of birth
        sex: Sex of the person
        birth_place: Municipality name, or country name for people born abroad
        province: Province code (e.g. "RM"), or FOREIGN_PROVINCE for foreign countries
    """

    first_name: str
    last_name: str
    birth_date: date
    sex: Sex
    birth_place: str
    province: str

    @property
    def is_foreign_born(self) -> bool:
        """Check if the birth place is a foreign country."""
        return self.province.strip().upper() == FOREIGN_PROVINCE
