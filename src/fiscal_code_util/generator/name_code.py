"""Three-letter surname and name codes.

Both codes take consonants first, then vowels, then pad with X. Given names
with more than three consonants keep the 1st, 3rd and 4th consonant; surnames
always keep the first three.
"""

import re
from enum import Enum

CONSONANTS = "BCDFGHJKLMNPQRSTVWXYZ"
VOWELS = "AEIOU"
FILLER = "X"
CODE_LENGTH = 3

_NON_ALPHA = re.compile(r"[^A-Za-z]")


class NameVariant(Enum):
    """Which part of the fiscal code a name code is built for."""

    SURNAME = "surname"
    NAME = "name"


def extract_name_code(text: str, variant: NameVariant) -> str:
    """Build the 3-letter code for a surname or a given name.

    Args:
        text: Surname or given name; spaces, apostrophes and any other
            non-ASCII-letter characters are ignored
        variant: NameVariant.SURNAME or NameVariant.NAME

    Returns:
        3-letter upper case code

    Example:
        >>> extract_name_code("Bianchi", NameVariant.SURNAME)
        'BNC'
        >>> extract_name_code("Bianchi", NameVariant.NAME)
        'BCH'
        >>> extract_name_code("Fo", NameVariant.SURNAME)
        'FOX'
    """
    letters = _NON_ALPHA.sub("", text).upper()

    consonants = [c for c in letters if c in CONSONANTS]
    vowels = [c for c in letters if c in VOWELS]

    if variant is NameVariant.NAME and len(consonants) > CODE_LENGTH:
        consonants = [consonants[0], consonants[2], consonants[3]]

    code = "".join(consonants) + "".join(vowels)
    return code.ljust(CODE_LENGTH, FILLER)[:CODE_LENGTH]


def surname_code(surname: str) -> str:
    """Build the code for the first three characters of a fiscal code."""
    return extract_name_code(surname, NameVariant.SURNAME)


def name_code(name: str) -> str:
    """Build the code for characters 4-6 of a fiscal code."""
    return extract_name_code(name, NameVariant.NAME)
