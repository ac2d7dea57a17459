"""Homograph (omocodia) handling.

When two people would receive the same fiscal code, the tax office replaces
digits with letters, starting from the rightmost numeric position. Only the
seven numeric-bearing positions are affected and the substitution is a fixed
letter/digit table.
"""

from typing import Optional

FISCAL_CODE_LENGTH = 16

HOMOGRAPH_TO_DIGIT = {
    "L": "0",
    "M": "1",
    "N": "2",
    "P": "3",
    "Q": "4",
    "R": "5",
    "S": "6",
    "T": "7",
    "U": "8",
    "V": "9",
}

DIGIT_TO_HOMOGRAPH = {digit: letter for letter, digit in HOMOGRAPH_TO_DIGIT.items()}

# 0-indexed offsets of year (6-7), day (9-10) and place-code digits (12-14)
NUMERIC_POSITIONS = (6, 7, 9, 10, 12, 13, 14)


def normalize(code: Optional[str]) -> Optional[str]:
    """Convert a homograph fiscal code to its standard digit form.

    Codes that are not 16 characters long are returned unchanged.

    Args:
        code: Fiscal code, upper case

    Returns:
        Code with homograph letters at numeric positions replaced by digits

    Example:
        >>> normalize("RSSMRA85M01H50MI")
        'RSSMRA85M01H501I'
    """
    if code is None or len(code) != FISCAL_CODE_LENGTH:
        return code

    chars = list(code)
    for position in NUMERIC_POSITIONS:
        chars[position] = HOMOGRAPH_TO_DIGIT.get(chars[position], chars[position])
    return "".join(chars)


def is_homograph(code: Optional[str]) -> bool:
    """Check if a fiscal code uses homograph letters in numeric positions.

    Args:
        code: Fiscal code, upper case

    Returns:
        True if at least one numeric position holds a homograph letter,
        False otherwise (including codes that are not 16 characters long)
    """
    if code is None or len(code) != FISCAL_CODE_LENGTH:
        return False

    return any(code[position] in HOMOGRAPH_TO_DIGIT for position in NUMERIC_POSITIONS)
