"""Check character computation for fiscal codes.

The 16th character of a fiscal code is derived from the first 15. Each
character is turned into a value (digits 0-9, letters A=0 ... Z=25); values at
odd 1-indexed positions go through the ODD_VALUES permutation, values at even
positions are used as they are. The sum modulo 26 selects the check letter.

This is the single implementation used both to verify and to generate codes.
"""

import string

CHECK_CHARACTERS = string.ascii_uppercase

# Substitution table for odd (1-indexed) positions, indexed by base value
ODD_VALUES = (
    1, 0, 5, 7, 9, 13, 15, 17, 19, 21, 2, 4, 18, 20,
    11, 3, 6, 8, 12, 14, 16, 10, 22, 25, 24, 23,
)

# Even positions pass through unchanged
EVEN_VALUES = tuple(range(26))

CHECKSUM_INPUT_LENGTH = 15


def _base_value(char: str) -> int:
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    if "A" <= char <= "Z":
        return ord(char) - ord("A")
    raise ValueError(f"Invalid character for checksum: {char!r}")


def compute_checksum(first15: str) -> str:
    """Compute the check character for the first 15 characters of a code.

    Args:
        first15: First 15 characters of a normalized (digit form) fiscal code,
            upper case

    Returns:
        Check character (A-Z)

    Raises:
        ValueError: If the input is not 15 characters from [0-9A-Z]

    Example:
        >>> compute_checksum("RSSMRA85M01H501")
        'Q'
    """
    if len(first15) != CHECKSUM_INPUT_LENGTH:
        raise ValueError(
            f"Checksum input must be {CHECKSUM_INPUT_LENGTH} characters, "
            f"got {len(first15)}"
        )

    total = 0
    for position, char in enumerate(first15, start=1):
        value = _base_value(char)
        if position % 2 == 1:
            total += ODD_VALUES[value]
        else:
            total += EVEN_VALUES[value]

    return CHECK_CHARACTERS[total % 26]
