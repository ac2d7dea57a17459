"""Place-code lookup contract and in-memory implementation.

A place code (codice catastale / Belfiore code) is the 4-character code of an
Italian municipality or of a foreign country. The codec and the generator only
need two queries, expressed by the PlaceCodeLookup base class:

- lookup_place_code(province, place_name): resolve a place to its code
- place_code_exists(code): check that a code is known

Both queries are case-insensitive and ignore surrounding whitespace. When
several historical records match a place, the one with the most recent start
of validity wins.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, Optional, Set, Tuple

from fiscal_code_util.logging_audit import get_logger


logger = get_logger(__name__)


def normalize_key(value: Optional[str]) -> Optional[str]:
    """Normalize a lookup key (trim and upper-case).

    Args:
        value: Province code, place name or place code

    Returns:
        Normalized key, or None if value is None
    """
    if value is None:
        return None
    return value.strip().upper()


@dataclass(frozen=True)
class PlaceCodeRecord:
    """One row of the place-code table.

    Attributes:
        province: Province code ("RM", "MI", ...) or "EE" for foreign countries
        place_name: Municipality or country name
        place_code: 4-character place code
        valid_from: Start of validity (None if unknown)
        valid_to: End of validity (None if still valid)
    """

    province: str
    place_name: str
    place_code: str
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None


class PlaceCodeLookup(ABC):
    """Abstract base class for place-code lookups.

    Implementations return None/False for places and codes they do not know
    and raise PlaceCodeLookupError only when they cannot answer at all.
    """

    @abstractmethod
    def lookup_place_code(self, province: str, place_name: str) -> Optional[str]:
        """Resolve a place to its 4-character code.

        Args:
            province: Province code, or "EE" for foreign countries
            place_name: Municipality or country name

        Returns:
            Place code, or None if the place is unknown

        Raises:
            PlaceCodeLookupError: If the lookup cannot be performed
        """
        pass

    @abstractmethod
    def place_code_exists(self, place_code: str) -> bool:
        """Check that a place code is known.

        Args:
            place_code: 4-character place code

        Returns:
            True if the code exists

        Raises:
            PlaceCodeLookupError: If the lookup cannot be performed
        """
        pass

    def is_place_valid(self, province: str, place_name: str) -> bool:
        """Check that a (province, place) pair resolves to a code."""
        return self.lookup_place_code(province, place_name) is not None


def _is_newer(candidate: PlaceCodeRecord, current: PlaceCodeRecord) -> bool:
    if candidate.valid_from is None:
        return False
    if current.valid_from is None:
        return True
    return candidate.valid_from > current.valid_from


class InMemoryPlaceCodeLookup(PlaceCodeLookup):
    """Dictionary-backed lookup built from PlaceCodeRecord rows.

    Suitable for tests and for small tables loaded with
    load_place_code_records(). Read-only after construction, so it is safe to
    share between threads.

    Example:
        >>> lookup = InMemoryPlaceCodeLookup([
        ...     PlaceCodeRecord("RM", "Roma", "H501"),
        ... ])
        >>> lookup.lookup_place_code(" rm ", "ROMA")
        'H501'
    """

    def __init__(self, records: Iterable[PlaceCodeRecord] = ()) -> None:
        self._by_place: Dict[Tuple[str, str], PlaceCodeRecord] = {}
        self._codes: Set[str] = set()

        for record in records:
            key = (normalize_key(record.province), normalize_key(record.place_name))
            current = self._by_place.get(key)
            if current is None or _is_newer(record, current):
                self._by_place[key] = record
            self._codes.add(normalize_key(record.place_code))

        logger.debug(
            f"In-memory place-code lookup built with {len(self._by_place)} "
            f"places and {len(self._codes)} codes"
        )

    def __len__(self) -> int:
        return len(self._by_place)

    def lookup_place_code(self, province: str, place_name: str) -> Optional[str]:
        if province is None or place_name is None:
            return None
        record = self._by_place.get((normalize_key(province), normalize_key(place_name)))
        return normalize_key(record.place_code) if record else None

    def place_code_exists(self, place_code: str) -> bool:
        if place_code is None:
            return False
        return normalize_key(place_code) in self._codes
