"""Caching decorator for place-code lookups.

Place codes change rarely and the same places are asked for over and over
during batch validation, so answers from the underlying lookup are kept in a
bounded least-recently-used cache. Unknown places are cached too; lookup
failures are not.
"""

from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Hashable, Optional

from fiscal_code_util.logging_audit import get_logger
from fiscal_code_util.place_codes.lookup import PlaceCodeLookup, normalize_key


logger = get_logger(__name__)

DEFAULT_MAX_SIZE = 1024


@dataclass(frozen=True)
class CacheInfo:
    """Cache statistics snapshot.

    Attributes:
        hits: Answers served from the cache
        misses: Answers fetched from the underlying lookup
        size: Entries currently cached (both query kinds)
        max_size: Maximum entries per query kind
    """

    hits: int
    misses: int
    size: int
    max_size: int

    @property
    def hit_rate(self) -> float:
        """Fraction of answers served from the cache (0.0 when unused)."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class _LRUCache:
    # Not thread-safe on its own; CachingPlaceCodeLookup holds the lock

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self._entries: "OrderedDict[Hashable, object]" = OrderedDict()

    def get(self, key: Hashable) -> tuple:
        if key not in self._entries:
            return False, None
        self._entries.move_to_end(key)
        return True, self._entries[key]

    def put(self, key: Hashable, value: object) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CachingPlaceCodeLookup(PlaceCodeLookup):
    """Wrap another lookup and cache its answers.

    Keys are normalized (trimmed, upper-cased), so "Roma"/" ROMA " share an
    entry. Exceptions from the wrapped lookup propagate and leave the cache
    untouched, so a transient failure is retried on the next call.

    Example:
        >>> lookup = CachingPlaceCodeLookup(SqlitePlaceCodeLookup(config), max_size=512)
        >>> lookup.lookup_place_code("RM", "Roma")
        'H501'
        >>> lookup.cache_info().misses
        1
    """

    def __init__(self, inner: PlaceCodeLookup, max_size: int = DEFAULT_MAX_SIZE) -> None:
        if max_size <= 0:
            raise ValueError(f"max_size must be > 0, got {max_size}")
        self.inner = inner
        self.max_size = max_size
        self._places = _LRUCache(max_size)
        self._codes = _LRUCache(max_size)
        self._hits = 0
        self._misses = 0
        self._lock = Lock()

    def lookup_place_code(self, province: str, place_name: str) -> Optional[str]:
        if province is None or place_name is None:
            return None

        key = (normalize_key(province), normalize_key(place_name))
        with self._lock:
            found, value = self._places.get(key)
            if found:
                self._hits += 1
                return value

        value = self.inner.lookup_place_code(province, place_name)

        with self._lock:
            self._misses += 1
            self._places.put(key, value)
        return value

    def place_code_exists(self, place_code: str) -> bool:
        if place_code is None:
            return False

        key = normalize_key(place_code)
        with self._lock:
            found, value = self._codes.get(key)
            if found:
                self._hits += 1
                return value

        value = self.inner.place_code_exists(place_code)

        with self._lock:
            self._misses += 1
            self._codes.put(key, value)
        return value

    def cache_info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(
                hits=self._hits,
                misses=self._misses,
                size=len(self._places) + len(self._codes),
                max_size=self.max_size,
            )

    def clear(self) -> None:
        """Drop all cached answers and reset the statistics."""
        with self._lock:
            self._places.clear()
            self._codes.clear()
            self._hits = 0
            self._misses = 0
        logger.debug("Place-code cache cleared")

    def close(self) -> None:
        """Close the wrapped lookup if it holds resources."""
        close = getattr(self.inner, "close", None)
        if close is not None:
            close()
