"""Place codes module.

This module provides the place-code lookup contract and its implementations
(in-memory, SQLite, caching), plus import of place-code tables.
"""

from fiscal_code_util.place_codes.cache import CacheInfo, CachingPlaceCodeLookup
from fiscal_code_util.place_codes.factory import build_place_code_lookup
from fiscal_code_util.place_codes.loader import load_place_code_records
from fiscal_code_util.place_codes.lookup import (
    InMemoryPlaceCodeLookup,
    PlaceCodeLookup,
    PlaceCodeRecord,
    normalize_key,
)
from fiscal_code_util.place_codes.sqlite_lookup import (
    SqliteLookupConfig,
    SqlitePlaceCodeLookup,
    initialize_database,
)

__all__ = [
    "PlaceCodeLookup",
    "PlaceCodeRecord",
    "InMemoryPlaceCodeLookup",
    "SqliteLookupConfig",
    "SqlitePlaceCodeLookup",
    "CachingPlaceCodeLookup",
    "CacheInfo",
    "initialize_database",
    "load_place_code_records",
    "build_place_code_lookup",
    "normalize_key",
]
