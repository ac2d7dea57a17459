"""Construction of the configured place-code lookup."""

from fiscal_code_util.config.schema import Config
from fiscal_code_util.logging_audit import get_logger
from fiscal_code_util.place_codes.cache import CachingPlaceCodeLookup
from fiscal_code_util.place_codes.lookup import PlaceCodeLookup
from fiscal_code_util.place_codes.sqlite_lookup import SqliteLookupConfig, SqlitePlaceCodeLookup


logger = get_logger(__name__)


def build_place_code_lookup(config: Config) -> PlaceCodeLookup:
    """Build the place-code lookup described by the configuration.

    The SQLite lookup is wrapped in a CachingPlaceCodeLookup unless
    config.lookup.cache_size is 0. The database is not opened until the
    first query.

    Args:
        config: Loaded configuration

    Returns:
        Ready-to-use PlaceCodeLookup

    Example:
        >>> lookup = build_place_code_lookup(load_config())
        >>> validator = FiscalCodeValidator(lookup)
    """
    lookup_config = config.lookup
    lookup: PlaceCodeLookup = SqlitePlaceCodeLookup(
        SqliteLookupConfig(database_path=lookup_config.database_path)
    )

    if lookup_config.cache_size > 0:
        lookup = CachingPlaceCodeLookup(lookup, max_size=lookup_config.cache_size)
        logger.debug(f"Place-code cache enabled (max_size={lookup_config.cache_size})")
    else:
        logger.debug("Place-code cache disabled")

    return lookup
