"""SQLite-backed place-code lookup.

This module reads place codes from the comuni_nazioni table:

    sigla_provincia, denominazione_ita, codice_belfiore,
    data_inizio_validita, data_fine_validita

The connection is opened lazily on the first query, shared for the lifetime
of the lookup object and protected by a lock, so one lookup instance can be
used from several threads.
"""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Iterable, Optional, Union

from fiscal_code_util.logging_audit import get_logger
from fiscal_code_util.place_codes.lookup import PlaceCodeLookup, PlaceCodeRecord, normalize_key
from fiscal_code_util.utils.exceptions import PlaceCodeLookupError


logger = get_logger(__name__)

TABLE_NAME = "comuni_nazioni"

# Latest start of validity first, so superseded records never win
LOOKUP_PLACE_CODE_SQL = (
    f"SELECT codice_belfiore FROM {TABLE_NAME} "
    "WHERE UPPER(TRIM(sigla_provincia)) = ? "
    "AND UPPER(TRIM(denominazione_ita)) = ? "
    "ORDER BY data_inizio_validita DESC "
    "LIMIT 1"
)

PLACE_CODE_EXISTS_SQL = (
    f"SELECT 1 FROM {TABLE_NAME} WHERE UPPER(TRIM(codice_belfiore)) = ? LIMIT 1"
)

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    sigla_provincia TEXT NOT NULL,
    denominazione_ita TEXT NOT NULL,
    codice_belfiore TEXT NOT NULL,
    data_inizio_validita TEXT,
    data_fine_validita TEXT
)
"""

CREATE_INDEXES_SQL = (
    f"CREATE INDEX IF NOT EXISTS idx_codice_belfiore ON {TABLE_NAME}(codice_belfiore)",
    f"CREATE INDEX IF NOT EXISTS idx_denominazione ON {TABLE_NAME}(denominazione_ita)",
)

INSERT_SQL = (
    f"INSERT INTO {TABLE_NAME} (sigla_provincia, denominazione_ita, "
    "codice_belfiore, data_inizio_validita, data_fine_validita) "
    "VALUES (?, ?, ?, ?, ?)"
)


@dataclass
class SqliteLookupConfig:
    """Configuration for the SQLite place-code lookup.

    Attributes:
        database_path: Path to the SQLite database file. The file must exist;
            the lookup never creates an empty database.
        timeout: Seconds to wait for a locked database before failing.

    Example:
        >>> config = SqliteLookupConfig(database_path=Path("data/comuni_nazioni.db"))
        >>> lookup = SqlitePlaceCodeLookup(config)
    """
    database_path: Path
    timeout: float = 5.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        self.database_path = Path(self.database_path)
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")


class SqlitePlaceCodeLookup(PlaceCodeLookup):
    """Place-code lookup over a SQLite comuni_nazioni table.

    The connection is created on first use and reused for subsequent
    queries. Thread-safe: connection setup and queries are serialized by a
    lock.

    Attributes:
        config: Lookup configuration

    Example:
        >>> with SqlitePlaceCodeLookup(SqliteLookupConfig(Path("places.db"))) as lookup:
        ...     lookup.lookup_place_code("RM", "Roma")
        'H501'
    """

    def __init__(self, config: Union[SqliteLookupConfig, Path, str]) -> None:
        """Initialize the lookup without opening the database.

        Args:
            config: SqliteLookupConfig, or a database path
        """
        if not isinstance(config, SqliteLookupConfig):
            config = SqliteLookupConfig(database_path=Path(config))
        self.config = config
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = Lock()
        logger.debug(f"SqlitePlaceCodeLookup initialized for {self.config.database_path}")

    def _get_connection(self) -> sqlite3.Connection:
        # Caller must hold self._lock
        if self._connection is None:
            self._connection = self._connect()
        return self._connection

    def _connect(self) -> sqlite3.Connection:
        path = self.config.database_path
        if not path.exists():
            raise PlaceCodeLookupError(
                f"Place-code database not found: {path}. "
                f"Fix: Set FISCAL_CODE_DATABASE_PATH or lookup.database_path "
                f"to an existing database."
            )
        try:
            # Read-only URI: a lookup never writes to the table
            connection = sqlite3.connect(
                f"{path.resolve().as_uri()}?mode=ro",
                uri=True,
                timeout=self.config.timeout,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise PlaceCodeLookupError(
                f"Failed to open place-code database {path}: {e}"
            ) from e

        logger.info(f"Connected to place-code database at {path}")
        return connection

    def _query_one(self, sql: str, params: tuple) -> Optional[tuple]:
        with self._lock:
            try:
                cursor = self._get_connection().execute(sql, params)
                try:
                    return cursor.fetchone()
                finally:
                    cursor.close()
            except sqlite3.Error as e:
                logger.error(f"Place-code query failed: {e}")
                raise PlaceCodeLookupError(f"Place-code query failed: {e}") from e

    def lookup_place_code(self, province: str, place_name: str) -> Optional[str]:
        if province is None or place_name is None:
            return None

        row = self._query_one(
            LOOKUP_PLACE_CODE_SQL,
            (normalize_key(province), normalize_key(place_name)),
        )
        return normalize_key(row[0]) if row else None

    def place_code_exists(self, place_code: str) -> bool:
        if place_code is None:
            return False

        row = self._query_one(PLACE_CODE_EXISTS_SQL, (normalize_key(place_code),))
        return row is not None

    def close(self) -> None:
        """Close the connection. The next query reopens it."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
                logger.debug("Place-code database connection closed")

    def reset(self) -> None:
        """Drop the current connection, e.g. after the database file was replaced."""
        self.close()

    def __enter__(self) -> "SqlitePlaceCodeLookup":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def initialize_database(
    database_path: Union[Path, str], records: Iterable[PlaceCodeRecord]
) -> int:
    """Create (or extend) a comuni_nazioni database from place-code records.

    Creates the table and its indexes if missing and inserts all records in
    a single transaction. Dates are stored as ISO strings so that
    ORDER BY data_inizio_validita sorts chronologically.

    Args:
        database_path: Path of the SQLite file to create or extend
        records: Place-code records to insert

    Returns:
        Number of inserted records

    Raises:
        PlaceCodeLookupError: If the database cannot be written

    Example:
        >>> records = load_place_code_records(Path("comuni_nazioni_cf.xlsx"))
        >>> initialize_database(Path("data/comuni_nazioni.db"), records)
        8412
    """
    database_path = Path(database_path)
    database_path.parent.mkdir(parents=True, exist_ok=True)

    rows = [
        (
            record.province.strip().upper(),
            record.place_name.strip().upper(),
            record.place_code.strip().upper(),
            record.valid_from.isoformat() if record.valid_from else None,
            record.valid_to.isoformat() if record.valid_to else None,
        )
        for record in records
    ]

    try:
        connection = sqlite3.connect(str(database_path))
        try:
            with connection:
                connection.execute(CREATE_TABLE_SQL)
                for statement in CREATE_INDEXES_SQL:
                    connection.execute(statement)
                connection.executemany(INSERT_SQL, rows)
        finally:
            connection.close()
    except sqlite3.Error as e:
        raise PlaceCodeLookupError(
            f"Failed to initialize place-code database {database_path}: {e}"
        ) from e

    logger.info(f"Inserted {len(rows)} place-code records into {database_path}")
    return len(rows)
