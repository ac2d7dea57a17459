"""Unit tests for place-code lookups.

Tests cover the in-memory and SQLite lookups, the caching decorator and the
factory that builds the configured lookup.
"""

import sqlite3
import threading
from datetime import date
from pathlib import Path
from unittest.mock import Mock

import pytest

from fiscal_code_util.config import Config, LookupConfig
from fiscal_code_util.place_codes import (
    CachingPlaceCodeLookup,
    InMemoryPlaceCodeLookup,
    PlaceCodeLookup,
    PlaceCodeRecord,
    SqliteLookupConfig,
    SqlitePlaceCodeLookup,
    build_place_code_lookup,
    initialize_database,
)
from fiscal_code_util.utils.exceptions import PlaceCodeLookupError


# A municipality whose code changed: the newer record must win
RENAMED_PLACE = [
    PlaceCodeRecord("XX", "BORGO VECCHIO", "A001", date(1900, 1, 1), date(1950, 12, 31)),
    PlaceCodeRecord("XX", "BORGO VECCHIO", "A002", date(1951, 1, 1)),
]


class TestInMemoryPlaceCodeLookup:
    """Test InMemoryPlaceCodeLookup."""

    def test_lookup_place_code(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test a known place resolves to its code."""
        # Arrange & Act & Assert
        assert lookup.lookup_place_code("RM", "ROMA") == "H501"

    def test_lookup_is_case_and_space_insensitive(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test keys are trimmed and upper-cased."""
        # Arrange & Act & Assert
        assert lookup.lookup_place_code(" rm ", "Roma") == "H501"
        assert lookup.lookup_place_code("ee", "francia") == "Z110"

    def test_napoli_province_code(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test the NA province code is an ordinary key."""
        # Arrange & Act & Assert
        assert lookup.lookup_place_code("NA", "Napoli") == "F839"

    def test_unknown_place(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test unknown places and wrong provinces return None."""
        # Arrange & Act & Assert
        assert lookup.lookup_place_code("RM", "Atlantide") is None
        assert lookup.lookup_place_code("MI", "Roma") is None
        assert lookup.lookup_place_code(None, "Roma") is None
        assert lookup.lookup_place_code("RM", None) is None

    def test_place_code_exists(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test existence check on codes."""
        # Arrange & Act & Assert
        assert lookup.place_code_exists("H501") is True
        assert lookup.place_code_exists("h501") is True
        assert lookup.place_code_exists("H999") is False
        assert lookup.place_code_exists(None) is False

    def test_is_place_valid(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test the (province, place) validity helper."""
        # Arrange & Act & Assert
        assert lookup.is_place_valid("TO", "Torino") is True
        assert lookup.is_place_valid("TO", "Atlantide") is False

    def test_newest_record_wins(self) -> None:
        """Test the record with the latest start of validity is returned."""
        # Arrange
        lookup = InMemoryPlaceCodeLookup(reversed(RENAMED_PLACE))

        # Act & Assert
        assert lookup.lookup_place_code("XX", "Borgo Vecchio") == "A002"
        # Superseded codes still exist (old fiscal codes keep them)
        assert lookup.place_code_exists("A001") is True

    def test_dated_record_beats_undated(self) -> None:
        """Test a record with a start date wins over one without."""
        # Arrange
        lookup = InMemoryPlaceCodeLookup([
            PlaceCodeRecord("XX", "BORGO", "B001", date(1990, 1, 1)),
            PlaceCodeRecord("XX", "BORGO", "B002"),
        ])

        # Act & Assert
        assert lookup.lookup_place_code("XX", "Borgo") == "B001"

    def test_len(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test len() counts distinct places."""
        # Arrange & Act & Assert
        # Monza has two records for the same place
        assert len(lookup) == 7

    def test_empty_lookup(self) -> None:
        """Test an empty lookup knows nothing."""
        # Arrange
        lookup = InMemoryPlaceCodeLookup()

        # Act & Assert
        assert lookup.lookup_place_code("RM", "Roma") is None
        assert lookup.place_code_exists("H501") is False


class TestSqlitePlaceCodeLookup:
    """Test SqlitePlaceCodeLookup."""

    def test_lookup_place_code(self, sqlite_lookup: SqlitePlaceCodeLookup) -> None:
        """Test a known place resolves to its code."""
        # Arrange & Act & Assert
        assert sqlite_lookup.lookup_place_code("RM", "Roma") == "H501"
        assert sqlite_lookup.lookup_place_code(" na ", "napoli") == "F839"

    def test_unknown_place(self, sqlite_lookup: SqlitePlaceCodeLookup) -> None:
        """Test unknown places return None."""
        # Arrange & Act & Assert
        assert sqlite_lookup.lookup_place_code("RM", "Atlantide") is None
        assert sqlite_lookup.lookup_place_code(None, "Roma") is None

    def test_place_code_exists(self, sqlite_lookup: SqlitePlaceCodeLookup) -> None:
        """Test existence check on codes."""
        # Arrange & Act & Assert
        assert sqlite_lookup.place_code_exists("Z112") is True
        assert sqlite_lookup.place_code_exists("z112") is True
        assert sqlite_lookup.place_code_exists("H999") is False
        assert sqlite_lookup.place_code_exists(None) is False

    def test_newest_record_wins(self, tmp_path: Path) -> None:
        """Test ORDER BY start of validity picks the newest record."""
        # Arrange
        db_path = tmp_path / "renamed.db"
        initialize_database(db_path, RENAMED_PLACE)

        # Act
        with SqlitePlaceCodeLookup(db_path) as lookup:
            code = lookup.lookup_place_code("XX", "Borgo Vecchio")

        # Assert
        assert code == "A002"

    def test_connection_is_lazy(self, place_code_db: Path) -> None:
        """Test the database is opened on first query only."""
        # Arrange
        lookup = SqlitePlaceCodeLookup(SqliteLookupConfig(database_path=place_code_db))

        # Act & Assert
        assert lookup._connection is None
        lookup.place_code_exists("H501")
        assert lookup._connection is not None
        lookup.close()
        assert lookup._connection is None

    def test_reopens_after_close(self, sqlite_lookup: SqlitePlaceCodeLookup) -> None:
        """Test queries after close() reconnect."""
        # Arrange
        sqlite_lookup.close()

        # Act & Assert
        assert sqlite_lookup.place_code_exists("H501") is True

    def test_missing_database_raises(self, tmp_path: Path) -> None:
        """Test a missing database file is a lookup failure."""
        # Arrange
        lookup = SqlitePlaceCodeLookup(tmp_path / "missing.db")

        # Act & Assert
        with pytest.raises(PlaceCodeLookupError) as exc_info:
            lookup.place_code_exists("H501")

        assert "not found" in str(exc_info.value)
        assert not (tmp_path / "missing.db").exists()

    def test_missing_table_raises(self, tmp_path: Path) -> None:
        """Test SQL errors are wrapped in PlaceCodeLookupError."""
        # Arrange
        db_path = tmp_path / "empty.db"
        sqlite3.connect(str(db_path)).close()
        lookup = SqlitePlaceCodeLookup(db_path)

        # Act & Assert
        with pytest.raises(PlaceCodeLookupError) as exc_info:
            lookup.lookup_place_code("RM", "Roma")

        assert isinstance(exc_info.value.__cause__, sqlite3.Error)
        lookup.close()

    def test_externally_built_table_is_case_insensitive(self, tmp_path: Path) -> None:
        """Test lower-case and space-padded rows written by other tools."""
        # Arrange
        db_path = tmp_path / "external.db"
        connection = sqlite3.connect(str(db_path))
        with connection:
            connection.execute(
                "CREATE TABLE comuni_nazioni (sigla_provincia TEXT, denominazione_ita TEXT, "
                "codice_belfiore TEXT, data_inizio_validita TEXT, data_fine_validita TEXT)"
            )
            connection.executemany(
                "INSERT INTO comuni_nazioni VALUES (?, ?, ?, ?, ?)",
                [
                    ("rm", "Roma", "h501", None, None),
                    (" MI ", " Milano ", " F205 ", None, None),
                ],
            )
        connection.close()

        # Act & Assert
        with SqlitePlaceCodeLookup(db_path) as lookup:
            assert lookup.lookup_place_code("RM", "ROMA") == "H501"
            assert lookup.lookup_place_code("mi", "milano") == "F205"
            assert lookup.place_code_exists("H501") is True
            assert lookup.place_code_exists("f205") is True

    def test_concurrent_queries(self, sqlite_lookup: SqlitePlaceCodeLookup) -> None:
        """Test one lookup can be shared between threads."""
        # Arrange
        results: list[str] = []
        errors: list[Exception] = []

        def worker() -> None:
            try:
                for _ in range(50):
                    results.append(sqlite_lookup.lookup_place_code("MI", "Milano"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]

        # Act
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert errors == []
        assert results == ["F205"] * 200

    def test_config_rejects_bad_timeout(self, tmp_path: Path) -> None:
        """Test SqliteLookupConfig validation."""
        # Arrange & Act & Assert
        with pytest.raises(ValueError) as exc_info:
            SqliteLookupConfig(database_path=tmp_path / "x.db", timeout=0)

        assert "timeout must be > 0" in str(exc_info.value)


class TestInitializeDatabase:
    """Test initialize_database function."""

    def test_creates_table_and_indexes(self, tmp_path: Path, place_code_records) -> None:
        """Test schema and row count."""
        # Arrange
        db_path = tmp_path / "nested" / "places.db"

        # Act
        inserted = initialize_database(db_path, place_code_records)

        # Assert
        assert inserted == len(place_code_records)
        connection = sqlite3.connect(str(db_path))
        try:
            count = connection.execute("SELECT COUNT(*) FROM comuni_nazioni").fetchone()[0]
            indexes = {
                row[0]
                for row in connection.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'index'"
                )
            }
            valid_from = connection.execute(
                "SELECT data_inizio_validita FROM comuni_nazioni WHERE codice_belfiore = 'H501'"
            ).fetchone()[0]
        finally:
            connection.close()

        assert count == len(place_code_records)
        assert {"idx_codice_belfiore", "idx_denominazione"} <= indexes
        assert valid_from == "1871-01-01"

    def test_extends_existing_database(self, place_code_db: Path) -> None:
        """Test a second call appends to the table."""
        # Arrange & Act
        initialize_database(place_code_db, [PlaceCodeRecord("EE", "SPAGNA", "Z131")])

        # Assert
        with SqlitePlaceCodeLookup(place_code_db) as lookup:
            assert lookup.lookup_place_code("EE", "Spagna") == "Z131"
            assert lookup.lookup_place_code("RM", "Roma") == "H501"


class TestCachingPlaceCodeLookup:
    """Test CachingPlaceCodeLookup."""

    def test_repeated_lookup_hits_cache(self) -> None:
        """Test the inner lookup is queried once per key."""
        # Arrange
        inner = Mock(spec=PlaceCodeLookup)
        inner.lookup_place_code.return_value = "H501"
        cache = CachingPlaceCodeLookup(inner, max_size=10)

        # Act
        first = cache.lookup_place_code("RM", "Roma")
        second = cache.lookup_place_code(" rm", "ROMA ")

        # Assert
        assert first == second == "H501"
        inner.lookup_place_code.assert_called_once()
        info = cache.cache_info()
        assert info.hits == 1
        assert info.misses == 1
        assert info.hit_rate == 0.5

    def test_misses_are_cached(self) -> None:
        """Test unknown places and codes are cached too."""
        # Arrange
        inner = Mock(spec=PlaceCodeLookup)
        inner.lookup_place_code.return_value = None
        inner.place_code_exists.return_value = False
        cache = CachingPlaceCodeLookup(inner)

        # Act
        for _ in range(3):
            assert cache.lookup_place_code("RM", "Atlantide") is None
            assert cache.place_code_exists("H999") is False

        # Assert
        assert inner.lookup_place_code.call_count == 1
        assert inner.place_code_exists.call_count == 1

    def test_failures_are_not_cached(self) -> None:
        """Test a lookup error is retried on the next call."""
        # Arrange
        inner = Mock(spec=PlaceCodeLookup)
        inner.place_code_exists.side_effect = [PlaceCodeLookupError("locked"), True]
        cache = CachingPlaceCodeLookup(inner)

        # Act & Assert
        with pytest.raises(PlaceCodeLookupError):
            cache.place_code_exists("H501")
        assert cache.place_code_exists("H501") is True
        assert inner.place_code_exists.call_count == 2

    def test_least_recently_used_evicted(self, lookup: InMemoryPlaceCodeLookup) -> None:
        """Test the cache is bounded per query kind."""
        # Arrange
        inner = Mock(wraps=lookup)
        cache = CachingPlaceCodeLookup(inner, max_size=2)

        # Act
        cache.place_code_exists("H501")
        cache.place_code_exists("F205")
        cache.place_code_exists("H501")  # refresh H501
        cache.place_code_exists("F839")  # evicts F205
        cache.place_code_exists("H501")
        cache.place_code_exists("F205")

        # Assert
        queried = [call.args[0] for call in inner.place_code_exists.call_args_list]
        assert queried == ["H501", "F205", "F839", "F205"]
        assert cache.cache_info().size == 2

    def test_clear(self) -> None:
        """Test clear() drops entries and statistics."""
        # Arrange
        inner = Mock(spec=PlaceCodeLookup)
        inner.place_code_exists.return_value = True
        cache = CachingPlaceCodeLookup(inner)
        cache.place_code_exists("H501")

        # Act
        cache.clear()
        cache.place_code_exists("H501")

        # Assert
        assert inner.place_code_exists.call_count == 2
        assert cache.cache_info().misses == 1

    def test_none_inputs_bypass_cache(self) -> None:
        """Test None keys answer without querying the inner lookup."""
        # Arrange
        inner = Mock(spec=PlaceCodeLookup)
        cache = CachingPlaceCodeLookup(inner)

        # Act & Assert
        assert cache.lookup_place_code(None, "Roma") is None
        assert cache.place_code_exists(None) is False
        inner.lookup_place_code.assert_not_called()
        inner.place_code_exists.assert_not_called()

    def test_invalid_max_size(self) -> None:
        """Test max_size must be positive."""
        # Arrange & Act & Assert
        with pytest.raises(ValueError):
            CachingPlaceCodeLookup(Mock(spec=PlaceCodeLookup), max_size=0)

    def test_close_closes_inner(self, place_code_db: Path) -> None:
        """Test close() is forwarded to the wrapped lookup."""
        # Arrange
        inner = SqlitePlaceCodeLookup(place_code_db)
        cache = CachingPlaceCodeLookup(inner)
        cache.place_code_exists("H501")

        # Act
        cache.close()

        # Assert
        assert inner._connection is None


class TestBuildPlaceCodeLookup:
    """Test build_place_code_lookup factory."""

    def test_cached_sqlite_lookup(self, place_code_db: Path) -> None:
        """Test the default configuration wraps SQLite in a cache."""
        # Arrange
        config = Config(lookup=LookupConfig(database_path=place_code_db, cache_size=16))

        # Act
        lookup = build_place_code_lookup(config)

        # Assert
        assert isinstance(lookup, CachingPlaceCodeLookup)
        assert isinstance(lookup.inner, SqlitePlaceCodeLookup)
        assert lookup.max_size == 16
        assert lookup.lookup_place_code("RM", "Roma") == "H501"
        lookup.close()

    def test_cache_disabled(self, place_code_db: Path) -> None:
        """Test cache_size 0 returns the bare SQLite lookup."""
        # Arrange
        config = Config(lookup=LookupConfig(database_path=place_code_db, cache_size=0))

        # Act
        lookup = build_place_code_lookup(config)

        # Assert
        assert isinstance(lookup, SqlitePlaceCodeLookup)
        assert lookup.config.database_path == place_code_db
        lookup.close()
