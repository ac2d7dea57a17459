"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

from datetime import date
from pathlib import Path
from typing import Generator

import pytest

from fiscal_code_util.codec.validator import FiscalCodeValidator
from fiscal_code_util.generator import FiscalCodeGenerator
from fiscal_code_util.place_codes import (
    InMemoryPlaceCodeLookup,
    PlaceCodeRecord,
    SqlitePlaceCodeLookup,
    initialize_database,
)


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def place_code_records() -> list[PlaceCodeRecord]:
    """
    Return a small place-code table.

    Includes Italian municipalities (Napoli uses province "NA"), foreign
    countries (province "EE") and a municipality with a superseded record.

    Returns:
        list[PlaceCodeRecord]: Place-code rows.
    """
    return [
        PlaceCodeRecord("RM", "ROMA", "H501", date(1871, 1, 1)),
        PlaceCodeRecord("MI", "MILANO", "F205", date(1861, 3, 17)),
        PlaceCodeRecord("NA", "NAPOLI", "F839", date(1861, 3, 17)),
        PlaceCodeRecord("TO", "TORINO", "L219", date(1861, 3, 17)),
        PlaceCodeRecord("EE", "FRANCIA", "Z110"),
        PlaceCodeRecord("EE", "GERMANIA", "Z112"),
        PlaceCodeRecord("MB", "MONZA", "F704", date(2009, 6, 11)),
        PlaceCodeRecord("MB", "MONZA", "F704", date(1861, 3, 17), date(2009, 6, 10)),
    ]


@pytest.fixture
def lookup(place_code_records: list[PlaceCodeRecord]) -> InMemoryPlaceCodeLookup:
    """
    Return an in-memory lookup over place_code_records.

    Args:
        place_code_records: Place-code rows fixture.

    Returns:
        InMemoryPlaceCodeLookup: Lookup for the test table.
    """
    return InMemoryPlaceCodeLookup(place_code_records)


@pytest.fixture
def validator(lookup: InMemoryPlaceCodeLookup) -> FiscalCodeValidator:
    """Return a validator backed by the in-memory lookup."""
    return FiscalCodeValidator(lookup)


@pytest.fixture
def generator(lookup: InMemoryPlaceCodeLookup) -> FiscalCodeGenerator:
    """Return a generator backed by the in-memory lookup."""
    return FiscalCodeGenerator(lookup)


@pytest.fixture
def place_code_db(tmp_path: Path, place_code_records: list[PlaceCodeRecord]) -> Path:
    """
    Create a SQLite place-code database for testing.

    Args:
        tmp_path: Pytest's temporary directory fixture.
        place_code_records: Place-code rows fixture.

    Returns:
        Path: Path to the database file.
    """
    db_path = tmp_path / "comuni_nazioni.db"
    initialize_database(db_path, place_code_records)
    return db_path


@pytest.fixture
def sqlite_lookup(place_code_db: Path) -> Generator[SqlitePlaceCodeLookup, None, None]:
    """
    Return a SQLite lookup over place_code_db, closed after the test.

    Args:
        place_code_db: Database fixture.

    Yields:
        SqlitePlaceCodeLookup: Open lookup.
    """
    with SqlitePlaceCodeLookup(place_code_db) as sqlite_lookup:
        yield sqlite_lookup
