"""Custom exception classes for the fiscal code utility.

All exceptions inherit from FiscalCodeUtilError to allow catching all custom exceptions.
Validation outcomes are never raised: they are reported through
ValidationResult. The exceptions below cover the ambient layers (configuration,
batch input, place-code data) and the lookup boundary.
"""


class FiscalCodeUtilError(Exception):
    """Base exception for all fiscal code utility custom exceptions."""

    pass


class ValidationError(FiscalCodeUtilError):
    """Raised when batch input data cannot be processed.

    Examples:
        - CSV file missing the fiscal_code column
        - CSV file not readable as UTF-8
    """

    pass


class ConfigurationError(FiscalCodeUtilError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Invalid configuration file format
        - Configuration value out of range
    """

    pass


class InvalidBirthDateError(FiscalCodeUtilError, ValueError):
    """Raised when the birth date encoded in a fiscal code is impossible.

    Examples:
        - Month letter outside the month alphabet
        - Day 00 or day 40
        - 31st of a 30-day month, 29th of February in a common year
    """

    pass


class PlaceCodeLookupError(FiscalCodeUtilError):
    """Raised when the place-code lookup cannot answer a query.

    This is a fault of the lookup layer (I/O, missing database, closed
    connection), never a "not found" answer: a miss is returned as None or
    False by the lookup itself.

    Examples:
        - Database file cannot be opened
        - Table missing from the database
        - Connection closed while querying
    """

    pass


class PlaceCodeDataError(FiscalCodeUtilError):
    """Raised when place-code source data cannot be loaded.

    Examples:
        - File not found or unsupported extension
        - Required columns missing
        - Excel workbook cannot be parsed
    """

    pass
