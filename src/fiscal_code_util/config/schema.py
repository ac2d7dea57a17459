"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class LookupConfig(BaseModel):
    """Configuration for the place-code lookup.

    Attributes:
        database_path: Path to the SQLite database with the place-code table
        cache_size: Maximum cached answers per query shape (0 disables caching)
    """

    database_path: Path = Field(
        default=Path("data/comuni_nazioni.db"),
        description="SQLite database with the comuni_nazioni table"
    )
    cache_size: int = Field(
        default=1024,
        ge=0,
        description="Maximum cached lookups per query shape (0 = no cache)"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_pii: Whether to redact fiscal codes and names from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/fiscal-code-util.log"),
        description="Log file path"
    )
    redact_pii: bool = Field(
        default=False,
        description="Redact fiscal codes and names from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Args:
            v: Log level string

        Returns:
            Validated log level (uppercase)

        Raises:
            ValueError: If log level is not valid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        lookup: Place-code lookup configuration
        logging: Logging configuration

    Example:
        >>> config = Config(lookup=LookupConfig(cache_size=0))
        >>> config.lookup.cache_size
        0
    """

    lookup: LookupConfig = LookupConfig()
    logging: LoggingConfig = LoggingConfig()
