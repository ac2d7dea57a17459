"""Logging configuration and logger factory for the fiscal code utility.

This module provides centralized logging configuration with support for:
- Console and file handlers with different log levels
- Log rotation to prevent unbounded file growth
- Fiscal code and name redaction via custom formatters
- Per-area log levels (codec, generator, place codes, batch)
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .formatters import PIIRedactingFormatter

if TYPE_CHECKING:
    from ..config.schema import LoggingConfig

# Constants
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "fiscal-code-util.log"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Track if logging has been configured
_logging_configured = False

# Operation-specific logger names (package sub-modules log below these)
OPERATION_LOGGERS = {
    "codec": "fiscal_code_util.codec",
    "generator": "fiscal_code_util.generator",
    "place_codes": "fiscal_code_util.place_codes",
    "batch": "fiscal_code_util.batch",
}

logger = logging.getLogger(__name__)


def _numeric_level(level: str) -> int:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int) or level.upper() not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: {', '.join(VALID_LEVELS)}"
        )
    return numeric_level


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_pii: bool = False,
) -> None:
    """Configure logging for the fiscal code utility.

    Sets up both console and file handlers with appropriate log levels and formatting.
    This function is idempotent - it can be called multiple times safely.

    Args:
        level: Log level for console output (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               File handler always uses DEBUG level.
        log_file: Path to log file. If None, uses DEFAULT_LOG_FILE or
                 FISCAL_CODE_LOG_FILE environment variable if set.
        redact_pii: Whether to redact fiscal codes and names from logs

    Raises:
        ValueError: If invalid log level is provided
        RuntimeError: If log directory cannot be created

    Example:
        >>> configure_logging(level="DEBUG", redact_pii=True)
        >>> configure_logging(level="INFO", log_file=Path("custom/app.log"))
    """
    global _logging_configured

    numeric_level = _numeric_level(level)

    if log_file is None:
        env_log_file = os.environ.get("FISCAL_CODE_LOG_FILE")
        log_file = Path(env_log_file) if env_log_file else DEFAULT_LOG_FILE

    log_dir = log_file.parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError) as e:
        raise RuntimeError(
            f"Failed to create log directory: {log_dir}. "
            f"Ensure write permissions are available. Error: {e}"
        ) from e

    root_logger = logging.getLogger()

    # Reconfiguring replaces our handlers instead of stacking duplicates
    if _logging_configured:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

    root_logger.setLevel(logging.DEBUG)

    formatter = PIIRedactingFormatter(fmt=DEFAULT_LOG_FORMAT, redact_pii=redact_pii)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    try:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except (OSError, PermissionError) as e:
        root_logger.warning(
            f"Failed to create file handler for {log_file}: {e}. "
            f"Logging to console only."
        )

    _logging_configured = True


def configure_logging_from_config(config: "LoggingConfig") -> None:
    """Configure logging from a LoggingConfig object.

    Args:
        config: LoggingConfig with level, log file and redaction flag

    Example:
        >>> from fiscal_code_util.config import load_config
        >>> configure_logging_from_config(load_config().logging)
    """
    configure_logging(
        level=config.level,
        log_file=config.log_file,
        redact_pii=config.redact_pii,
    )


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for the specified module.

    Args:
        module_name: Name of the module, typically __name__

    Returns:
        Logger instance for the module

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Processing started")
    """
    return logging.getLogger(module_name)


def get_operation_logger(operation: str) -> logging.Logger:
    """Get the logger of an operation area.

    Args:
        operation: One of codec, generator, place_codes, batch

    Returns:
        Logger instance for the operation area

    Raises:
        ValueError: If operation is not a recognized area
    """
    if operation not in OPERATION_LOGGERS:
        raise ValueError(
            f"Unknown operation: {operation}. "
            f"Must be one of: {', '.join(OPERATION_LOGGERS.keys())}"
        )
    return logging.getLogger(OPERATION_LOGGERS[operation])


def configure_operation_logging(
    codec: str = "INFO",
    generator: str = "INFO",
    place_codes: str = "INFO",
    batch: str = "INFO",
) -> None:
    """Configure logging levels for each operation area.

    Useful to debug, for instance, place-code lookups without the per-code
    rejection messages of the codec.

    Args:
        codec: Log level for validation
        generator: Log level for code generation
        place_codes: Log level for place-code lookups and loaders
        batch: Log level for batch validation

    Raises:
        ValueError: If any log level is invalid

    Example:
        >>> configure_operation_logging(codec="WARNING", place_codes="DEBUG")
    """
    levels = {
        "codec": codec,
        "generator": generator,
        "place_codes": place_codes,
        "batch": batch,
    }

    # Validate everything before touching any logger
    numeric_levels = {op: _numeric_level(level) for op, level in levels.items()}

    for operation, numeric_level in numeric_levels.items():
        logger_name = OPERATION_LOGGERS[operation]
        logging.getLogger(logger_name).setLevel(numeric_level)
        logger.debug(f"Set {logger_name} logger level to {levels[operation].upper()}")
