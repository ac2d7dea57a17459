"""Config module.

This module provides configuration management functionality.
"""

from fiscal_code_util.config.manager import (
    get_logging_config,
    get_lookup_config,
    load_config,
)
from fiscal_code_util.config.schema import Config, LoggingConfig, LookupConfig

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_lookup_config",
    "get_logging_config",
    # Configuration models
    "Config",
    "LookupConfig",
    "LoggingConfig",
]
