"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Default configuration dictionary
# This is used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "lookup": {
        # SQLite database holding the comuni_nazioni table
        "database_path": "data/comuni_nazioni.db",
        # Entries per query shape kept by the lookup cache (0 disables it)
        "cache_size": 1024,
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/fiscal-code-util.log",
        # Do not redact PII by default (user must opt-in for privacy)
        "redact_pii": False,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
