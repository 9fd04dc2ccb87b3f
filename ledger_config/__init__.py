"""
ledger_config -- runtime settings for the smoothie ledger.

``get_active_settings()`` is the entrypoint: it reads the YAML file named
by ``SMOOTHIE_LEDGER_CONFIG`` or returns the defaults when the variable is
unset.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ledger_config.loader import load_settings, load_yaml_file, parse_settings
from ledger_config.schema import LedgerSettings, SeedCatalog

_logger = logging.getLogger("ledger_kernel.config")

CONFIG_ENV_VAR = "SMOOTHIE_LEDGER_CONFIG"


def get_active_settings(path: Path | str | None = None) -> LedgerSettings:
    """
    Settings from ``path``, else from ``$SMOOTHIE_LEDGER_CONFIG``, else defaults.

    Raises:
        FileNotFoundError: the named file does not exist.
        yaml.YAMLError: the file is not valid YAML.
        ValueError: a value is invalid.
    """
    source = path or os.environ.get(CONFIG_ENV_VAR) or None
    settings = load_settings(source)
    _logger.info(
        "settings_loaded",
        extra={
            "source": str(source) if source else "defaults",
            "database_url": settings.database_url,
            "forward_policy": settings.forward_policy.value,
            "sync_timeout_seconds": settings.sync_timeout_seconds,
        },
    )
    return settings


__all__ = [
    "CONFIG_ENV_VAR",
    "LedgerSettings",
    "SeedCatalog",
    "get_active_settings",
    "load_settings",
    "load_yaml_file",
    "parse_settings",
]
