"""
Settings schema (``ledger_config.schema``).

Frozen dataclasses produced by ``ledger_config.loader``.  Defaults are the
values used when no configuration file is present.
"""

from __future__ import annotations

from dataclasses import dataclass

from ledger_kernel.domain.catalog import Product, StockItem
from ledger_kernel.services.day_transition import ForwardPolicy
from ledger_kernel.services.ledger_store import DEFAULT_PIN
from ledger_services.sync_service import DEFAULT_SYNC_TIMEOUT

DEFAULT_DATABASE_URL = "sqlite:///smoothie_ledger.db"
DEFAULT_SYNC_MIRROR_PATH = "smoothie_sync.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class SeedCatalog:
    """Catalog installed on first run, before anything is persisted."""

    products: tuple[Product, ...]
    stock_items: tuple[StockItem, ...]


@dataclass(frozen=True)
class LedgerSettings:
    database_url: str = DEFAULT_DATABASE_URL
    sync_timeout_seconds: float = DEFAULT_SYNC_TIMEOUT
    sync_mirror_path: str = DEFAULT_SYNC_MIRROR_PATH
    forward_policy: ForwardPolicy = ForwardPolicy.ONCE
    default_pin: str = DEFAULT_PIN
    log_level: str = "INFO"
    seed_catalog: SeedCatalog | None = None
