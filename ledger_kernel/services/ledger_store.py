"""
LedgerStore -- the in-memory ledger, catalog and settings, written through.

Responsibility:
    Owns every ``DayRecord`` (by day key), every ``StockRecord`` (by month
    key), both catalogs and the persisted settings.  Loads them once at
    startup and writes each change back to the durable store immediately.

Architecture position:
    Kernel > Services -- imperative shell.  The day transition engine,
    access gate and catalog service mutate state only through this class;
    the totals calculator only reads what it hands out.

Invariants enforced:
    - Reads of an absent day or month return an empty record without
      creating it.
    - Every mutation is persisted before the call returns (no batching).
    - Records are immutable values; ``put_day``/``put_month`` swap them.

Failure modes:
    - Persistence errors propagate from ``KeyValueStore``; the in-memory
      value is only swapped after the write succeeded.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from ledger_kernel.domain.catalog import (
    SEED_PRODUCTS,
    SEED_STOCK_ITEMS,
    Product,
    StockItem,
)
from ledger_kernel.domain.records import DayRecord, StockRecord
from ledger_kernel.domain.session import Language, ViewMode
from ledger_kernel.domain.values import parse_day_key, parse_month_key, validate_pin
from ledger_kernel.logging_config import get_logger
from ledger_kernel.services.kv_store import KeyValueStore

logger = get_logger("services.ledger_store")

DEFAULT_PIN = "0000"

DAY_NS = "day"
MONTH_NS = "month"
CATALOG_NS = "catalog"
SETTINGS_NS = "settings"

PRODUCTS_KEY = "catalog:products"
STOCK_ITEMS_KEY = "catalog:stock_items"
PIN_KEY = "settings:security_pin"
SYNC_ENABLED_KEY = "settings:cloud_sync_enabled"
LANGUAGE_KEY = "settings:language"
VIEW_MODE_KEY = "settings:view_mode"


class LedgerStore:
    """
    Day and month ledgers plus catalog and settings.

    The first-run PIN is ``"0000"`` (or the configured ``default_pin``).
    That is a convenience default for a single-operator stall, not a
    secret.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        default_pin: str = DEFAULT_PIN,
        seed_products: Sequence[Product] = SEED_PRODUCTS,
        seed_stock_items: Sequence[StockItem] = SEED_STOCK_ITEMS,
    ):
        self._kv = kv
        self._default_pin = default_pin
        self._seed_products = tuple(seed_products)
        self._seed_stock_items = tuple(seed_stock_items)

        self._days: dict[str, DayRecord] = {}
        self._months: dict[str, StockRecord] = {}
        self._products: tuple[Product, ...] = self._seed_products
        self._stock_items: tuple[StockItem, ...] = self._seed_stock_items
        self._security_pin = default_pin
        self._cloud_sync_enabled = True
        self._language = Language.EN
        self._view_mode = ViewMode.SALES

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def load(self) -> LedgerStore:
        """Read everything from the durable store. Absent keys use defaults."""
        self._days = {
            key: DayRecord.from_dict(data) for key, data in self._kv.items(DAY_NS).items()
        }
        self._months = {
            key: StockRecord.from_dict(data)
            for key, data in self._kv.items(MONTH_NS).items()
        }

        products = self._kv.get(PRODUCTS_KEY)
        self._products = (
            tuple(Product.from_dict(p) for p in products)
            if products is not None
            else self._seed_products
        )
        stock_items = self._kv.get(STOCK_ITEMS_KEY)
        self._stock_items = (
            tuple(StockItem.from_dict(s) for s in stock_items)
            if stock_items is not None
            else self._seed_stock_items
        )

        self._security_pin = str(self._kv.get(PIN_KEY, self._default_pin))
        self._cloud_sync_enabled = bool(self._kv.get(SYNC_ENABLED_KEY, True))
        self._language = Language(self._kv.get(LANGUAGE_KEY, Language.EN.value))
        self._view_mode = ViewMode(self._kv.get(VIEW_MODE_KEY, ViewMode.SALES.value))

        logger.info(
            "ledger_loaded",
            extra={
                "day_count": len(self._days),
                "month_count": len(self._months),
                "product_count": len(self._products),
                "stock_item_count": len(self._stock_items),
            },
        )
        return self

    # ------------------------------------------------------------------
    # Day and month records
    # ------------------------------------------------------------------

    def get_day(self, key: str) -> DayRecord:
        parse_day_key(key)
        return self._days.get(key, DayRecord())

    def has_day(self, key: str) -> bool:
        return key in self._days

    def put_day(self, key: str, record: DayRecord) -> None:
        parse_day_key(key)
        self._kv.put(f"{DAY_NS}:{key}", record.to_dict())
        self._days[key] = record

    def day_keys(self) -> list[str]:
        return sorted(self._days)

    def get_month(self, key: str) -> StockRecord:
        parse_month_key(key)
        return self._months.get(key, StockRecord())

    def put_month(self, key: str, record: StockRecord) -> None:
        parse_month_key(key)
        self._kv.put(f"{MONTH_NS}:{key}", record.to_dict())
        self._months[key] = record

    def month_keys(self) -> list[str]:
        return sorted(self._months)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    @property
    def stock_items(self) -> tuple[StockItem, ...]:
        return self._stock_items

    def set_products(self, products: Iterable[Product]) -> None:
        products = tuple(products)
        self._kv.put(PRODUCTS_KEY, [p.to_dict() for p in products])
        self._products = products

    def set_stock_items(self, stock_items: Iterable[StockItem]) -> None:
        stock_items = tuple(stock_items)
        self._kv.put(STOCK_ITEMS_KEY, [s.to_dict() for s in stock_items])
        self._stock_items = stock_items

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def security_pin(self) -> str:
        return self._security_pin

    def set_security_pin(self, pin: str) -> None:
        validate_pin(pin)
        self._kv.put(PIN_KEY, pin)
        self._security_pin = pin

    @property
    def cloud_sync_enabled(self) -> bool:
        return self._cloud_sync_enabled

    def set_cloud_sync_enabled(self, enabled: bool) -> None:
        self._kv.put(SYNC_ENABLED_KEY, bool(enabled))
        self._cloud_sync_enabled = bool(enabled)

    @property
    def language(self) -> Language:
        return self._language

    def set_language(self, language: Language) -> None:
        self._kv.put(LANGUAGE_KEY, language.value)
        self._language = language

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    def set_view_mode(self, view_mode: ViewMode) -> None:
        self._kv.put(VIEW_MODE_KEY, view_mode.value)
        self._view_mode = view_mode

    # ------------------------------------------------------------------
    # Wholesale replacement (snapshot import)
    # ------------------------------------------------------------------

    def replace_all(
        self,
        *,
        products: Sequence[Product],
        stock_items: Sequence[StockItem],
        days: Mapping[str, DayRecord],
        months: Mapping[str, StockRecord],
    ) -> None:
        """
        Overwrite catalog and ledger in one transaction.  Settings are kept.

        Postconditions:
            Days and months not present in the arguments no longer exist.
        """
        for key in days:
            parse_day_key(key)
        for key in months:
            parse_month_key(key)

        values: dict[str, Any] = {
            PRODUCTS_KEY: [p.to_dict() for p in products],
            STOCK_ITEMS_KEY: [s.to_dict() for s in stock_items],
        }
        values.update({f"{DAY_NS}:{k}": r.to_dict() for k, r in days.items()})
        values.update({f"{MONTH_NS}:{k}": r.to_dict() for k, r in months.items()})
        self._kv.replace_namespaces(values, (DAY_NS, MONTH_NS, CATALOG_NS))

        self._products = tuple(products)
        self._stock_items = tuple(stock_items)
        self._days = dict(days)
        self._months = dict(months)
