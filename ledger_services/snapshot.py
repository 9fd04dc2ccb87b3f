"""
ledger_services.snapshot -- full-state JSON export and import.

Responsibility:
    Serializes catalog + ledger (every day and month record) to one JSON
    document and reads such a document back, replacing the stores
    wholesale.

Invariants enforced:
    - Import never merges: after success, exactly the snapshot's days,
      months and catalog exist.
    - Import parses and validates the whole document before touching any
      state.  On failure the in-memory and durable stores are unchanged.
    - Settings (PIN, sync flag, language) are not part of a snapshot.

Failure modes:
    - SnapshotImportError for malformed JSON, a wrong top-level shape,
      invalid date keys or malformed records.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ledger_kernel.domain.catalog import Product, StockItem
from ledger_kernel.domain.records import DayRecord, StockRecord
from ledger_kernel.domain.values import parse_day_key, parse_month_key
from ledger_kernel.exceptions import DateKeyError, SnapshotImportError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.snapshot")

SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class Snapshot:
    products: tuple[Product, ...]
    stock_items: tuple[StockItem, ...]
    days: Mapping[str, DayRecord]
    months: Mapping[str, StockRecord]


def snapshot_filename(active_date: str) -> str:
    return f"smoothie_backup_{active_date}.json"


def export_snapshot(store: LedgerStore) -> str:
    """The current catalog and ledger as a JSON document."""
    document = {
        "version": SNAPSHOT_VERSION,
        "items": [p.to_dict() for p in store.products],
        "stockItems": [s.to_dict() for s in store.stock_items],
        "history": {key: store.get_day(key).to_dict() for key in store.day_keys()},
        "stockHistory": {
            key: store.get_month(key).to_dict() for key in store.month_keys()
        },
    }
    logger.info(
        "snapshot_exported",
        extra={"day_count": len(document["history"]), "month_count": len(document["stockHistory"])},
    )
    return json.dumps(document, ensure_ascii=False, indent=2)


def _require(condition: bool, reason: str) -> None:
    if not condition:
        raise SnapshotImportError(reason)


def _parse_list(document: Mapping[str, Any], name: str, parser) -> tuple:
    raw = document.get(name, [])
    _require(isinstance(raw, list), f"{name} must be a list")
    parsed = []
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        _require(isinstance(entry, dict) and "id" in entry, f"{name}[{index}] needs an id")
        item = parser(entry)
        _require(item.id not in seen, f"duplicate id {item.id!r} in {name}")
        seen.add(item.id)
        parsed.append(item)
    return tuple(parsed)


def parse_snapshot(text: str) -> Snapshot:
    """
    Parse and validate a snapshot document without touching any store.

    Raises:
        SnapshotImportError: The document is not a valid snapshot.
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise SnapshotImportError(f"invalid JSON: {exc}") from exc

    _require(isinstance(document, dict), "top level must be an object")
    version = document.get("version", SNAPSHOT_VERSION)
    _require(version == SNAPSHOT_VERSION, f"unsupported snapshot version {version!r}")

    history = document.get("history", {})
    stock_history = document.get("stockHistory", {})
    _require(isinstance(history, dict), "history must be an object")
    _require(isinstance(stock_history, dict), "stockHistory must be an object")

    try:
        products = _parse_list(document, "items", Product.from_dict)
        stock_items = _parse_list(document, "stockItems", StockItem.from_dict)
        days = {}
        for key, data in history.items():
            parse_day_key(key)
            _require(isinstance(data, dict), f"history[{key}] must be an object")
            days[key] = DayRecord.from_dict(data)
        months = {}
        for key, data in stock_history.items():
            parse_month_key(key)
            _require(isinstance(data, dict), f"stockHistory[{key}] must be an object")
            months[key] = StockRecord.from_dict(data)
    except (DateKeyError, ValueError, TypeError, AttributeError, KeyError) as exc:
        raise SnapshotImportError(str(exc)) from exc

    return Snapshot(products=products, stock_items=stock_items, days=days, months=months)


def import_snapshot(store: LedgerStore, text: str) -> Snapshot:
    """Replace catalog and ledger with the snapshot in ``text``."""
    try:
        snapshot = parse_snapshot(text)
    except SnapshotImportError:
        logger.warning("snapshot_import_rejected", exc_info=True)
        raise
    store.replace_all(
        products=snapshot.products,
        stock_items=snapshot.stock_items,
        days=snapshot.days,
        months=snapshot.months,
    )
    logger.info(
        "snapshot_imported",
        extra={"day_count": len(snapshot.days), "month_count": len(snapshot.months)},
    )
    return snapshot


def write_snapshot(store: LedgerStore, directory: Path | str, active_date: str) -> Path:
    """Write the export artifact and return its path."""
    path = Path(directory) / snapshot_filename(active_date)
    path.write_text(export_snapshot(store), encoding="utf-8")
    return path


def read_snapshot(store: LedgerStore, path: Path | str) -> Snapshot:
    """Import the snapshot stored at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotImportError(f"cannot read {path}: {exc}") from exc
    return import_snapshot(store, text)
