"""
Settings loader (``ledger_config.loader``).

Responsibility
--------------
Reads one YAML file and turns it into a ``LedgerSettings``.  Keys that are
absent keep their defaults; unknown keys are rejected so a typo does not
silently fall back to a default.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values or unknown keys  -> ``ValueError``.
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import LOG_LEVELS, LedgerSettings, SeedCatalog
from ledger_kernel.domain.catalog import Product, StockItem
from ledger_kernel.domain.values import is_valid_pin
from ledger_kernel.services.day_transition import ForwardPolicy


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def parse_seed_catalog(data: dict[str, Any]) -> SeedCatalog:
    """Parse ``seed_catalog: {products: [...], stock_items: [...]}``."""
    if not isinstance(data, dict):
        raise ValueError("seed_catalog must be a mapping")
    products = data.get("products") or []
    stock_items = data.get("stock_items") or []
    if not isinstance(products, list) or not isinstance(stock_items, list):
        raise ValueError("seed_catalog.products and seed_catalog.stock_items must be lists")
    try:
        return SeedCatalog(
            products=tuple(Product.from_dict(p) for p in products),
            stock_items=tuple(StockItem.from_dict(s) for s in stock_items),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"invalid seed_catalog entry: {exc!r}") from exc


def parse_settings(data: dict[str, Any]) -> LedgerSettings:
    """
    Build ``LedgerSettings`` from a parsed YAML mapping.

    Raises:
        ValueError: unknown keys or values out of range.
    """
    known = {f.name for f in fields(LedgerSettings)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown settings keys: {sorted(unknown)}")

    values: dict[str, Any] = {}

    if "database_url" in data:
        url = data["database_url"]
        if not isinstance(url, str) or not url:
            raise ValueError("database_url must be a non-empty string")
        values["database_url"] = url

    if "sync_timeout_seconds" in data:
        try:
            timeout = float(data["sync_timeout_seconds"])
        except (TypeError, ValueError) as exc:
            raise ValueError(
                f"sync_timeout_seconds must be a number, got {data['sync_timeout_seconds']!r}"
            ) from exc
        if timeout <= 0:
            raise ValueError(f"sync_timeout_seconds must be positive, got {timeout}")
        values["sync_timeout_seconds"] = timeout

    if "sync_mirror_path" in data:
        values["sync_mirror_path"] = str(data["sync_mirror_path"])

    if "forward_policy" in data:
        values["forward_policy"] = ForwardPolicy(str(data["forward_policy"]).lower())

    if "default_pin" in data:
        # YAML reads 0000 as an int; require quoting.
        pin = data["default_pin"]
        if not isinstance(pin, str) or not is_valid_pin(pin):
            raise ValueError(f"default_pin must be a quoted 4-digit string, got {pin!r}")
        values["default_pin"] = pin

    if "log_level" in data:
        level = str(data["log_level"]).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {level!r}")
        values["log_level"] = level

    if data.get("seed_catalog") is not None:
        values["seed_catalog"] = parse_seed_catalog(data["seed_catalog"])

    return LedgerSettings(**values)


def load_settings(path: Path | str | None = None) -> LedgerSettings:
    """Settings from ``path``, or the defaults when ``path`` is None."""
    if path is None:
        return LedgerSettings()
    return parse_settings(load_yaml_file(Path(path)))
