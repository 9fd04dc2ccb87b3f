"""
Catalog -- sellable products and stock item definitions.

Responsibility:
    Frozen value types for the two catalogs plus the built-in seed used on
    first run and their dict wire form.

Architecture position:
    Kernel > Domain -- pure data, zero I/O. Edited only through
    ``ledger_kernel.services.catalog_service``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any

from ledger_kernel.domain.values import coerce_decimal, decimal_to_str


@dataclass(frozen=True, slots=True)
class Product:
    """A sellable smoothie with a small (250 ml) and large (350 ml) price."""

    id: str
    name: str
    name_bn: str
    price_small: Decimal
    price_large: Decimal
    icon: str | None = None
    color: str | None = None

    def display_name(self, language: str) -> str:
        return self.name_bn if language == "BN" else self.name

    def with_changes(self, **changes: Any) -> Product:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "nameBN": self.name_bn,
            "priceSmall": decimal_to_str(self.price_small),
            "priceLarge": decimal_to_str(self.price_large),
        }
        if self.icon is not None:
            data["icon"] = self.icon
        if self.color is not None:
            data["color"] = self.color
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            name_bn=str(data.get("nameBN", "")),
            price_small=coerce_decimal(data.get("priceSmall")),
            price_large=coerce_decimal(data.get("priceLarge")),
            icon=data.get("icon"),
            color=data.get("color"),
        )


@dataclass(frozen=True, slots=True)
class StockItem:
    """An inventory line counted once a month. Priced per month, not here."""

    id: str
    name: str
    name_bn: str

    def display_name(self, language: str) -> str:
        return self.name_bn if language == "BN" else self.name

    def with_changes(self, **changes: Any) -> StockItem:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "nameBN": self.name_bn}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StockItem:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            name_bn=str(data.get("nameBN", "")),
        )


SEED_PRODUCTS: tuple[Product, ...] = (
    Product("mango", "Mango", "আম", Decimal("100"), Decimal("150"), "🥭", "#FFF4D6"),
    Product("strawberry", "Strawberry", "স্ট্রবেরি", Decimal("120"), Decimal("170"), "🍓", "#FFE4E6"),
    Product("banana", "Banana", "কলা", Decimal("80"), Decimal("120"), "🍌", "#FEF9C3"),
    Product("papaya", "Papaya", "পেঁপে", Decimal("90"), Decimal("130"), "🍈", "#FFEDD5"),
    Product("mixed", "Mixed Fruit", "মিক্সড ফ্রুট", Decimal("130"), Decimal("180"), "🍹", "#EDE9FE"),
)

SEED_STOCK_ITEMS: tuple[StockItem, ...] = (
    StockItem("s-milk", "Milk (litre)", "দুধ (লিটার)"),
    StockItem("s-sugar", "Sugar (kg)", "চিনি (কেজি)"),
    StockItem("s-yogurt", "Yogurt (kg)", "দই (কেজি)"),
    StockItem("s-cups", "Cups", "কাপ"),
    StockItem("s-straws", "Straws", "স্ট্র"),
)
