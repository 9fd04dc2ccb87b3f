"""
Records -- per-day sales ledgers and per-month stock ledgers.

Responsibility:
    Immutable ``DayRecord`` and ``StockRecord`` values and their dict wire
    form (the shape persisted in the key-value table and in snapshots).

Architecture position:
    Kernel > Domain -- pure data, zero I/O. The ledger store swaps whole
    records; nothing mutates a record in place.

Invariants enforced:
    - ``purchase_total`` / ``expense_total`` equal the sum of positive
      ``amount`` values in the matching detail list whenever they are
      written through ``with_details()``.
    - Quantities are non-negative ints.

Derived figures (sales, cash in hand, balance) are never stored here; see
``ledger_kernel.domain.totals``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ledger_kernel.domain.values import (
    ZERO,
    coerce_decimal,
    coerce_quantity,
    decimal_to_str,
)


class CupSize(str, Enum):
    SMALL = "small"
    LARGE = "large"


class DetailKind(str, Enum):
    """Which detail list (and aggregate) an itemised entry belongs to."""

    PURCHASE = "purchase"
    EXPENSE = "expense"


class StockField(str, Enum):
    QUANTITY = "quantity"
    UNIT_PRICE = "unitPrice"


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class SizeQuantity:
    small: int = 0
    large: int = 0

    def with_size(self, size: CupSize, value: int) -> SizeQuantity:
        if size is CupSize.SMALL:
            return replace(self, small=value)
        return replace(self, large=value)

    def to_dict(self) -> dict[str, int]:
        return {"small": self.small, "large": self.large}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SizeQuantity:
        return cls(
            small=coerce_quantity(data.get("small")),
            large=coerce_quantity(data.get("large")),
        )


@dataclass(frozen=True, slots=True)
class DetailEntry:
    """One itemised purchase or expense line."""

    id: str
    description: str
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "amount": decimal_to_str(self.amount),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DetailEntry:
        return cls(
            id=str(data.get("id", "")),
            description=str(data.get("description", "")),
            amount=coerce_decimal(data.get("amount")),
        )


def details_total(entries: Iterable[DetailEntry]) -> Decimal:
    """Aggregate of a detail list: only positive amounts count."""
    return sum((e.amount for e in entries if e.amount > 0), ZERO)


@dataclass(frozen=True, slots=True)
class DayRecord:
    """The sales ledger of one calendar day."""

    quantities: Mapping[str, SizeQuantity] = field(default_factory=dict)
    purchase_total: Decimal = ZERO
    expense_total: Decimal = ZERO
    purchase_details: tuple[DetailEntry, ...] = ()
    expense_details: tuple[DetailEntry, ...] = ()
    previous_balance: Decimal = ZERO
    notes: str = ""
    locked: bool = False
    synced: bool = False
    forwarded: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantities", _frozen(self.quantities))

    def quantity_for(self, product_id: str) -> SizeQuantity:
        return self.quantities.get(product_id, SizeQuantity())

    def with_quantity(self, product_id: str, size: CupSize, value: int) -> DayRecord:
        updated = dict(self.quantities)
        updated[product_id] = self.quantity_for(product_id).with_size(size, value)
        return replace(self, quantities=updated, synced=False)

    def with_details(self, kind: DetailKind, entries: Iterable[DetailEntry]) -> DayRecord:
        entries = tuple(entries)
        total = details_total(entries)
        if kind is DetailKind.PURCHASE:
            return replace(self, purchase_details=entries, purchase_total=total, synced=False)
        return replace(self, expense_details=entries, expense_total=total, synced=False)

    def with_changes(self, **changes: Any) -> DayRecord:
        return replace(self, **changes)

    def has_entries(self) -> bool:
        """True if anything beyond the opening balance was recorded."""
        return bool(
            any(q.small or q.large for q in self.quantities.values())
            or self.purchase_total
            or self.expense_total
            or self.purchase_details
            or self.expense_details
            or self.notes
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "quantities": {pid: q.to_dict() for pid, q in self.quantities.items()},
            "purchaseTotal": decimal_to_str(self.purchase_total),
            "expenseTotal": decimal_to_str(self.expense_total),
            "purchaseDetails": [e.to_dict() for e in self.purchase_details],
            "expenseDetails": [e.to_dict() for e in self.expense_details],
            "previousBalance": decimal_to_str(self.previous_balance),
            "notes": self.notes,
            "locked": self.locked,
            "synced": self.synced,
            "forwarded": self.forwarded,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DayRecord:
        quantities = data.get("quantities") or {}
        if not isinstance(quantities, Mapping):
            raise ValueError("quantities must be a mapping")
        return cls(
            quantities={
                str(pid): SizeQuantity.from_dict(q) for pid, q in quantities.items()
            },
            purchase_total=coerce_decimal(data.get("purchaseTotal")),
            expense_total=coerce_decimal(data.get("expenseTotal")),
            purchase_details=tuple(
                DetailEntry.from_dict(e) for e in data.get("purchaseDetails") or ()
            ),
            expense_details=tuple(
                DetailEntry.from_dict(e) for e in data.get("expenseDetails") or ()
            ),
            previous_balance=coerce_decimal(data.get("previousBalance")),
            notes=str(data.get("notes") or ""),
            locked=bool(data.get("locked", False)),
            synced=bool(data.get("synced", False)),
            forwarded=bool(data.get("forwarded", False)),
        )


@dataclass(frozen=True, slots=True)
class StockEntry:
    quantity: Decimal = ZERO
    unit_price: Decimal = ZERO

    def to_dict(self) -> dict[str, str]:
        return {
            "quantity": decimal_to_str(self.quantity),
            "unitPrice": decimal_to_str(self.unit_price),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StockEntry:
        return cls(
            quantity=coerce_decimal(data.get("quantity")),
            unit_price=coerce_decimal(data.get("unitPrice")),
        )


@dataclass(frozen=True, slots=True)
class StockRecord:
    """The stock count of one calendar month."""

    items: Mapping[str, StockEntry] = field(default_factory=dict)
    synced: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", _frozen(self.items))

    def entry_for(self, item_id: str) -> StockEntry:
        return self.items.get(item_id, StockEntry())

    def with_entry_field(self, item_id: str, stock_field: StockField, value: Decimal) -> StockRecord:
        entry = self.entry_for(item_id)
        if stock_field is StockField.QUANTITY:
            entry = replace(entry, quantity=value)
        else:
            entry = replace(entry, unit_price=value)
        updated = dict(self.items)
        updated[item_id] = entry
        return replace(self, items=updated, synced=False)

    def with_changes(self, **changes: Any) -> StockRecord:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": {iid: e.to_dict() for iid, e in self.items.items()},
            "synced": self.synced,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StockRecord:
        items = data.get("items") or {}
        if not isinstance(items, Mapping):
            raise ValueError("items must be a mapping")
        return cls(
            items={str(iid): StockEntry.from_dict(e) for iid, e in items.items()},
            synced=bool(data.get("synced", False)),
        )
