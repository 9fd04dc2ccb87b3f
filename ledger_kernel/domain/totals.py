"""
Totals -- pure derivation of sales, cash and stock figures.

Responsibility:
    Computes everything a ledger screen or report shows from a record plus
    the current catalog:

        line_total    = small * price_small + large * price_large
        sales_total   = sum(line_total)
        cash_in_hand  = sales_total - purchase_total - expense_total
        total_balance = cash_in_hand + previous_balance

    and for stock:

        line_total        = quantity * unit_price
        stock_grand_total = sum(line_total)

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Deterministic and idempotent: the same record and catalog always
      yield equal totals. Nothing is cached on the record.
    - Ids missing from a record count as zero. Ids in a record but not in
      the catalog (deleted products) contribute nothing.
    - A negative ``cash_in_hand`` is a valid figure, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Protocol, Sequence

from ledger_kernel.domain.catalog import Product, StockItem
from ledger_kernel.domain.records import DayRecord, StockRecord
from ledger_kernel.domain.values import ZERO


@dataclass(frozen=True, slots=True)
class ProductLine:
    product: Product
    small: int
    large: int
    line_total: Decimal

    @property
    def has_sales(self) -> bool:
        return self.small > 0 or self.large > 0


@dataclass(frozen=True, slots=True)
class DayTotals:
    lines: tuple[ProductLine, ...]
    sales_total: Decimal
    purchase_total: Decimal
    expense_total: Decimal
    cash_in_hand: Decimal
    previous_balance: Decimal
    total_balance: Decimal

    @property
    def grand_total(self) -> Decimal:
        return self.sales_total


@dataclass(frozen=True, slots=True)
class StockLine:
    item: StockItem
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True, slots=True)
class StockTotals:
    lines: tuple[StockLine, ...]
    grand_total: Decimal


def line_total(record: DayRecord, product: Product) -> Decimal:
    q = record.quantity_for(product.id)
    return q.small * product.price_small + q.large * product.price_large


def sales_total(record: DayRecord, products: Sequence[Product]) -> Decimal:
    return sum((line_total(record, p) for p in products), ZERO)


def cash_in_hand(record: DayRecord, products: Sequence[Product]) -> Decimal:
    return sales_total(record, products) - record.purchase_total - record.expense_total


def total_balance(record: DayRecord, products: Sequence[Product]) -> Decimal:
    return cash_in_hand(record, products) + record.previous_balance


def compute_day_totals(record: DayRecord, products: Sequence[Product]) -> DayTotals:
    """Full breakdown of a day, one line per catalog product."""
    lines = []
    for product in products:
        q = record.quantity_for(product.id)
        lines.append(
            ProductLine(
                product=product,
                small=q.small,
                large=q.large,
                line_total=line_total(record, product),
            )
        )
    sales = sum((line.line_total for line in lines), ZERO)
    cash = sales - record.purchase_total - record.expense_total
    return DayTotals(
        lines=tuple(lines),
        sales_total=sales,
        purchase_total=record.purchase_total,
        expense_total=record.expense_total,
        cash_in_hand=cash,
        previous_balance=record.previous_balance,
        total_balance=cash + record.previous_balance,
    )


def compute_stock_totals(record: StockRecord, items: Sequence[StockItem]) -> StockTotals:
    """Valuation of a month's stock, one line per catalog stock item."""
    lines = []
    for item in items:
        entry = record.entry_for(item.id)
        lines.append(
            StockLine(
                item=item,
                quantity=entry.quantity,
                unit_price=entry.unit_price,
                line_total=entry.quantity * entry.unit_price,
            )
        )
    return StockTotals(
        lines=tuple(lines),
        grand_total=sum((line.line_total for line in lines), ZERO),
    )


# ---------------------------------------------------------------------------
# Ledger views
# ---------------------------------------------------------------------------


class Ledger(Protocol):
    """What the sales and stock views have in common."""

    kind: str
    key: str

    def totals(self) -> DayTotals | StockTotals: ...


@dataclass(frozen=True, slots=True)
class SalesLedger:
    """A day record read against the product catalog."""

    key: str
    record: DayRecord
    products: tuple[Product, ...]
    kind: Literal["sales"] = "sales"

    def totals(self) -> DayTotals:
        return compute_day_totals(self.record, self.products)


@dataclass(frozen=True, slots=True)
class StockLedger:
    """A month record read against the stock catalog."""

    key: str
    record: StockRecord
    items: tuple[StockItem, ...]
    kind: Literal["stock"] = "stock"

    def totals(self) -> StockTotals:
        return compute_stock_totals(self.record, self.items)
