"""
Pure domain layer.

This module contains immutable ledger values and the totals calculator
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Wall-clock time (use an injected Clock)
- I/O
"""

from ledger_kernel.domain.catalog import Product, StockItem
from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.records import (
    CupSize,
    DayRecord,
    DetailEntry,
    DetailKind,
    SizeQuantity,
    StockEntry,
    StockField,
    StockRecord,
)
from ledger_kernel.domain.session import DayState, Language, SessionContext, ViewMode
from ledger_kernel.domain.totals import (
    DayTotals,
    SalesLedger,
    StockLedger,
    StockTotals,
    compute_day_totals,
    compute_stock_totals,
)

__all__ = [
    "Clock",
    "CupSize",
    "DayRecord",
    "DayState",
    "DayTotals",
    "DetailEntry",
    "DetailKind",
    "DeterministicClock",
    "Language",
    "Product",
    "SalesLedger",
    "SessionContext",
    "SizeQuantity",
    "StockEntry",
    "StockField",
    "StockItem",
    "StockLedger",
    "StockRecord",
    "StockTotals",
    "SystemClock",
    "ViewMode",
    "compute_day_totals",
    "compute_stock_totals",
]
