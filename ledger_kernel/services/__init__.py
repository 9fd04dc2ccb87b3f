"""
Kernel services -- the imperative shell around the pure domain.

    LedgerStore          in-memory ledger + catalog + settings, written through
    DayTransitionEngine  day state machine, guarded edits, lock-and-forward
    AccessGate           PIN unlock of the active date
    PinChangeFlow        two-step PIN change
    CatalogService       product / stock item management
"""

from ledger_kernel.services.access_gate import AccessGate, PinChangeFlow
from ledger_kernel.services.catalog_service import CatalogService
from ledger_kernel.services.day_transition import (
    DayTransitionEngine,
    ForwardPolicy,
    ForwardResult,
    ForwardSkipReason,
)
from ledger_kernel.services.kv_store import KeyValueStore
from ledger_kernel.services.ledger_store import LedgerStore

__all__ = [
    "AccessGate",
    "CatalogService",
    "DayTransitionEngine",
    "ForwardPolicy",
    "ForwardResult",
    "ForwardSkipReason",
    "KeyValueStore",
    "LedgerStore",
    "PinChangeFlow",
]
