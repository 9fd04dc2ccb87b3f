"""
Outer services over the ledger kernel.

    sync_service   background mirror of a day or month record
    snapshot       full-state JSON export / import
    summary        EN/BN text reports
    share          share target with clipboard fallback
    close_day      sync, lock-and-forward, summarise, share
    app            composition root (import ``ledger_services.app`` directly)
"""

from ledger_services.close_day import CloseDayOrchestrator, CloseDayResult, close_day
from ledger_services.share import MemoryClipboard, ShareChannel, share_text
from ledger_services.snapshot import export_snapshot, import_snapshot, parse_snapshot
from ledger_services.summary import day_summary, ledger_summary, stock_summary
from ledger_services.sync_service import (
    JsonFileMirror,
    SyncResult,
    SyncService,
    SyncStatus,
    SyncTask,
)

__all__ = [
    "CloseDayOrchestrator",
    "CloseDayResult",
    "JsonFileMirror",
    "MemoryClipboard",
    "ShareChannel",
    "SyncResult",
    "SyncService",
    "SyncStatus",
    "SyncTask",
    "close_day",
    "day_summary",
    "export_snapshot",
    "import_snapshot",
    "ledger_summary",
    "parse_snapshot",
    "share_text",
    "stock_summary",
]
