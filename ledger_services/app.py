"""
ledger_services.app -- wire settings, persistence and services together.

``build_app(settings)`` is the composition root used by a front end: it
configures logging, opens the database, loads the ledger and returns the
collaborators sharing one ``SessionContext``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ledger_config.schema import LedgerSettings
from ledger_kernel.db.engine import create_tables, get_session_factory, init_engine_from_url
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.session import SessionContext
from ledger_kernel.domain.values import day_key
from ledger_kernel.logging_config import configure_logging, get_logger
from ledger_kernel.services.access_gate import AccessGate, PinChangeFlow
from ledger_kernel.services.catalog_service import CatalogService
from ledger_kernel.services.day_transition import DayTransitionEngine
from ledger_kernel.services.kv_store import KeyValueStore
from ledger_kernel.services.ledger_store import LedgerStore
from ledger_services.close_day import CloseDayOrchestrator
from ledger_services.share import Clipboard, MemoryClipboard, ShareTarget
from ledger_services.sync_service import JsonFileMirror, RecordMirror, SyncService

logger = get_logger("services.app")


@dataclass
class LedgerApp:
    settings: LedgerSettings
    store: LedgerStore
    session: SessionContext
    engine: DayTransitionEngine
    gate: AccessGate
    pin_change: PinChangeFlow
    catalog: CatalogService
    sync: SyncService
    close_day: CloseDayOrchestrator

    def shutdown(self) -> None:
        self.sync.shutdown(wait=False)


def build_app(
    settings: LedgerSettings | None = None,
    *,
    clock: Clock | None = None,
    mirror: RecordMirror | None = None,
    clipboard: Clipboard | None = None,
    share_target: ShareTarget | None = None,
) -> LedgerApp:
    settings = settings or LedgerSettings()
    clock = clock or SystemClock()
    configure_logging(level=settings.log_level)

    init_engine_from_url(settings.database_url)
    create_tables()

    seed_kwargs = {}
    if settings.seed_catalog is not None:
        seed_kwargs = {
            "seed_products": settings.seed_catalog.products,
            "seed_stock_items": settings.seed_catalog.stock_items,
        }
    store = LedgerStore(
        KeyValueStore(get_session_factory()),
        default_pin=settings.default_pin,
        **seed_kwargs,
    ).load()

    session = SessionContext(
        day_key(clock.today()),
        view_mode=store.view_mode,
        language=store.language,
    )
    engine = DayTransitionEngine(store, session, clock, settings.forward_policy)
    sync = SyncService(
        engine,
        mirror or JsonFileMirror(Path(settings.sync_mirror_path)),
        timeout=settings.sync_timeout_seconds,
    )
    app = LedgerApp(
        settings=settings,
        store=store,
        session=session,
        engine=engine,
        gate=AccessGate(store, session),
        pin_change=PinChangeFlow(store),
        catalog=CatalogService(store),
        sync=sync,
        close_day=CloseDayOrchestrator(
            engine, clipboard or MemoryClipboard(), sync, share_target
        ),
    )
    logger.info(
        "app_started",
        extra={"active_date": session.active_date, "forward_policy": settings.forward_policy.value},
    )
    return app
