"""
Pytest fixtures for the smoothie ledger test suite.

Provides:
- An in-memory SQLite database per test (StaticPool, tables created fresh)
- A DeterministicClock pinned to a known "today"
- A loaded LedgerStore with a small two-product catalog
- Session, day transition engine, access gate and catalog service fixtures
- Structured log capture
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from ledger_kernel.db.engine import (
    create_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.catalog import Product, StockItem
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.session import SessionContext
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ledger_kernel.services.access_gate import AccessGate, PinChangeFlow
from ledger_kernel.services.catalog_service import CatalogService
from ledger_kernel.services.day_transition import DayTransitionEngine, ForwardPolicy
from ledger_kernel.services.kv_store import KeyValueStore
from ledger_kernel.services.ledger_store import LedgerStore

# "Today" for every test that does not build its own clock.
TODAY = "2024-03-15"
YESTERDAY = "2024-03-14"
TOMORROW = "2024-03-16"

TEST_PRODUCTS = (
    Product("itemA", "Mango", "আম", Decimal("100"), Decimal("150"), "🥭"),
    Product("itemB", "Banana", "কলা", Decimal("80"), Decimal("120"), "🍌"),
)
TEST_STOCK_ITEMS = (
    StockItem("s-milk", "Milk", "দুধ"),
    StockItem("s-cups", "Cups", "কাপ"),
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, engine):
            engine.lock_and_forward()
            logs = captured_logs()
            assert any(r["message"] == "day_locked" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database with all tables."""
    engine = init_engine_from_url("sqlite://")
    create_tables()
    yield engine
    reset_engine()


@pytest.fixture
def kv(db_engine) -> KeyValueStore:
    return KeyValueStore(get_session_factory())


# =============================================================================
# Ledger fixtures
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock.on(TODAY)


@pytest.fixture
def store(kv) -> LedgerStore:
    return LedgerStore(
        kv,
        seed_products=TEST_PRODUCTS,
        seed_stock_items=TEST_STOCK_ITEMS,
    ).load()


@pytest.fixture
def reload_store(kv):
    """Build a second store over the same database, as a restart would."""

    def _reload() -> LedgerStore:
        return LedgerStore(
            kv,
            seed_products=TEST_PRODUCTS,
            seed_stock_items=TEST_STOCK_ITEMS,
        ).load()

    return _reload


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(TODAY)


@pytest.fixture
def engine(store, session, clock) -> DayTransitionEngine:
    return DayTransitionEngine(store, session, clock, ForwardPolicy.ONCE)


@pytest.fixture
def gate(store, session) -> AccessGate:
    return AccessGate(store, session)


@pytest.fixture
def pin_flow(store) -> PinChangeFlow:
    return PinChangeFlow(store)


@pytest.fixture
def catalog(store) -> CatalogService:
    return CatalogService(store)
