"""Tests for the composition root (``ledger_services.app``)."""

from decimal import Decimal

import pytest

from ledger_config.schema import LedgerSettings, SeedCatalog
from ledger_kernel.db.engine import reset_engine
from ledger_kernel.domain.catalog import Product
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.services.day_transition import ForwardPolicy
from ledger_services.app import build_app
from ledger_services.share import MemoryClipboard


class _Mirror:
    def __init__(self):
        self.pushed = {}

    def push(self, record_key, payload):
        self.pushed[record_key] = payload


@pytest.fixture
def app_factory(tmp_path):
    apps = []

    def _build(**settings_kwargs):
        settings_kwargs.setdefault("database_url", f"sqlite:///{tmp_path / 'ledger.db'}")
        app = build_app(
            LedgerSettings(**settings_kwargs),
            clock=DeterministicClock.on("2024-03-15"),
            mirror=_Mirror(),
            clipboard=MemoryClipboard(),
        )
        apps.append(app)
        return app

    yield _build

    for app in apps:
        app.shutdown()
    reset_engine()


class TestBuildApp:
    def test_wires_collaborators(self, app_factory):
        app = app_factory(forward_policy=ForwardPolicy.ALWAYS)

        assert app.session.active_date == "2024-03-15"
        assert app.engine.forward_policy is ForwardPolicy.ALWAYS
        assert app.gate.session is app.session
        assert app.close_day.engine is app.engine

    def test_seed_catalog_and_pin(self, app_factory):
        seed = SeedCatalog(
            products=(Product("lychee", "Lychee", "লিচু", Decimal("110"), Decimal("160")),),
            stock_items=(),
        )
        app = app_factory(seed_catalog=seed, default_pin="2580")

        assert [p.id for p in app.store.products] == ["lychee"]
        assert app.gate.verify("2580")

    def test_state_survives_restart(self, app_factory):
        first = app_factory()
        first.engine.set_quantity("mango", "small", 3)
        first.close_day.close()
        first.shutdown()

        second = app_factory()
        assert second.store.get_day("2024-03-15").locked is True
        assert second.store.get_day("2024-03-16").previous_balance == Decimal("300")
