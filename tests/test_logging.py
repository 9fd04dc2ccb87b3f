"""Tests for the structured logging system (ledger_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from ledger_kernel.domain.session import SessionContext, ViewMode
from ledger_kernel.exceptions import InvalidDateKeyError, SyncTimeoutError
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from ledger_kernel.services.day_transition import DayTransitionEngine
from tests.conftest import TODAY, TOMORROW


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def log_stream() -> StringIO:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    configure_logging(handler=handler, level=logging.DEBUG)
    return stream


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


def _parse_log(stream: StringIO) -> dict:
    return _parse_all_logs(stream)[0]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    def test_basic_json_output(self, log_stream):
        get_logger("test").info("hello")

        record = _parse_log(log_stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "ledger_kernel.test"
        assert "ts" in record

    def test_money_written_as_ledger_strings(self, log_stream):
        get_logger("test").info(
            "balance_forwarded",
            extra={
                "total_balance": Decimal("3.5E+2"),
                "cash_in_hand": Decimal("280.50"),
                "day": date(2024, 3, 15),
                "view": ViewMode.STOCK,
            },
        )

        record = _parse_log(log_stream)
        assert record["total_balance"] == "350"
        assert record["cash_in_hand"] == "280.5"
        assert record["day"] == "2024-03-15"
        assert record["view"] == "stock"

    def test_bengali_text_kept_readable(self, log_stream):
        get_logger("test").info("note_saved", extra={"notes": "বিদ্যুৎ নেই"})
        assert "বিদ্যুৎ নেই" in log_stream.getvalue()
        assert _parse_log(log_stream)["notes"] == "বিদ্যুৎ নেই"

    def test_ledger_exception_code_extracted(self, log_stream):
        try:
            raise InvalidDateKeyError("2024-W11-5")
        except InvalidDateKeyError:
            get_logger("test").error("navigation_failed", exc_info=True)

        record = _parse_log(log_stream)
        assert record["exc_code"] == "INVALID_DATE_KEY"
        assert record["exc_type"] == "InvalidDateKeyError"
        assert record["exc_key"] == "2024-W11-5"
        assert record["exc_expected"] == "YYYY-MM-DD"
        assert "traceback" in record

    def test_sync_timeout_fields(self, log_stream):
        try:
            raise SyncTimeoutError("day:2024-03-15", 10.0)
        except SyncTimeoutError:
            get_logger("test").warning("sync_failed", exc_info=True)

        record = _parse_log(log_stream)
        assert record["exc_code"] == "SYNC_TIMEOUT"
        assert record["exc_record_key"] == "day:2024-03-15"
        assert record["exc_timeout"] == 10.0

    def test_no_context_fields_when_empty(self, log_stream):
        get_logger("test").info("bare_message")

        record = _parse_log(log_stream)
        assert "active_date" not in record
        assert "view_mode" not in record
        assert "operation" not in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_normalizes_ledger_types(self):
        LogContext.set(active_date=date(2024, 3, 15), view_mode=ViewMode.SALES, operation="close_day")
        assert LogContext.get_all() == {
            "active_date": "2024-03-15",
            "view_mode": "sales",
            "operation": "close_day",
        }

    def test_bind_nests_and_restores(self):
        LogContext.set(operation="close_day")
        with LogContext.bind(operation="lock_and_forward", active_date="2024-03-15"):
            assert LogContext.get_all()["operation"] == "lock_and_forward"
        assert LogContext.get_all() == {"operation": "close_day"}

    def test_bind_ignores_unknown_fields(self):
        with LogContext.bind(active_date="2024-03-15", colour="red"):
            assert LogContext.get_all() == {"active_date": "2024-03-15"}

    def test_bind_session(self):
        session = SessionContext("2024-03-01", view_mode=ViewMode.STOCK)
        with LogContext.bind_session(session, operation="sync"):
            assert LogContext.get_all() == {
                "active_date": "2024-03-01",
                "view_mode": "stock",
                "operation": "sync",
            }
        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# Ledger events
# ---------------------------------------------------------------------------


class TestLedgerEvents:
    def test_lock_and_forward_lines(self, log_stream, store, session, clock):
        engine = DayTransitionEngine(store, session, clock)
        engine.set_quantity("itemA", "small", 2)
        engine.set_quantity("itemA", "large", 1)
        engine.set_previous_balance("0.50")

        with LogContext.bind_session(session, operation="close_day"):
            engine.lock_and_forward()

        by_message = {r["message"]: r for r in _parse_all_logs(log_stream)}
        forwarded = by_message["balance_forwarded"]
        assert forwarded["operation"] == "lock_and_forward"
        assert forwarded["active_date"] == TODAY
        assert forwarded["view_mode"] == "sales"
        assert forwarded["next_date"] == TOMORROW
        assert forwarded["total_balance"] == "350.5"
        assert by_message["day_locked"]["was_locked"] is False

    def test_language_switch_logged(self, log_stream, store, session, clock):
        DayTransitionEngine(store, session, clock).set_language("BN")
        record = [r for r in _parse_all_logs(log_stream) if r["message"] == "language_changed"][0]
        assert record["to_language"] == "BN"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_idempotent(self):
        h1 = logging.StreamHandler(StringIO())
        configure_logging(handler=h1)
        h2 = logging.StreamHandler(StringIO())
        configure_logging(handler=h2)  # second call is no-op
        root = logging.getLogger("ledger_kernel")
        # other handlers (pytest's capture) may be attached too
        assert h1 in root.handlers
        assert h2 not in root.handlers
        assert isinstance(h1.formatter, StructuredFormatter)

    def test_default_level_drops_debug(self):
        stream = StringIO()
        configure_logging(stream=stream)
        logger = get_logger("services.day_transition")
        logger.debug("active_date_changed")
        logger.info("day_rolled_over")

        assert [r["message"] for r in _parse_all_logs(stream)] == ["day_rolled_over"]
        assert logger.name == "ledger_kernel.services.day_transition"
