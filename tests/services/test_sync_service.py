"""
Tests for the background sync mirror (``ledger_services.sync_service``).

Invariants tested:
- ``synced`` becomes True only after a SUCCEEDED result.
- FAILED and TIMED_OUT results leave ``synced`` untouched and are
  reported, never swallowed.
- A timed-out call that finishes later does not set ``synced``.
"""

import json
import threading

import pytest

from ledger_kernel.domain.records import StockField
from ledger_kernel.domain.session import ViewMode
from ledger_kernel.exceptions import SyncFailedError, SyncTimeoutError
from ledger_services.sync_service import JsonFileMirror, SyncService, SyncStatus
from tests.conftest import TODAY


class RecordingMirror:
    def __init__(self):
        self.pushed: dict[str, dict] = {}

    def push(self, record_key, payload):
        self.pushed[record_key] = payload


class FailingMirror:
    def __init__(self, error=None):
        self.error = error or ConnectionError("network unreachable")

    def push(self, record_key, payload):
        raise self.error


class BlockingMirror:
    def __init__(self):
        self.release = threading.Event()
        self.finished = threading.Event()

    def push(self, record_key, payload):
        self.release.wait(timeout=5)
        self.finished.set()


@pytest.fixture
def make_sync(engine):
    services = []

    def _make(mirror, timeout=2.0):
        service = SyncService(engine, mirror, timeout=timeout)
        services.append(service)
        return service

    yield _make

    for service in services:
        service.shutdown(wait=True)


class TestSyncOutcomes:
    def test_success_sets_synced(self, make_sync, engine, store, captured_logs):
        mirror = RecordingMirror()
        engine.set_quantity("itemA", "small", 2)

        result = make_sync(mirror).submit().wait()

        assert result.ok
        assert result.record_key == f"day:{TODAY}"
        assert mirror.pushed[f"day:{TODAY}"]["quantities"]["itemA"]["small"] == 2
        assert store.get_day(TODAY).synced is True
        assert any(r["message"] == "sync_succeeded" for r in captured_logs())

    def test_failure_is_reported(self, make_sync, engine, store, captured_logs):
        engine.set_notes("x")
        result = make_sync(FailingMirror()).submit().wait()

        assert result.status is SyncStatus.FAILED
        assert "network unreachable" in result.error
        assert store.get_day(TODAY).synced is False
        failed = [r for r in captured_logs() if r["message"] == "sync_failed"]
        assert failed[0]["status"] == "failed"

    def test_timeout_raised_by_mirror_is_a_failure(self, make_sync, engine, store):
        engine.set_notes("x")
        service = make_sync(FailingMirror(TimeoutError("read timed out")), timeout=5.0)

        result = service.submit().wait()

        assert result.status is SyncStatus.FAILED
        assert result.error == "TimeoutError: read timed out"
        assert store.get_day(TODAY).synced is False
        with pytest.raises(SyncFailedError):
            service.sync_now()

    def test_timeout_is_reported_and_late_success_ignored(self, make_sync, engine, store):
        mirror = BlockingMirror()
        engine.set_notes("x")
        service = make_sync(mirror, timeout=0.05)

        result = service.submit().wait()
        assert result.status is SyncStatus.TIMED_OUT

        mirror.release.set()
        assert mirror.finished.wait(timeout=5)
        assert store.get_day(TODAY).synced is False

    def test_wait_is_cached(self, make_sync):
        task = make_sync(RecordingMirror()).submit()
        assert task.wait() is task.wait()

    def test_stock_view_syncs_month(self, make_sync, engine, session, store):
        mirror = RecordingMirror()
        engine.set_stock_entry("s-milk", StockField.QUANTITY, "3")
        session.view_mode = ViewMode.STOCK

        result = make_sync(mirror).submit().wait()

        assert result.record_key == "month:2024-03"
        assert store.get_month("2024-03").synced is True

    def test_edit_during_sync_stays_unsynced(self, make_sync, engine, store):
        gate = threading.Event()
        recording = RecordingMirror()

        class SlowMirror:
            def push(self, record_key, payload):
                gate.wait(timeout=5)
                recording.push(record_key, payload)

        engine.set_notes("before")
        task = make_sync(SlowMirror()).submit()
        engine.set_notes("after")
        gate.set()

        assert task.wait().ok
        assert recording.pushed[f"day:{TODAY}"]["notes"] == "before"
        assert store.get_day(TODAY).synced is False


class TestSyncNow:
    def test_raises_on_failure(self, make_sync):
        with pytest.raises(SyncFailedError) as exc_info:
            make_sync(FailingMirror()).sync_now()
        assert exc_info.value.code == "SYNC_FAILED"

    def test_raises_on_timeout(self, make_sync):
        mirror = BlockingMirror()
        service = make_sync(mirror, timeout=0.05)
        try:
            with pytest.raises(SyncTimeoutError) as exc_info:
                service.sync_now()
            assert exc_info.value.timeout == 0.05
        finally:
            mirror.release.set()

    def test_rejects_non_positive_timeout(self, engine):
        with pytest.raises(ValueError):
            SyncService(engine, RecordingMirror(), timeout=0)


class TestJsonFileMirror:
    def test_push_merges_records(self, tmp_path):
        mirror = JsonFileMirror(tmp_path / "cloud" / "sync.json")
        mirror.push("day:2024-03-14", {"notes": "a"})
        mirror.push("day:2024-03-15", {"notes": "ব"})

        data = json.loads((tmp_path / "cloud" / "sync.json").read_text(encoding="utf-8"))
        assert data == {"day:2024-03-14": {"notes": "a"}, "day:2024-03-15": {"notes": "ব"}}
        assert list(tmp_path.joinpath("cloud").glob("*.tmp")) == []

    def test_end_to_end(self, make_sync, engine, store, tmp_path):
        mirror = JsonFileMirror(tmp_path / "sync.json")
        engine.set_notes("mirrored")
        assert make_sync(mirror).sync_now().ok
        assert mirror.read_all()[f"day:{TODAY}"]["notes"] == "mirrored"
