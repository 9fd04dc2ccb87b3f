"""
ledger_services.sync_service -- mirror a day or month record to an external store.

Responsibility:
    Runs the mirror call on a background worker with a bounded timeout and
    reports the outcome through an explicit result: SUCCEEDED, FAILED or
    TIMED_OUT.  The ``synced`` flag is set only after a SUCCEEDED result,
    and only on the caller's thread.

Architecture position:
    Services -- orchestration over the kernel.  Talks to the external store
    through the ``RecordMirror`` protocol; ``JsonFileMirror`` is the default
    (a JSON file in a synced cloud-drive folder).

Invariants enforced:
    - One worker thread: mirror calls never run concurrently.
    - A failed or timed-out call leaves ``synced`` untouched.
    - A call that times out is not cancelled; if it later completes, the
      record stays unsynced until the next successful sync.
    - A record edited while its sync was in flight stays unsynced.

Failure modes:
    - ``sync_now`` raises SyncFailedError / SyncTimeoutError.
    - ``SyncTask.wait`` never raises for mirror failures; it returns the
      result instead.
"""

from __future__ import annotations

import json
import os
import tempfile
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for_futures
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from ledger_kernel.domain.session import ViewMode
from ledger_kernel.exceptions import SyncFailedError, SyncTimeoutError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.services.day_transition import DayTransitionEngine

logger = get_logger("services.sync")

DEFAULT_SYNC_TIMEOUT = 10.0


class RecordMirror(Protocol):
    """External backing store for day and month records."""

    def push(self, record_key: str, payload: dict[str, Any]) -> None: ...


class JsonFileMirror:
    """
    Mirror into a single JSON document keyed by record key.

    Writes go to a temporary file that replaces the target, so a reader
    never sees a half-written document.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def push(self, record_key: str, payload: dict[str, Any]) -> None:
        history = self.read_all()
        history[record_key] = payload
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(history, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise


class SyncStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class SyncResult:
    record_key: str
    status: SyncStatus
    elapsed_seconds: float
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SyncStatus.SUCCEEDED


class SyncTask:
    """Handle to one in-flight mirror call."""

    def __init__(
        self,
        record_key: str,
        future: Future,
        timeout: float,
        on_success,
    ):
        self.record_key = record_key
        self._future = future
        self._timeout = timeout
        self._on_success = on_success
        self._started = time.monotonic()
        self._result: SyncResult | None = None

    def done(self) -> bool:
        return self._future.done()

    def wait(self) -> SyncResult:
        """Block until the call finishes or the remaining timeout elapses."""
        if self._result is not None:
            return self._result

        remaining = max(self._timeout - (time.monotonic() - self._started), 0.0)
        done, _ = wait_for_futures([self._future], timeout=remaining)
        if self._future not in done:
            self._result = self._finish(SyncStatus.TIMED_OUT, f"timed out after {self._timeout}s")
            return self._result

        # Errors raised by the mirror itself, TimeoutError included, are failures.
        if self._future.cancelled():
            self._result = self._finish(SyncStatus.FAILED, "cancelled")
        elif self._future.exception() is not None:
            exc = self._future.exception()
            self._result = self._finish(SyncStatus.FAILED, f"{type(exc).__name__}: {exc}")
        else:
            self._on_success(self.record_key)
            self._result = self._finish(SyncStatus.SUCCEEDED)
        return self._result

    def _finish(self, status: SyncStatus, error: str | None = None) -> SyncResult:
        elapsed = time.monotonic() - self._started
        result = SyncResult(self.record_key, status, elapsed, error)
        if result.ok:
            logger.info(
                "sync_succeeded",
                extra={"record_key": self.record_key, "elapsed_seconds": elapsed},
            )
        else:
            logger.warning(
                "sync_failed",
                extra={
                    "record_key": self.record_key,
                    "status": status.value,
                    "error": error,
                },
            )
        return result


class SyncService:
    """
    Background mirror of the active day or month.

    Contract:
        ``submit_*`` snapshots the record on the caller's thread and hands
        the copy to the worker.  ``SyncTask.wait`` applies the ``synced``
        flag through the day transition engine.
    """

    def __init__(
        self,
        engine: DayTransitionEngine,
        mirror: RecordMirror,
        timeout: float = DEFAULT_SYNC_TIMEOUT,
        executor: ThreadPoolExecutor | None = None,
    ):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive (got {timeout})")
        self._engine = engine
        self._mirror = mirror
        self.timeout = timeout
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="ledger-sync"
        )

    def submit_day(self, key: str | None = None) -> SyncTask:
        key = key or self._engine.session.active_date
        record = self._engine.store.get_day(key)

        def on_success(record_key: str) -> None:
            if self._engine.store.get_day(key) == record:
                self._engine.mark_day_synced(key)
            else:
                logger.info("sync_record_changed_since_submit", extra={"record_key": record_key})

        return self._submit(f"day:{key}", record.to_dict(), on_success)

    def submit_month(self, key: str | None = None) -> SyncTask:
        key = key or self._engine.session.active_month
        record = self._engine.store.get_month(key)

        def on_success(record_key: str) -> None:
            if self._engine.store.get_month(key) == record:
                self._engine.mark_month_synced(key)
            else:
                logger.info("sync_record_changed_since_submit", extra={"record_key": record_key})

        return self._submit(f"month:{key}", record.to_dict(), on_success)

    def submit(self) -> SyncTask:
        """Sync whatever the session is looking at (day or month)."""
        if self._engine.session.view_mode is ViewMode.STOCK:
            return self.submit_month()
        return self.submit_day()

    def sync_now(self, task: SyncTask | None = None) -> SyncResult:
        """
        Wait for ``task`` (default: a fresh sync of the active record).

        Raises:
            SyncTimeoutError: The call did not finish in time.
            SyncFailedError: The mirror raised.
        """
        result = (task or self.submit()).wait()
        if result.status is SyncStatus.TIMED_OUT:
            raise SyncTimeoutError(result.record_key, self.timeout)
        if result.status is SyncStatus.FAILED:
            raise SyncFailedError(result.record_key, result.error or "unknown error")
        return result

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _submit(self, record_key: str, payload: dict[str, Any], on_success) -> SyncTask:
        logger.debug("sync_submitted", extra={"record_key": record_key})
        future = self._executor.submit(self._mirror.push, record_key, payload)
        return SyncTask(record_key, future, self.timeout, on_success)
