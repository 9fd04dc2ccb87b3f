"""
DayTransitionEngine -- day editability, guarded edits and day close.

Responsibility:
    Decides whether the active day may be edited, applies edits to the
    active day (or its month's stock record) only when it may, and performs
    the close action that locks a day and carries its closing balance into
    the next day.

Architecture position:
    Kernel > Services -- imperative shell over the pure totals calculator.
    The only writer allowed to set ``locked``/``forwarded`` or to write the
    next day's ``previous_balance`` through the forward step.

State of a date D against today T (from the injected clock):

    OPEN_CURRENT   D >= T and not locked            editable
    OPEN_OVERRIDE  (D < T or locked) and override    editable
    LOCKED         (D < T or locked), no override    read-only

    Future dates are not historical; only D < T counts.

Invariants enforced:
    - Every mutation entry point re-checks the state at the write boundary.
      A LOCKED day is left untouched and the call returns False without
      raising.
    - ``navigate`` always clears the unlock override.
    - ``lock_and_forward`` writes only ``previous_balance`` on the next day
      and never touches its quantities, totals, details or notes.
    - With ``ForwardPolicy.ONCE`` a date forwards its balance at most once;
      closing it again only re-locks it.

Failure modes:
    - InvalidDateKeyError for malformed date keys.
    - Persistence errors from the store propagate.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.records import (
    CupSize,
    DayRecord,
    DetailEntry,
    DetailKind,
    StockField,
)
from ledger_kernel.domain.session import DayState, Language, SessionContext, ViewMode
from ledger_kernel.domain.totals import (
    DayTotals,
    SalesLedger,
    StockLedger,
    StockTotals,
    compute_day_totals,
)
from ledger_kernel.domain.values import (
    coerce_decimal,
    coerce_quantity,
    day_key,
    next_day_key,
    parse_day_key,
    previous_day_key,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.day_transition")


class ForwardPolicy(str, Enum):
    """What closing an already-forwarded day does to the next day."""

    ONCE = "once"
    ALWAYS = "always"


class ForwardSkipReason(str, Enum):
    ALREADY_FORWARDED = "already_forwarded"
    NEXT_DAY_LOCKED = "next_day_locked"


@dataclass(frozen=True, slots=True)
class ForwardResult:
    """Outcome of closing one day."""

    date: str
    next_date: str
    total_balance: Decimal
    forwarded: bool
    skip_reason: ForwardSkipReason | None = None


class DayTransitionEngine(BaseService):
    """
    State machine for the active day of a ``SessionContext``.

    Contract:
        All edits target ``session.active_date`` (stock edits target its
        month).  Edit methods return True when the edit was applied and
        False when the day was read-only.
    """

    def __init__(
        self,
        store: LedgerStore,
        session: SessionContext,
        clock: Clock | None = None,
        forward_policy: ForwardPolicy = ForwardPolicy.ONCE,
    ):
        super().__init__(store)
        self.session = session
        self._clock = clock or SystemClock()
        self.forward_policy = forward_policy

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def today_key(self) -> str:
        return day_key(self._clock.today())

    def is_historical(self, key: str) -> bool:
        return parse_day_key(key) < self._clock.today()

    def state(self, key: str | None = None) -> DayState:
        """
        State of ``key`` (default: the active date).

        The override only ever applies to the active date.
        """
        key = key or self.session.active_date
        record = self.store.get_day(key)
        if not self.is_historical(key) and not record.locked:
            return DayState.OPEN_CURRENT
        if self.session.unlock_override and key == self.session.active_date:
            return DayState.OPEN_OVERRIDE
        return DayState.LOCKED

    def is_editable(self) -> bool:
        return self.state().editable

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, key: str) -> DayState:
        """Make ``key`` the active date. Any unlock override is dropped."""
        previous = self.session.active_date
        had_override = self.session.unlock_override
        self.session.active_date = key
        logger.debug(
            "active_date_changed",
            extra={
                "from_date": previous,
                "to_date": key,
                "override_cleared": had_override,
            },
        )
        return self.state()

    def next_day(self) -> DayState:
        return self.navigate(next_day_key(self.session.active_date))

    def previous_day(self) -> DayState:
        return self.navigate(previous_day_key(self.session.active_date))

    def go_to_today(self) -> DayState:
        return self.navigate(self.today_key())

    def roll_over_if_new_day(self, last_seen_today: str) -> bool:
        """
        Follow midnight for an app left open on "today".

        If the active date is ``last_seen_today`` and the clock has since
        moved on, navigate to the new today.  Returns True if it moved.
        """
        today = self.today_key()
        if today == last_seen_today or self.session.active_date != last_seen_today:
            return False
        self.navigate(today)
        logger.info(
            "day_rolled_over",
            extra={"from_date": last_seen_today, "to_date": today},
        )
        return True

    def set_view_mode(self, view_mode: ViewMode | str) -> None:
        """Switch sales/stock view for this session and persist the choice."""
        view_mode = ViewMode(view_mode)
        self.session.view_mode = view_mode
        self.store.set_view_mode(view_mode)
        logger.debug("view_mode_changed", extra={"to_view_mode": view_mode.value})

    def set_language(self, language: Language | str) -> None:
        """Switch display language for this session and persist the choice."""
        language = Language(language)
        self.session.language = language
        self.store.set_language(language)
        logger.debug("language_changed", extra={"to_language": language.value})

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def sales_ledger(self, key: str | None = None) -> SalesLedger:
        key = key or self.session.active_date
        return SalesLedger(key=key, record=self.store.get_day(key), products=self.store.products)

    def stock_ledger(self, key: str | None = None) -> StockLedger:
        key = key or self.session.active_month
        return StockLedger(key=key, record=self.store.get_month(key), items=self.store.stock_items)

    def ledger(self) -> SalesLedger | StockLedger:
        """The view matching the session's view mode."""
        if self.session.view_mode is ViewMode.STOCK:
            return self.stock_ledger()
        return self.sales_ledger()

    def day_totals(self, key: str | None = None) -> DayTotals:
        return self.sales_ledger(key).totals()

    def stock_totals(self, key: str | None = None) -> StockTotals:
        return self.stock_ledger(key).totals()

    # ------------------------------------------------------------------
    # Guarded edits
    # ------------------------------------------------------------------

    def _guard(self, operation: str) -> bool:
        state = self.state()
        if state.editable:
            return True
        logger.debug(
            "edit_ignored_locked_day",
            extra={"date": self.session.active_date, "operation": operation},
        )
        return False

    def _put_active_day(self, record: DayRecord) -> None:
        self.store.put_day(self.session.active_date, record)

    def set_quantity(self, product_id: str, size: CupSize | str, raw_value: Any) -> bool:
        """Set the cup count of one product size from raw form input."""
        if not self._guard("set_quantity"):
            return False
        record = self.store.get_day(self.session.active_date)
        self._put_active_day(
            record.with_quantity(product_id, CupSize(size), coerce_quantity(raw_value))
        )
        return True

    def set_details(
        self,
        kind: DetailKind | str,
        entries: Iterable[DetailEntry | Mapping[str, Any]],
    ) -> bool:
        """
        Replace the purchase or expense detail list.

        The matching aggregate is recomputed from the entries in the same
        write, so the two can never disagree.
        """
        if not self._guard("set_details"):
            return False
        kind = DetailKind(kind)
        parsed = tuple(
            e if isinstance(e, DetailEntry) else DetailEntry.from_dict(e) for e in entries
        )
        record = self.store.get_day(self.session.active_date)
        self._put_active_day(record.with_details(kind, parsed))
        return True

    def set_previous_balance(self, raw_value: Any) -> bool:
        """Manual correction of the opening balance."""
        if not self._guard("set_previous_balance"):
            return False
        record = self.store.get_day(self.session.active_date)
        self._put_active_day(
            record.with_changes(previous_balance=coerce_decimal(raw_value), synced=False)
        )
        return True

    def set_notes(self, text: str) -> bool:
        if not self._guard("set_notes"):
            return False
        record = self.store.get_day(self.session.active_date)
        self._put_active_day(record.with_changes(notes=text or "", synced=False))
        return True

    def set_stock_entry(self, item_id: str, stock_field: StockField | str, raw_value: Any) -> bool:
        """
        Set quantity or unit price of a stock item for the active month.

        Stock has no lock flag of its own; edits follow the active day's
        state.
        """
        if not self._guard("set_stock_entry"):
            return False
        key = self.session.active_month
        record = self.store.get_month(key)
        self.store.put_month(
            key,
            record.with_entry_field(item_id, StockField(stock_field), coerce_decimal(raw_value)),
        )
        return True

    # ------------------------------------------------------------------
    # Sync flags
    # ------------------------------------------------------------------

    def mark_day_synced(self, key: str) -> None:
        record = self.store.get_day(key)
        if not record.synced:
            self.store.put_day(key, record.with_changes(synced=True))

    def mark_month_synced(self, key: str) -> None:
        record = self.store.get_month(key)
        if not record.synced:
            self.store.put_month(key, record.with_changes(synced=True))

    # ------------------------------------------------------------------
    # Close
    # ------------------------------------------------------------------

    def lock_and_forward(self, key: str | None = None) -> ForwardResult:
        """
        Close a day: lock it and seed the next day's opening balance.

        Postconditions:
            - ``DayRecord[key].locked`` is True.
            - Unless skipped, ``DayRecord[next(key)].previous_balance``
              equals ``total_balance(key)``; the next day is created if
              absent and no other field of it changes.

        The forward is skipped when policy is ONCE and the day already
        forwarded, or when the next day is itself locked.
        """
        key = key or self.session.active_date
        next_key = next_day_key(key)

        with LogContext.bind(active_date=key, operation="lock_and_forward"):
            record = self.store.get_day(key)
            balance = compute_day_totals(record, self.store.products).total_balance

            skip_reason = None
            next_record = self.store.get_day(next_key)
            if record.forwarded and self.forward_policy is ForwardPolicy.ONCE:
                skip_reason = ForwardSkipReason.ALREADY_FORWARDED
            elif next_record.locked:
                skip_reason = ForwardSkipReason.NEXT_DAY_LOCKED

            forwarding = skip_reason is None
            self.store.put_day(
                key,
                record.with_changes(locked=True, forwarded=record.forwarded or forwarding),
            )
            logger.info(
                "day_locked",
                extra={"date": key, "total_balance": balance, "was_locked": record.locked},
            )

            if forwarding:
                self.store.put_day(next_key, next_record.with_changes(previous_balance=balance))
                logger.info(
                    "balance_forwarded",
                    extra={
                        "date": key,
                        "next_date": next_key,
                        "total_balance": balance,
                        "replaced_balance": next_record.previous_balance,
                    },
                )
            else:
                logger.warning(
                    "balance_forward_skipped",
                    extra={
                        "date": key,
                        "next_date": next_key,
                        "reason": skip_reason.value,
                        "policy": self.forward_policy.value,
                    },
                )

        return ForwardResult(
            date=key,
            next_date=next_key,
            total_balance=balance,
            forwarded=forwarding,
            skip_reason=skip_reason,
        )

