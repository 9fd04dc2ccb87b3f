"""
Session -- the per-view state the engine works against.

Responsibility:
    ``SessionContext`` replaces the UI-global active date, PIN override and
    view settings with one explicit object passed to the engine and gate.

Invariants enforced:
    - ``unlock_override`` is cleared every time ``active_date`` changes,
      even when it was just granted. Unlock grants are per date view.
"""

from __future__ import annotations

from enum import Enum

from ledger_kernel.domain.values import month_key, parse_day_key


class ViewMode(str, Enum):
    SALES = "sales"
    STOCK = "stock"


class Language(str, Enum):
    EN = "EN"
    BN = "BN"


class DayState(str, Enum):
    """Editability of a date as seen from the active session."""

    OPEN_CURRENT = "open_current"
    OPEN_OVERRIDE = "open_override"
    LOCKED = "locked"

    @property
    def editable(self) -> bool:
        return self is not DayState.LOCKED


class SessionContext:
    """Mutable view state for the single active user."""

    def __init__(
        self,
        active_date: str,
        view_mode: ViewMode = ViewMode.SALES,
        language: Language = Language.EN,
    ):
        parse_day_key(active_date)
        self._active_date = active_date
        self.view_mode = view_mode
        self.language = language
        self.unlock_override = False
        self.pin_error = False
        self.pending_pin = ""

    def __repr__(self) -> str:
        return (
            f"<SessionContext {self._active_date} {self.view_mode.value}"
            f" override={self.unlock_override}>"
        )

    @property
    def active_date(self) -> str:
        return self._active_date

    @active_date.setter
    def active_date(self, value: str) -> None:
        parse_day_key(value)
        self._active_date = value
        self.unlock_override = False

    @property
    def active_month(self) -> str:
        return month_key(self._active_date)
