"""
AccessGate -- PIN check that temporarily reopens a locked day.

Responsibility:
    Verifies a candidate PIN against the stored one and, on success, grants
    the unlock override for the active date only.  Also runs the two-step
    PIN change protocol.

Architecture position:
    Kernel > Services.  Reads the stored PIN from ``LedgerStore``, writes
    the override into the ``SessionContext``.

Invariants enforced:
    - ``verify`` is True iff the candidate equals the stored PIN.
    - The override dies with the date view: ``SessionContext`` clears it on
      every change of ``active_date``.
    - A PIN change never touches the stored PIN unless the current PIN was
      re-entered correctly and the new 4-digit value was typed twice.

Non-goals:
    - No attempt limit or lockout after repeated wrong PINs.
    - The first-run PIN is the well-known ``"0000"``, kept as a
      convenience for a one-person stall.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ledger_kernel.domain.session import SessionContext
from ledger_kernel.domain.values import PIN_LENGTH, is_valid_pin
from ledger_kernel.logging_config import get_logger
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.access_gate")


def sanitize_pin_input(raw: str) -> str:
    """Keep digits only and cap at four, as the PIN field does."""
    return re.sub(r"\D", "", raw or "")[:PIN_LENGTH]


class AccessGate(BaseService):
    """PIN verification for one session."""

    def __init__(self, store: LedgerStore, session: SessionContext):
        super().__init__(store)
        self.session = session

    def verify(self, candidate: str) -> bool:
        """
        Check ``candidate`` against the stored PIN.

        On match the active date is unlocked and the error flag cleared.
        On mismatch the error flag is set.  The pending input is cleared
        either way.
        """
        self.session.pending_pin = ""
        if candidate == self.store.security_pin:
            self.session.unlock_override = True
            self.session.pin_error = False
            logger.info(
                "day_unlocked_by_pin",
                extra={"date": self.session.active_date},
            )
            return True

        self.session.pin_error = True
        logger.warning(
            "pin_verification_failed",
            extra={"date": self.session.active_date},
        )
        return False

    def relock(self) -> None:
        """Give up the override for the active date."""
        if self.session.unlock_override:
            self.session.unlock_override = False
            logger.info("day_relocked", extra={"date": self.session.active_date})

    def dismiss(self) -> None:
        """Close the PIN prompt without trying."""
        self.session.pending_pin = ""
        self.session.pin_error = False


# ---------------------------------------------------------------------------
# PIN change
# ---------------------------------------------------------------------------


class PinChangeStep(str, Enum):
    VERIFY = "verify"
    NEW = "new"
    DONE = "done"


class PinChangeError(str, Enum):
    INCORRECT_PIN = "INCORRECT_PIN"
    PIN_MISMATCH = "PIN_MISMATCH"


@dataclass(frozen=True, slots=True)
class PinChangeResult:
    step: PinChangeStep
    error: PinChangeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PinChangeFlow(BaseService):
    """
    Two-step PIN change.

    Step VERIFY checks the current PIN against the stored value (an active
    unlock override does not count).  Step NEW accepts a 4-digit value
    entered twice.  Any rejection leaves the stored PIN unchanged.
    """

    def __init__(self, store: LedgerStore):
        super().__init__(store)
        self.step = PinChangeStep.VERIFY

    def reset(self) -> None:
        self.step = PinChangeStep.VERIFY

    def submit_current(self, current_pin: str) -> PinChangeResult:
        if self.step is not PinChangeStep.VERIFY:
            raise RuntimeError(f"PIN change is at step {self.step.value}, not verify")
        if current_pin != self.store.security_pin:
            logger.warning("pin_change_verify_failed")
            return PinChangeResult(self.step, PinChangeError.INCORRECT_PIN)
        self.step = PinChangeStep.NEW
        return PinChangeResult(self.step)

    def submit_new(self, new_pin: str, confirm_pin: str) -> PinChangeResult:
        if self.step is not PinChangeStep.NEW:
            raise RuntimeError(f"PIN change is at step {self.step.value}, not new")
        if not is_valid_pin(new_pin) or new_pin != confirm_pin:
            logger.warning("pin_change_rejected")
            return PinChangeResult(self.step, PinChangeError.PIN_MISMATCH)
        self.store.set_security_pin(new_pin)
        self.step = PinChangeStep.DONE
        logger.info("pin_changed")
        return PinChangeResult(self.step)
