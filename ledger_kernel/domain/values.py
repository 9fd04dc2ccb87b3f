"""
Values -- input coercion and calendar keys.

Responsibility:
    Turns raw form input into ``int`` / ``Decimal`` values and converts
    between ``date`` objects and the string keys the ledger is indexed by
    (``YYYY-MM-DD`` for days, ``YYYY-MM`` for months).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - Coercion never raises: anything that is not a number becomes zero.
    - ``parse_day_key`` / ``parse_month_key`` raise ``InvalidDateKeyError``.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from ledger_kernel.exceptions import InvalidDateKeyError, PinFormatError

ZERO = Decimal("0")

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_DECIMAL_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_MAX_EXPONENT = 100
_DAY_KEY = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_MONTH_KEY = re.compile(r"[0-9]{4}-[0-9]{2}")


def coerce_int(value: Any) -> int:
    """
    Parse a whole-number form value, falling back to zero.

    Leading digits are honoured the way a numeric text field reads them
    ("12abc" -> 12); anything without a leading number is zero.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (ValueError, OverflowError, InvalidOperation):
            return 0
    if value is None:
        return 0
    match = _INT_PREFIX.match(str(value))
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        return 0


def coerce_quantity(value: Any) -> int:
    """Cup count from a form value: a non-negative int."""
    return max(coerce_int(value), 0)


def coerce_decimal(value: Any) -> Decimal:
    """
    Parse a money or stock form value into a finite ``Decimal``.

    Non-numeric input, NaN, infinities and magnitudes beyond
    10**_MAX_EXPONENT (either way) all become zero.
    """
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        return Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif value is None:
        return ZERO
    else:
        match = _DECIMAL_PREFIX.match(str(value))
        if not match:
            return ZERO
        try:
            result = Decimal(match.group(1))
        except InvalidOperation:
            return ZERO
    if not result.is_finite() or abs(result.adjusted()) > _MAX_EXPONENT:
        return ZERO
    return result


def decimal_to_str(value: Decimal) -> str:
    """Serialize a Decimal without exponent noise ("350", "12.5")."""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


# ---------------------------------------------------------------------------
# Calendar keys
# ---------------------------------------------------------------------------


def day_key(day: date) -> str:
    """``date`` -> ``YYYY-MM-DD``."""
    return day.isoformat()


def parse_day_key(key: str) -> date:
    """``YYYY-MM-DD`` -> ``date``."""
    if not isinstance(key, str) or not _DAY_KEY.fullmatch(key):
        raise InvalidDateKeyError(str(key))
    try:
        return date.fromisoformat(key)
    except ValueError:
        raise InvalidDateKeyError(key) from None


def next_day_key(key: str) -> str:
    """Key of the calendar day after ``key`` (month and year roll over)."""
    return day_key(parse_day_key(key) + timedelta(days=1))


def previous_day_key(key: str) -> str:
    """Key of the calendar day before ``key``."""
    return day_key(parse_day_key(key) - timedelta(days=1))


def month_key(day: date | str) -> str:
    """Month key (``YYYY-MM``) of a day or day key."""
    if isinstance(day, str):
        day = parse_day_key(day)
    return f"{day.year:04d}-{day.month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """``YYYY-MM`` -> ``(year, month)``."""
    if not isinstance(key, str) or not _MONTH_KEY.fullmatch(key):
        raise InvalidDateKeyError(str(key), expected="YYYY-MM")
    year, month = int(key[:4]), int(key[5:])
    if not 1 <= month <= 12:
        raise InvalidDateKeyError(key, expected="YYYY-MM")
    return year, month


# ---------------------------------------------------------------------------
# PIN
# ---------------------------------------------------------------------------

PIN_LENGTH = 4
_PIN_PATTERN = re.compile(r"[0-9]{4}")


def is_valid_pin(pin: str) -> bool:
    return isinstance(pin, str) and bool(_PIN_PATTERN.fullmatch(pin))


def validate_pin(pin: str) -> str:
    """Return ``pin`` unchanged or raise PinFormatError."""
    if not is_valid_pin(pin):
        raise PinFormatError(len(pin) if isinstance(pin, str) else 0)
    return pin
