"""Fixed-point decoding and the parse-failure counter.

The data node transports decimals as integer strings plus a decimal-places
count held elsewhere (market, position or asset precision). Decoding divides
exactly and rounds to float once, so large 18-decimal asset amounts don't pick
up double-rounding error.
"""

from __future__ import annotations

import math
import re
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from fractions import Fraction

import structlog

log = structlog.get_logger("normalize")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})"
)

_failures_lock = threading.Lock()
_parse_failures = 0


def record_parse_failure(kind: str, value: object) -> None:
    """Count and log a value that had to be replaced by zero."""
    global _parse_failures
    with _failures_lock:
        _parse_failures += 1
    log.warning("unparsable value", kind=kind, value=repr(value))


def parse_failure_count() -> int:
    """Number of values defaulted to zero since start (or the last reset)."""
    return _parse_failures


def reset_parse_failures() -> None:
    global _parse_failures
    with _failures_lock:
        _parse_failures = 0


def decode(raw: str | int | None, decimal_places: int) -> float:
    """Decode a fixed-point value: ``raw / 10**decimal_places`` as float.

    Empty/None decodes to 0.0 (the field wasn't sent). Anything else that
    isn't a finite number, or doesn't fit in a float once scaled, also
    decodes to 0.0 but is counted as a parse failure.
    """
    if raw is None or raw == "":
        return 0.0
    try:
        value = Fraction(Decimal(raw)) / Fraction(10) ** decimal_places
        return float(value)
    except (InvalidOperation, ValueError, OverflowError, TypeError):
        record_parse_failure("fixed_point", raw)
        return 0.0


def parse_float(raw: str | None) -> float:
    """Parse a plain decimal string (e.g. a funding rate), 0.0 on failure."""
    if raw is None or raw == "":
        return 0.0
    try:
        value = float(Decimal(raw))
    except (InvalidOperation, ValueError, OverflowError, TypeError):
        record_parse_failure("decimal", raw)
        return 0.0
    if not math.isfinite(value):
        record_parse_failure("decimal", raw)
        return 0.0
    return value


def rfc3339_to_millis(raw: str) -> int:
    """Parse an RFC3339 timestamp to epoch millis; 0 if absent or invalid.

    Only the RFC3339 shape is accepted: ``T`` separator, extended date/time,
    and a ``Z`` or ``±hh:mm`` offset. Fractions beyond microseconds are
    truncated.
    """
    if not raw:
        return 0
    match = _RFC3339.fullmatch(raw)
    if match is None:
        record_parse_failure("rfc3339", raw)
        return 0
    date, time_, fraction, offset = match.groups()
    fraction = (fraction or "")[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"
    try:
        ts = datetime.fromisoformat(f"{date}T{time_}.{fraction}{offset}")
    except ValueError:
        record_parse_failure("rfc3339", raw)
        return 0
    return (ts - _EPOCH) // timedelta(milliseconds=1)
