"""Stored time stamps: the ``t<days>s`` file-time format.

The executor records the time of a target's last successful build as the
fractional number of days since the Unix epoch (UTC), wrapped as
``t<days>s``, e.g. ``t19723.5s`` for 2024-01-01 12:00 UTC.  Readers must
normalize it to an aware ``datetime`` before comparing against a threshold.

Days are written with up to ``DAY_DECIMALS`` decimal places and converted
with ``Decimal`` arithmetic, so every ``datetime`` in the supported range
(years 1 to 9999) decodes back to the same microsecond.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_EVEN, Decimal

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# 1e-12 day is 86.4 ns, well under half a microsecond.
DAY_DECIMALS = 12

_MICROSECONDS_PER_DAY = Decimal(86_400_000_000)
_DAY_QUANTUM = Decimal(1).scaleb(-DAY_DECIMALS)

_FILE_TIME_RE = re.compile(r"^t(?P<days>[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)s$")


class FileTimeError(ValueError):
    """Raised when a stored time stamp cannot be encoded or decoded."""


def encode_file_time(instant: datetime) -> str:
    """Encode an aware ``datetime`` as a ``t<days>s`` string."""
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise FileTimeError(
            f"Cannot record naive datetime {instant.isoformat()!r}; "
            f"attach a timezone first."
        )
    microseconds = (instant - EPOCH) // timedelta(microseconds=1)
    days = (Decimal(microseconds) / _MICROSECONDS_PER_DAY).quantize(
        _DAY_QUANTUM, rounding=ROUND_HALF_EVEN
    )
    text = format(days, "f").rstrip("0")
    if text.endswith("."):
        text += "0"
    return f"t{text}s"


def decode_file_time(value: str) -> datetime:
    """Decode a ``t<days>s`` string to an aware UTC ``datetime``.

    The fractional day is rounded to the nearest microsecond.  Values
    written by ``encode_file_time`` round-trip exactly.
    """
    match = _FILE_TIME_RE.match(value.strip())
    if match is None:
        raise FileTimeError(f"Malformed file time stamp: {value!r}")
    try:
        days = Decimal(match.group("days"))
        microseconds = (days * _MICROSECONDS_PER_DAY).to_integral_value(
            rounding=ROUND_HALF_EVEN
        )
        return EPOCH + timedelta(microseconds=int(microseconds))
    except ArithmeticError as exc:  # OverflowError or decimal overflow
        raise FileTimeError(f"File time stamp out of range: {value!r}") from exc
