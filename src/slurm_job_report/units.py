from __future__ import annotations

import math
import re

_SECONDS_PER_DAY = 24 * 60 * 60
_MEMORY_PATTERN = re.compile(r"^(?P<value>\d+(?:\.\d+)?|\.\d+)(?P<unit>[KMGT]?)[nc]?$", re.IGNORECASE)

# Divisors converting a quantity in the given unit to gigabytes. A bare number
# is taken as bytes and scaled like ``K``.
_MEMORY_DIVISORS = {
    "": 1024.0**2,
    "K": 1024.0**2,
    "M": 1024.0,
    "G": 1.0,
    "T": 1.0 / 1024.0,
}


def parse_duration(value: str | None) -> int:
    """Convert a Slurm duration to whole seconds.

    Accepts ``D-HH:MM:SS``, ``HH:MM:SS``, ``MM:SS.fff`` and bare seconds.
    Anything that cannot be parsed (including ``UNLIMITED`` or an empty
    string) yields ``0``; the function never raises.
    """

    if not value or not value.strip():
        return 0

    text = value.strip()
    days = 0
    if "-" in text:
        day_part, text = text.split("-", 1)
        try:
            days = int(day_part)
        except ValueError:
            return 0

    parts = text.split(":")
    if len(parts) > 3:
        return 0
    try:
        numbers = [float(part) for part in parts]
    except ValueError:
        return 0

    # Pad to (hours, minutes, seconds).
    hours, minutes, seconds = [0.0] * (3 - len(numbers)) + numbers
    total = days * _SECONDS_PER_DAY + hours * 3600 + minutes * 60 + seconds
    if not math.isfinite(total) or total < 0:
        return 0
    # Fractional seconds from MM:SS.fff are dropped.
    return int(total)


def parse_memory(value: str | None) -> float | None:
    """Convert a Slurm memory quantity (``4000M``, ``102400K``, ``4Gn``) to GB.

    Returns ``None`` when the value cannot be parsed so callers can tell a
    missing reading apart from a genuine ``0``.
    """

    if value is None:
        return None
    match = _MEMORY_PATTERN.match(value.strip())
    if not match:
        return None
    number = float(match.group("value"))
    return number / _MEMORY_DIVISORS[match.group("unit").upper()]


def parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def split_exit_code(value: str | None) -> tuple[int | None, int | None]:
    """Split sacct's ``<code>:<signal>`` exit status into its two parts."""

    if not value:
        return None, None
    code, _, signal = value.partition(":")
    return parse_int(code), parse_int(signal)
