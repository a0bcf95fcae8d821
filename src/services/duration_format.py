"""Human readable durations for stored timeouts.

Handles:
- Rendering seconds as compact text (5400 -> "1h 30m")
- Parsing the same notation back, plus long unit names ("2 hours")
- Bare integers, read as seconds
"""

import re
from typing import Final

from src.domain.models import BuildMetadata

UNIT_SECONDS: Final[dict[str, int]] = {
    "w": 7 * 24 * 3600,
    "d": 24 * 3600,
    "h": 3600,
    "m": 60,
    "s": 1,
}
"""Short unit suffix to seconds, largest first."""

UNIT_ALIASES: Final[dict[str, str]] = {
    "week": "w",
    "weeks": "w",
    "wk": "w",
    "wks": "w",
    "day": "d",
    "days": "d",
    "hour": "h",
    "hours": "h",
    "hr": "h",
    "hrs": "h",
    "minute": "m",
    "minutes": "m",
    "min": "m",
    "mins": "m",
    "second": "s",
    "seconds": "s",
    "sec": "s",
    "secs": "s",
}

PART_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(\d+)\s*([a-z]+)", flags=re.IGNORECASE
)
"""Pattern to match one '<number><unit>' part like '30m' or '2 hours'."""


def format_duration(seconds: int | None) -> str | None:
    """Render seconds as compact text.

    Example:
        >>> format_duration(5400)
        '1h 30m'
        >>> format_duration(0)
        '0s'
    """
    if seconds is None:
        return None
    if seconds < 0:
        raise ValueError("duration must not be negative")
    if seconds == 0:
        return "0s"

    parts: list[str] = []
    remaining = seconds
    for unit, unit_seconds in UNIT_SECONDS.items():
        count, remaining = divmod(remaining, unit_seconds)
        if count:
            parts.append(f"{count}{unit}")
    return " ".join(parts)


def parse_duration(text: str) -> int:
    """Parse a duration into seconds.

    Raises:
        ValueError: If the text is empty or contains an unknown unit
    """
    stripped = text.strip().lower()
    if not stripped:
        raise ValueError("duration must not be empty")
    if stripped.isdigit():
        return int(stripped)

    total = 0
    consumed = 0
    for match in PART_PATTERN.finditer(stripped):
        if stripped[consumed : match.start()].strip(" ,"):
            raise ValueError(f"Unparseable duration: {text!r}")
        amount, unit = match.groups()
        unit = UNIT_ALIASES.get(unit, unit)
        if unit not in UNIT_SECONDS:
            raise ValueError(f"Unknown duration unit {unit!r} in {text!r}")
        total += int(amount) * UNIT_SECONDS[unit]
        consumed = match.end()

    if consumed == 0 or stripped[consumed:].strip(" ,"):
        raise ValueError(f"Unparseable duration: {text!r}")
    return total


def timeout_human_readable(metadata: BuildMetadata) -> str | None:
    return format_duration(metadata.timeout)
