"""Tests for human readable durations."""

import pytest

from src.domain.models import BuildMetadata
from src.services import duration_format


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (None, None),
        (0, "0s"),
        (45, "45s"),
        (60, "1m"),
        (3600, "1h"),
        (5400, "1h 30m"),
        (90061, "1d 1h 1m 1s"),
        (604800, "1w"),
    ],
)
def test_format_duration(seconds: int | None, expected: str | None) -> None:
    assert duration_format.format_duration(seconds) == expected


def test_format_duration_rejects_negative() -> None:
    with pytest.raises(ValueError):
        duration_format.format_duration(-1)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("3600", 3600),
        ("45s", 45),
        ("90m", 5400),
        ("1h 30m", 5400),
        ("1h30m", 5400),
        ("2 hours", 7200),
        ("1 day, 2 hrs", 93600),
        ("  10 MINUTES ", 600),
    ],
)
def test_parse_duration(text: str, expected: int) -> None:
    assert duration_format.parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "soon", "10 fortnights", "1h later"])
def test_parse_duration_rejects_malformed_text(text: str) -> None:
    with pytest.raises(ValueError):
        duration_format.parse_duration(text)


def test_timeout_human_readable_uses_stored_timeout() -> None:
    assert duration_format.timeout_human_readable(BuildMetadata(build_id=1)) is None
    assert (
        duration_format.timeout_human_readable(BuildMetadata(build_id=1, timeout=5400))
        == "1h 30m"
    )
