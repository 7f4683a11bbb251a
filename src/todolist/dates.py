"""Due date parsing and display.

Due dates are stored as integer seconds since the Unix epoch (UTC). Users
type them as ``YYYY-MM-DD``, ``DD.MM.YYYY`` or a raw timestamp.
"""

from __future__ import annotations

from datetime import datetime, timezone

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")

MAX_DUE_DATE = int(datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc).timestamp())
"""Last second of 9999-12-31 UTC, the latest timestamp ``datetime`` can show."""


def parse_due_date(value: str | int | None) -> int | None:
    """Parse user input into an epoch timestamp.

    Returns None for empty input. Raises ValueError for anything that is
    neither a timestamp nor a date in one of ``DATE_FORMATS``, and for
    timestamps past ``MAX_DUE_DATE``.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return _check_range(value)

    text = value.strip()
    if not text:
        return None
    if text.isdigit():
        return _check_range(int(text))

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())

    raise ValueError(f"Unrecognised date: {value!r} (expected YYYY-MM-DD or DD.MM.YYYY)")


def format_due_date(timestamp: int | None) -> str:
    """Render a timestamp as ``YYYY-MM-DD`` (UTC), or "" when unset.

    Timestamps ``datetime`` cannot represent are shown as the raw number.
    """
    if timestamp is None:
        return ""
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")
    except (OverflowError, OSError, ValueError):
        return str(timestamp)


def _check_range(timestamp: int) -> int:
    if not 0 <= timestamp <= MAX_DUE_DATE:
        raise ValueError(f"Timestamp out of range: {timestamp} (0 to {MAX_DUE_DATE})")
    return timestamp
