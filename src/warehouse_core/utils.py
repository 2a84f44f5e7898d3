"""Shared utilities for the warehouse silver layer.

Examples:
    >>> from warehouse_core.utils import format_duration, parse_timestamp
    >>> format_duration(90.5)
    '1m 30.5s'
    >>> parse_timestamp("2024-03-01T08:00:00")
    datetime.datetime(2024, 3, 1, 8, 0)

"""

from __future__ import annotations

from datetime import datetime


def parse_timestamp(s: str) -> datetime:
    """Parse an ISO-8601 timestamp or a plain YYYY-MM-DD date.

    Args:
        s: Timestamp string such as ``2024-03-01`` or ``2024-03-01T08:00:00``.

    Returns:
        Parsed (naive) datetime.

    Raises:
        ValueError: If the string is not ISO-8601.

    """
    return datetime.fromisoformat(s.strip())


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as a human-readable string.

    Args:
        seconds: Duration in seconds (can be fractional).

    Returns:
        Formatted string like "5m 30.5s" or "45.2s".

    Examples:
        >>> format_duration(90.5)
        '1m 30.5s'
        >>> format_duration(45.2)
        '45.2s'

    """
    mins, secs = divmod(seconds, 60.0)
    if mins >= 1:
        return f"{int(mins)}m {secs:04.1f}s"
    else:
        return f"{secs:.1f}s"
