"""Time utilities for indentlog."""

from __future__ import annotations

from datetime import datetime

__all__ = ["now", "format_clock"]


def now() -> datetime:
    """Return the current local time as an aware ``datetime``."""

    return datetime.now().astimezone()


def format_clock(moment: datetime) -> str:
    """Render ``moment`` as local ``HH:MM:SS.mmm``.

    Aware values are converted to local time first; naive values are taken
    to already be local. Sub-millisecond precision is truncated.
    """

    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return f"{moment:%H:%M:%S}.{moment.microsecond // 1000:03d}"
