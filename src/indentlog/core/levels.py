"""Log level helpers."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

__all__ = [
    "Level",
    "Leveler",
    "LevelVar",
    "DEBUG",
    "INFO",
    "WARN",
    "ERROR",
    "parse_level",
    "ensure_level",
    "from_stdlib",
    "to_stdlib",
]


class Level(int):
    """Importance of a record. Larger is more severe.

    The named levels are spaced four apart so that custom levels can sit
    between them; those are printed relative to the named level below, e.g.
    ``INFO+2``.
    """

    __slots__ = ()

    def level(self) -> "Level":
        return self

    def __str__(self) -> str:
        value = int(self)

        def _with_offset(base: str, offset: int) -> str:
            return base if offset == 0 else f"{base}{offset:+d}"

        if value < INFO:
            return _with_offset("DEBUG", value - DEBUG)
        if value < WARN:
            return _with_offset("INFO", value - INFO)
        if value < ERROR:
            return _with_offset("WARN", value - WARN)
        return _with_offset("ERROR", value - ERROR)

    def __repr__(self) -> str:
        return f"Level({self})"


DEBUG = Level(-4)
INFO = Level(0)
WARN = Level(4)
ERROR = Level(8)

_NAMED = {
    "DEBUG": DEBUG,
    "INFO": INFO,
    "WARN": WARN,
    "WARNING": WARN,
    "ERROR": ERROR,
    "CRITICAL": Level(12),
}


class Leveler(Protocol):
    def level(self) -> Level: ...


class LevelVar:
    """A level that can be changed while formatters are in use."""

    def __init__(self, level: int = INFO) -> None:
        self._lock = threading.Lock()
        self._level = Level(level)

    def level(self) -> Level:
        with self._lock:
            return self._level

    def set(self, level: int | str) -> None:
        resolved = parse_level(level) if isinstance(level, str) else Level(level)
        with self._lock:
            self._level = resolved

    def __repr__(self) -> str:
        return f"LevelVar({self.level()})"


def parse_level(text: str) -> Level:
    """Parse the output of ``str(level)`` back into a :class:`Level`.

    Raises ``ValueError`` for unknown names.
    """

    name = text.strip().upper()
    if not name:
        raise ValueError("empty level name")
    if name.lstrip("+-").isdigit():
        return Level(int(name))
    offset = 0
    for sign in ("+", "-"):
        if sign in name:
            name, raw = name.split(sign, 1)
            if not raw.isdigit():
                raise ValueError(f"invalid level offset in {text!r}")
            offset = int(raw) if sign == "+" else -int(raw)
            break
    base = _NAMED.get(name)
    if base is None:
        raise ValueError(f"unknown level name {text!r}")
    return Level(base + offset)


def ensure_level(value: int | str | None) -> Level:
    """Normalize user supplied level values, falling back to ``INFO``."""

    if value is None:
        return INFO
    if isinstance(value, int):
        return Level(value)
    try:
        return parse_level(value)
    except ValueError:
        return INFO


def from_stdlib(levelno: int) -> Level:
    """Map a :mod:`logging` level number onto a :class:`Level`."""

    return Level((levelno - logging.INFO) * 4 // 10)


def to_stdlib(level: int) -> int:
    """Inverse of :func:`from_stdlib` for the named levels."""

    return logging.INFO + (int(level) * 10) // 4
