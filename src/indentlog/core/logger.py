"""Structured logger front end."""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from ..utils.time import now
from .attrs import Attr, args_to_attrs
from .levels import DEBUG, ERROR, INFO, WARN, Level
from .record import Record

__all__ = ["Formatter", "Logger"]


class Formatter(Protocol):
    """What a :class:`Logger` needs from the component rendering its records."""

    def enabled(self, level: int) -> bool: ...

    def handle(self, record: Record) -> None: ...

    def with_attrs(self, attrs: Iterable[Attr]) -> "Formatter": ...

    def with_group(self, name: str) -> "Formatter": ...


class Logger:
    """Build records and pass them to a formatter.

    Positional arguments after the message are alternating keys and values
    or :class:`~indentlog.core.attrs.Attr` instances; keyword arguments are
    appended after them::

        log = Logger(formatter).with_group("request").with_(id="r-17")
        log.info("served", "status", 200, elapsed_ms=3.2)

    Errors raised by the formatter's sink propagate to the caller.
    """

    __slots__ = ("formatter",)

    def __init__(self, formatter: Formatter) -> None:
        self.formatter = formatter

    def with_(self, *args: Any, **kwargs: Any) -> "Logger":
        attrs = args_to_attrs(args, kwargs)
        if not attrs:
            return self
        return Logger(self.formatter.with_attrs(attrs))

    def with_group(self, name: str) -> "Logger":
        if not name:
            return self
        return Logger(self.formatter.with_group(name))

    def enabled(self, level: int) -> bool:
        return self.formatter.enabled(level)

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if not self.formatter.enabled(level):
            return
        record = Record(time=now(), level=Level(level), message=msg)
        record.add(*args, **kwargs)
        self.formatter.handle(record)

    def log_attrs(self, level: int, msg: str, *attrs: Attr) -> None:
        if not self.formatter.enabled(level):
            return
        record = Record(time=now(), level=Level(level), message=msg)
        record.add_attrs(*attrs)
        self.formatter.handle(record)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(INFO, msg, *args, **kwargs)

    def warn(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(WARN, msg, *args, **kwargs)

    warning = warn

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(ERROR, msg, *args, **kwargs)

    def __repr__(self) -> str:
        return f"Logger({self.formatter!r})"
