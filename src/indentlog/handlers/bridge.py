"""Bridge from stdlib :mod:`logging` to an :class:`IndentFormatter`."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List

from ..core.attrs import Attr, any_attr, string
from ..core.levels import from_stdlib
from ..core.record import Record
from ..formatters.indent import IndentFormatter

__all__ = ["IndentLogHandler"]

_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "asctime",
    "message",
}


class IndentLogHandler(logging.Handler):
    """Handler rendering stdlib records through an :class:`IndentFormatter`.

    Values passed with ``extra=`` become record attributes in the order they
    were given; mappings become groups. Exceptions are attached as an
    ``exception`` attribute.
    """

    def __init__(self, formatter: IndentFormatter, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.indent_formatter = formatter

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        level = from_stdlib(record.levelno)
        if not self.indent_formatter.enabled(level):
            return
        try:
            converted = Record(
                time=datetime.fromtimestamp(record.created),
                level=level,
                message=record.getMessage(),
            )
            converted.add_attrs(*self._extra_attrs(record))
            self.indent_formatter.handle(converted)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def _extra_attrs(self, record: logging.LogRecord) -> List[Attr]:
        attrs: List[Attr] = []
        data: dict[str, Any] = record.__dict__
        for key, value in data.items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            attrs.append(any_attr(key, value))
        if record.exc_info:
            attrs.append(string("exception", self._formatter().formatException(record.exc_info)))
        elif record.exc_text:
            attrs.append(string("exception", record.exc_text))
        if record.stack_info:
            attrs.append(string("stack", record.stack_info))
        return attrs

    def _formatter(self) -> logging.Formatter:
        return self.formatter or logging.Formatter()
