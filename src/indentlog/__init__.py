"""indentlog public API."""

from .api import configure, get_context_logger, get_formatter, get_logger, set_level
from .core.attrs import Attr, Value, any_attr, group, string
from .core.levels import DEBUG, ERROR, INFO, WARN, Level, LevelVar
from .core.logger import Logger
from .core.record import Record
from .formatters.indent import IndentFormatter, Options
from .handlers.bridge import IndentLogHandler
from .handlers.sink import Sink, SinkWriteError
from .version import __version__

__all__ = [
    "configure",
    "get_formatter",
    "get_logger",
    "get_context_logger",
    "set_level",
    "Attr",
    "Value",
    "any_attr",
    "group",
    "string",
    "Level",
    "LevelVar",
    "DEBUG",
    "INFO",
    "WARN",
    "ERROR",
    "Logger",
    "Record",
    "IndentFormatter",
    "Options",
    "IndentLogHandler",
    "Sink",
    "SinkWriteError",
    "__version__",
]
