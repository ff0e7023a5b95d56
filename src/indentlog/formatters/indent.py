"""Indentation-based, colorized record formatter.

Records are rendered as one line of built-in fields (time, optional front
value, level, message) followed by one tab-prefixed line per attribute of
the record. Groups opened with :meth:`IndentFormatter.with_group` become
header lines indented four spaces per level, written only once an attribute
is actually placed under them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from ..core.attrs import Attr, Kind, any_attr, string, time_attr
from ..core.levels import INFO, Leveler
from ..core.record import Record
from ..handlers.sink import ByteWriter, Sink
from ..utils.time import format_clock
from .colors import BLUE, GRAY, GREEN, LIGHT_CYAN, LIGHT_RED, YELLOW, colorize

__all__ = [
    "Options",
    "IndentFormatter",
    "TIME_KEY",
    "LEVEL_KEY",
    "MESSAGE_KEY",
    "SOURCE_KEY",
    "FRONT_KEY",
]

TIME_KEY = "time"
LEVEL_KEY = "level"
MESSAGE_KEY = "msg"
SOURCE_KEY = "source"
FRONT_KEY = "front"

# String attributes under these keys are written bare: no label, no quotes.
_BARE_KEYS = frozenset({FRONT_KEY, SOURCE_KEY, MESSAGE_KEY})

_LEVEL_WIDTH = 14
_INDENT_WIDTH = 4

_LEVEL_COLORS = {
    "DEBUG": LIGHT_CYAN,
    "INFO": GREEN,
    "WARN": YELLOW,
    "ERROR": LIGHT_RED,
}


@dataclass(slots=True)
class Options:
    """Formatter options.

    ``level`` is the minimum level to log; it may be a level number or any
    object with a ``level()`` method such as :class:`~indentlog.core.levels.LevelVar`.
    ``None`` means ``INFO``.
    """

    level: int | Leveler | None = None


class IndentFormatter:
    """Render records to a shared sink.

    Instances are treated as values: :meth:`with_attrs` and
    :meth:`with_group` return new formatters and never modify the receiver.
    All formatters derived from one root share its :class:`Sink`.
    """

    __slots__ = ("options", "_sink", "_preformatted", "_unopened_groups", "_indent_level")

    def __init__(self, out: Sink | ByteWriter, options: Options | None = None) -> None:
        self.options = Options(level=options.level) if options else Options()
        if self.options.level is None:
            self.options.level = INFO
        self._sink = out if isinstance(out, Sink) else Sink(out)
        # Attributes and groups from with_attrs, already rendered.
        self._preformatted = b""
        # Groups from with_group that have not been written yet.
        self._unopened_groups: Tuple[str, ...] = ()
        # Number of groups written into _preformatted.
        self._indent_level = 0

    @property
    def sink(self) -> Sink:
        return self._sink

    # -- Level filtering -----------------------------------------------------
    def enabled(self, level: int) -> bool:
        return level >= self.min_level()

    def min_level(self) -> int:
        level = self.options.level
        leveler = getattr(level, "level", None)
        if callable(leveler):
            return int(leveler())
        return int(level)  # type: ignore[arg-type]

    # -- Derivation ----------------------------------------------------------
    def with_group(self, name: str) -> "IndentFormatter":
        if not name:
            return self
        child = self._derive()
        child._unopened_groups = (*self._unopened_groups, name)
        return child

    def with_attrs(self, attrs: Iterable[Attr]) -> "IndentFormatter":
        attrs = list(attrs)
        if not attrs:
            return self
        child = self._derive()
        buf = bytearray(self._preformatted)
        self._append_unopened_groups(buf, self._indent_level)
        child._indent_level = self._indent_level + len(self._unopened_groups)
        child._unopened_groups = ()
        for attr in attrs:
            self._append_attr(buf, attr, child._indent_level)
        child._preformatted = bytes(buf)
        return child

    def _derive(self) -> "IndentFormatter":
        child = object.__new__(IndentFormatter)
        child.options = self.options
        child._sink = self._sink
        child._preformatted = self._preformatted
        child._unopened_groups = self._unopened_groups
        child._indent_level = self._indent_level
        return child

    # -- Rendering -----------------------------------------------------------
    def handle(self, record: Record) -> None:
        """Render ``record`` and write it to the sink in a single call.

        Raises :class:`~indentlog.handlers.sink.SinkWriteError` if the write
        fails. The level is not checked here; callers use :meth:`enabled`.
        """

        self._sink.write(self.render(record))

    def render(self, record: Record) -> bytes:
        buf = bytearray()
        if record.time is not None:
            self._append_attr(buf, time_attr(TIME_KEY, record.time), 0)

        buf += self._preformatted

        # First "front" attribute wins; it is still listed with the others below.
        front = next(
            (str(attr.value.resolve()) for attr in record.attrs if attr.key == FRONT_KEY),
            "",
        )
        if front:
            self._append_attr(buf, string(FRONT_KEY, front), 0)
        self._append_attr(buf, any_attr(LEVEL_KEY, record.level), 0)
        self._append_attr(buf, string(MESSAGE_KEY, record.message), 0)
        buf += b"\n"

        if record.num_attrs > 0:
            self._append_unopened_groups(buf, self._indent_level)
            depth = self._indent_level + len(self._unopened_groups)
            for attr in record:
                buf += b"\t"
                self._append_attr(buf, attr, depth)
                buf += b"\n"
        return bytes(buf)

    def _append_attr(self, buf: bytearray, attr: Attr, depth: int) -> None:
        value = attr.value.resolve()
        attr = Attr(attr.key, value)
        if attr.is_empty():
            return
        if value.kind is Kind.GROUP and not value.group():
            return
        if buf:
            buf += b" "

        kind = value.kind
        if kind is Kind.STRING:
            if attr.key in _BARE_KEYS:
                text = str(value)
            else:
                text = colorize(f'{attr.key}: "{value}"', GRAY)
        elif kind is Kind.TIME:
            text = colorize(format_clock(value.time()), BLUE)
        elif kind is Kind.GROUP:
            # A named group indents its members; an anonymous one is inlined.
            if attr.key:
                buf += attr.key.encode("utf-8")
                depth += 1
            for member in value.group():
                self._append_attr(buf, member, depth)
            return
        elif attr.key == LEVEL_KEY:
            label = str(value)
            color = _LEVEL_COLORS.get(label)
            text = colorize(label, color) if color else label
            text = f"{text:<{_LEVEL_WIDTH}}"
        else:
            text = colorize(f"{attr.key}: {value}", GRAY)
        buf += text.encode("utf-8")

    def _append_unopened_groups(self, buf: bytearray, depth: int) -> None:
        for name in self._unopened_groups:
            buf += f"{' ' * (depth * _INDENT_WIDTH)}{name}:\n".encode("utf-8")
            depth += 1

    def __repr__(self) -> str:
        return (
            f"IndentFormatter(level={self.options.level!r}, indent_level={self._indent_level}, "
            f"unopened_groups={list(self._unopened_groups)!r})"
        )
