"""Log record value handed to formatters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, List

from .attrs import Attr, Kind, args_to_attrs
from .levels import INFO, Level

__all__ = ["Record"]


@dataclass(slots=True)
class Record:
    """A single log event.

    ``time`` may be ``None``, in which case formatters omit it. Attributes
    are kept in insertion order; groups without children are never stored.
    """

    time: datetime | None = None
    level: Level = INFO
    message: str = ""
    attrs: List[Attr] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.level = Level(self.level)
        initial, self.attrs = self.attrs, []
        self.add_attrs(*initial)

    def add_attrs(self, *attrs: Attr) -> None:
        for attr in attrs:
            if attr.value.kind is Kind.GROUP and not attr.value.group():
                continue
            self.attrs.append(attr)

    def add(self, *args: Any, **kwargs: Any) -> None:
        """Append attributes given as key/value pairs, attrs or keywords."""

        self.add_attrs(*args_to_attrs(args, kwargs))

    @property
    def num_attrs(self) -> int:
        return len(self.attrs)

    def __iter__(self) -> Iterator[Attr]:
        return iter(self.attrs)

