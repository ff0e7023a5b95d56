"""Attribute and value model."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from .levels import Level

__all__ = [
    "Kind",
    "Value",
    "Attr",
    "LogValuer",
    "BAD_KEY",
    "string_value",
    "int_value",
    "float_value",
    "bool_value",
    "time_value",
    "duration_value",
    "group_value",
    "any_value",
    "string",
    "integer",
    "floating",
    "boolean",
    "time_attr",
    "group",
    "any_attr",
    "args_to_attrs",
]

BAD_KEY = "!BADKEY"

_MAX_LOG_VALUES = 100


class Kind(enum.Enum):
    ANY = "Any"
    BOOL = "Bool"
    DURATION = "Duration"
    FLOAT64 = "Float64"
    INT64 = "Int64"
    STRING = "String"
    TIME = "Time"
    GROUP = "Group"
    LOGVALUER = "LogValuer"


@runtime_checkable
class LogValuer(Protocol):
    """Object that computes its own value when a record is rendered."""

    def log_value(self) -> Any: ...


@dataclass(frozen=True, slots=True)
class Value:
    """Kind-tagged attribute value. ``Value()`` is the zero value."""

    kind: Kind = Kind.ANY
    payload: Any = None

    def resolve(self) -> "Value":
        """Force deferred values.

        A ``log_value()`` that keeps returning deferred values is given up on
        after a fixed number of calls and replaced by an error string.
        """

        value = self
        for _ in range(_MAX_LOG_VALUES):
            if value.kind is not Kind.LOGVALUER:
                return value
            value = any_value(value.payload.log_value())
        return any_value(
            f"LogValue called too many times on Value of type {type(value.payload).__name__}"
        )

    def group(self) -> tuple["Attr", ...]:
        if self.kind is not Kind.GROUP:
            raise TypeError(f"value kind is {self.kind.value}, not Group")
        return self.payload

    def time(self) -> datetime:
        if self.kind is not Kind.TIME:
            raise TypeError(f"value kind is {self.kind.value}, not Time")
        return self.payload

    def is_zero(self) -> bool:
        return self.kind is Kind.ANY and self.payload is None

    def __str__(self) -> str:
        if self.kind is Kind.STRING:
            return self.payload
        if self.kind is Kind.BOOL:
            return "true" if self.payload else "false"
        if self.kind is Kind.GROUP:
            return "[" + " ".join(str(attr) for attr in self.payload) + "]"
        if self.payload is None:
            return "<nil>"
        return str(self.payload)


@dataclass(frozen=True, slots=True)
class Attr:
    key: str = ""
    value: Value = field(default_factory=Value)

    def is_empty(self) -> bool:
        return self.key == "" and self.value.is_zero()

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


def string_value(text: str) -> Value:
    return Value(Kind.STRING, text)


def int_value(number: int) -> Value:
    return Value(Kind.INT64, int(number))


def float_value(number: float) -> Value:
    return Value(Kind.FLOAT64, float(number))


def bool_value(flag: bool) -> Value:
    return Value(Kind.BOOL, bool(flag))


def time_value(moment: datetime) -> Value:
    return Value(Kind.TIME, moment)


def duration_value(delta: timedelta) -> Value:
    return Value(Kind.DURATION, delta)


def group_value(*attrs: Attr) -> Value:
    """Group of attributes; nested groups with no children are dropped."""

    return Value(Kind.GROUP, tuple(attr for attr in attrs if not _is_empty_group(attr)))


def _is_empty_group(attr: Attr) -> bool:
    return attr.value.kind is Kind.GROUP and not attr.value.payload


def any_value(obj: Any) -> Value:
    """Build a :class:`Value` from an arbitrary object based on its type."""

    if isinstance(obj, Value):
        return obj
    if isinstance(obj, str):
        return string_value(obj)
    if isinstance(obj, Level):
        return Value(Kind.ANY, obj)
    if isinstance(obj, bool):
        return bool_value(obj)
    if isinstance(obj, int):
        return int_value(obj)
    if isinstance(obj, float):
        return float_value(obj)
    if isinstance(obj, datetime):
        return time_value(obj)
    if isinstance(obj, timedelta):
        return duration_value(obj)
    if isinstance(obj, Attr):
        return group_value(obj)
    if isinstance(obj, Mapping):
        return group_value(*(any_attr(str(key), item) for key, item in obj.items()))
    if isinstance(obj, (list, tuple)) and obj and all(isinstance(item, Attr) for item in obj):
        return group_value(*obj)
    if isinstance(obj, LogValuer):
        return Value(Kind.LOGVALUER, obj)
    return Value(Kind.ANY, obj)


def string(key: str, text: str) -> Attr:
    return Attr(key, string_value(text))


def integer(key: str, number: int) -> Attr:
    return Attr(key, int_value(number))


def floating(key: str, number: float) -> Attr:
    return Attr(key, float_value(number))


def boolean(key: str, flag: bool) -> Attr:
    return Attr(key, bool_value(flag))


def time_attr(key: str, moment: datetime) -> Attr:
    return Attr(key, time_value(moment))


def group(key: str, *items: Any) -> Attr:
    """Group attribute from attrs and/or alternating key/value arguments."""

    return Attr(key, group_value(*args_to_attrs(items)))


def any_attr(key: str, obj: Any) -> Attr:
    return Attr(key, any_value(obj))


def args_to_attrs(args: Sequence[Any], kwargs: Mapping[str, Any] | None = None) -> list[Attr]:
    """Convert front-end call arguments into attributes.

    ``args`` may mix :class:`Attr` instances with alternating key/value
    pairs. A key without a value, or a value without a string key, is kept
    under the ``!BADKEY`` key so nothing passed by the caller is lost.
    """

    attrs: list[Attr] = []
    items = list(args)
    index = 0
    while index < len(items):
        current = items[index]
        if isinstance(current, Attr):
            attrs.append(current)
            index += 1
        elif isinstance(current, str):
            if index + 1 == len(items):
                attrs.append(string(BAD_KEY, current))
                index += 1
            else:
                attrs.append(any_attr(current, items[index + 1]))
                index += 2
        else:
            attrs.append(any_attr(BAD_KEY, current))
            index += 1
    for key, item in (kwargs or {}).items():
        attrs.append(any_attr(key, item))
    return attrs
