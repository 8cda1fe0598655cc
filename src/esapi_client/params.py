from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Union


BOOLEAN = "boolean"
NUMBER = "number"
STRING = "string"
ENUM = "enum"
LIST = "list"
DURATION = "duration"
DATE = "date"
ANY = "any"

PARAM_KINDS = {BOOLEAN, NUMBER, STRING, ENUM, LIST, DURATION, DATE, ANY}


@dataclass(frozen=True, slots=True)
class Timestamp:
    """An absolute point in time."""

    value: datetime

    def format(self) -> str:
        return self.value.isoformat()


@dataclass(frozen=True, slots=True)
class DateMath:
    """A relative time expression evaluated by the server, e.g. ``now-1d/d``."""

    expression: str

    def format(self) -> str:
        return self.expression


DateValue = Union[Timestamp, DateMath, int, float]


def format_duration(value: timedelta) -> str:
    """Render a duration in the server's time unit syntax."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros < 1_000:
        return f"{micros * 1_000}nanos"
    return f"{micros // 1_000}ms"


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def join_list(values: Iterable[Any]) -> str:
    return ",".join(stringify(value) for value in values)


def stringify(value: Any) -> str:
    """Fallback for values without a typed formatter."""
    if isinstance(value, bool):
        return format_bool(value)
    if isinstance(value, (Timestamp, DateMath)):
        return value.format()
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return join_list(value)
    return str(value)


def _format_date(value: DateValue) -> str | None:
    if isinstance(value, (Timestamp, DateMath)):
        text = value.format()
        return text or None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return stringify(value) or None


def format_value(kind: str, value: Any) -> str | None:
    if value is None:
        return None

    if kind == BOOLEAN:
        if isinstance(value, bool):
            return format_bool(value)
        return stringify(value)

    if kind == NUMBER:
        if isinstance(value, bool):
            return format_bool(value)
        return str(value)

    if kind in {STRING, ENUM}:
        text = stringify(value)
        return text or None

    if kind == LIST:
        if isinstance(value, str):
            return value or None
        items = list(value)
        if not items:
            return None
        return join_list(items)

    if kind == DURATION:
        if isinstance(value, timedelta):
            if not value:
                return None
            return format_duration(value)
        text = stringify(value)
        return text or None

    if kind == DATE:
        return _format_date(value)

    text = stringify(value)
    return text or None


def format_path_value(value: Any) -> str:
    """Render a path part; lists are joined with ``,``, empties render ``""``."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return join_list(value)
    return stringify(value)
