"""Recurrence patterns: the value type and the lenient parser that builds it.

Stored patterns come in three shapes. Rows written by current code hold a
JSON object, older rows hold a bare keyword such as ``"weekly"``, and Python
callers may pass a mapping directly. :func:`resolve_raw` sorts input into one
of those shapes and :func:`normalize_pattern` turns the fields into a
:class:`RecurrencePattern` without ever raising. Malformed data degrades to
a daily pattern with interval 1.
"""
from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union

from dateutil import parser as date_parser

from .enums import RecurrenceType

DEFAULT_TYPE = RecurrenceType.DAILY
DEFAULT_INTERVAL = 1

MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH = 1, 31
MIN_MONTH, MAX_MONTH = 1, 12
MIN_WEEKDAY, MAX_WEEKDAY = 0, 6

_TYPE_VALUES = frozenset(item.value for item in RecurrenceType)
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# camelCase is the stored form; snake_case is accepted from Python callers.
_FIELD_ALIASES = {
    "type": ("type",),
    "interval": ("interval",),
    "daysOfWeek": ("daysOfWeek", "days_of_week"),
    "dayOfMonth": ("dayOfMonth", "day_of_month"),
    "month": ("month",),
    "endDate": ("endDate", "end_date"),
}


@dataclass(frozen=True)
class RecurrencePattern:
    type: RecurrenceType = DEFAULT_TYPE
    interval: int = DEFAULT_INTERVAL
    days_of_week: tuple[int, ...] | None = None
    day_of_month: int | None = None
    month: int | None = None
    end_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "interval": self.interval}
        if self.days_of_week:
            data["daysOfWeek"] = list(self.days_of_week)
        if self.day_of_month is not None:
            data["dayOfMonth"] = self.day_of_month
        if self.month is not None:
            data["month"] = self.month
        if self.end_date is not None:
            data["endDate"] = self.end_date
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    def end_datetime(self) -> datetime | None:
        if not self.end_date:
            return None
        return parse_end_date(self.end_date)


@dataclass(frozen=True)
class Structured:
    """A mapping of pattern fields handed over as-is."""

    fields: Mapping[str, Any]


@dataclass(frozen=True)
class Encoded:
    """Text that decoded as JSON. ``payload`` is whatever it decoded to."""

    text: str
    payload: Any


@dataclass(frozen=True)
class Legacy:
    """Text that is not JSON, read as a bare type keyword."""

    keyword: str


RawPattern = Union[Structured, Encoded, Legacy]


def resolve_raw(raw: Any) -> RawPattern:
    if isinstance(raw, RecurrencePattern):
        return Structured(raw.to_dict())
    if isinstance(raw, Mapping):
        return Structured(raw)
    text = "" if raw is None else str(raw)
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        return Legacy(text)
    return Encoded(text, payload)


def parse_pattern(raw: Any) -> RecurrencePattern:
    """Build a pattern from a mapping, JSON text or a legacy keyword."""
    resolved = resolve_raw(raw)
    if isinstance(resolved, Structured):
        fields = resolved.fields
    elif isinstance(resolved, Encoded):
        fields = resolved.payload if isinstance(resolved.payload, Mapping) else {}
    else:
        fields = {"type": resolved.keyword, "interval": DEFAULT_INTERVAL}
    return normalize_pattern(fields)


def normalize_pattern(fields: Any) -> RecurrencePattern:
    if not isinstance(fields, Mapping):
        fields = {}
    return RecurrencePattern(
        type=normalize_type(_pick(fields, "type")),
        interval=normalize_interval(_pick(fields, "interval")),
        days_of_week=normalize_days_of_week(_pick(fields, "daysOfWeek")),
        day_of_month=normalize_day_of_month(_pick(fields, "dayOfMonth")),
        month=normalize_month(_pick(fields, "month")),
        end_date=normalize_end_date(_pick(fields, "endDate")),
    )


def normalize_type(value: Any) -> RecurrenceType:
    if isinstance(value, str) and value in _TYPE_VALUES:
        return RecurrenceType(value)
    return DEFAULT_TYPE


def normalize_interval(value: Any) -> int:
    return max(DEFAULT_INTERVAL, _coerce_int(value) or DEFAULT_INTERVAL)


def normalize_days_of_week(value: Any) -> tuple[int, ...] | None:
    if not isinstance(value, (list, tuple)):
        return None
    days = sorted({int(day) for day in value if _is_weekday(day)})
    return tuple(days) or None


def normalize_day_of_month(value: Any) -> int | None:
    return _clamp(_coerce_int(value), MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH)


def normalize_month(value: Any) -> int | None:
    return _clamp(_coerce_int(value), MIN_MONTH, MAX_MONTH)


def normalize_end_date(value: Any) -> str | None:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, str) and value and parse_end_date(value) is not None:
        return value
    return None


def parse_end_date(text: str) -> datetime | None:
    """Parse ``text`` only when it names a full calendar date on its own.

    Missing parts would otherwise be filled in from today, so the text is
    parsed against two different defaults and rejected if they disagree.
    """
    try:
        first, second = (date_parser.parse(text, default=default) for default in _PARSE_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def _pick(fields: Mapping[str, Any], key: str) -> Any:
    for alias in _FIELD_ALIASES[key]:
        if alias in fields:
            return fields[alias]
    return None


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def _clamp(value: int | None, low: int, high: int) -> int | None:
    # zero counts as "not set"
    if not value:
        return None
    return max(low, min(high, value))


def _is_weekday(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and not value.is_integer():
        return False
    return MIN_WEEKDAY <= value <= MAX_WEEKDAY
