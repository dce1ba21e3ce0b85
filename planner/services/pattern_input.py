"""Strict checks for recurrence patterns submitted with a task.

The engine in :mod:`planner.domain.recurrence` accepts anything and quietly
falls back to defaults. Input from a user goes through here first, so bad
values are reported instead of being stored and silently reinterpreted.
"""
from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

from planner.domain.enums import RecurrenceType
from planner.domain.recurrence import RecurrencePattern

ALLOWED_TYPES = tuple(item.value for item in RecurrenceType)
REQUIRED_MESSAGE = "Recurring pattern is required for recurring tasks"


class PatternValidationError(ValueError):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def prepare_pattern(raw: Any, is_recurring: bool) -> str | None:
    """Validate ``raw`` and return the JSON text to store with the task.

    Non-recurring tasks store no pattern at all.
    """
    if not is_recurring:
        return None
    if not raw:
        raise PatternValidationError([REQUIRED_MESSAGE])
    cleaned = validate_payload(_decode(raw))
    return json.dumps(cleaned, separators=(",", ":"))


def validate_payload(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise PatternValidationError(["Recurring pattern must be an object"])

    errors: list[str] = []
    cleaned: dict[str, Any] = {}

    kind = payload.get("type")
    if isinstance(kind, str) and kind in ALLOWED_TYPES:
        cleaned["type"] = kind
    else:
        errors.append(f"type must be one of: {', '.join(ALLOWED_TYPES)}")

    interval = payload.get("interval", 1)
    if _is_number(interval) and interval >= 1:
        cleaned["interval"] = interval
    else:
        errors.append("interval must be a number of at least 1")

    days = payload.get("daysOfWeek")
    if days is not None:
        if isinstance(days, list) and all(_is_number(day) and 0 <= day <= 6 for day in days):
            cleaned["daysOfWeek"] = days
        else:
            errors.append("daysOfWeek must be a list of numbers between 0 and 6")

    _check_range(payload, "dayOfMonth", 1, 31, cleaned, errors)
    _check_range(payload, "month", 1, 12, cleaned, errors)

    end_date = payload.get("endDate")
    if end_date is not None:
        if isinstance(end_date, str):
            cleaned["endDate"] = end_date
        else:
            errors.append("endDate must be a string")

    if errors:
        raise PatternValidationError(errors)
    return cleaned


def _decode(raw: Any) -> Any:
    if isinstance(raw, RecurrencePattern):
        return raw.to_dict()
    if isinstance(raw, Mapping):
        return raw
    if not isinstance(raw, str):
        raise PatternValidationError(["Recurring pattern must be an object or a string"])
    try:
        return json.loads(raw)
    except RecursionError:
        raise PatternValidationError(["Recurring pattern is nested too deeply"]) from None
    except ValueError:
        # legacy keyword; anything unknown is kept as a custom pattern
        keyword = raw.lower()
        kind = keyword if keyword in ALLOWED_TYPES else RecurrenceType.CUSTOM.value
        return {"type": kind, "interval": 1}


def _check_range(
    payload: Mapping[str, Any],
    key: str,
    low: int,
    high: int,
    cleaned: dict[str, Any],
    errors: list[str],
) -> None:
    value = payload.get(key)
    if value is None:
        return
    if _is_number(value) and low <= value <= high:
        cleaned[key] = value
    else:
        errors.append(f"{key} must be a number between {low} and {high}")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
