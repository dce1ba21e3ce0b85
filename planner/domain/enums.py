from __future__ import annotations

from enum import StrEnum


class RecurrenceType(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    WEEKDAY = "weekday"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"
