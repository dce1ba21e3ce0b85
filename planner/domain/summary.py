from __future__ import annotations

from .enums import RecurrenceType
from .recurrence import RecurrencePattern

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def summarize(pattern: RecurrencePattern) -> str:
    """Short phrase for showing a pattern next to a task, e.g. "Every 2 weeks"."""
    interval = pattern.interval

    if pattern.type == RecurrenceType.DAILY:
        return "Daily" if interval == 1 else f"Every {interval} days"

    if pattern.type == RecurrenceType.WEEKLY:
        if interval == 1 and pattern.days_of_week:
            if len(pattern.days_of_week) == len(DAY_NAMES):
                return "Daily"
            return f"Every week on {_day_list(pattern.days_of_week)}"
        return f"Every {interval} weeks"

    if pattern.type == RecurrenceType.WEEKDAY:
        return "Every weekday" if interval == 1 else f"Every {interval} weekdays"

    if pattern.type == RecurrenceType.MONTHLY:
        if interval == 1 and pattern.day_of_month:
            return f"Every month on day {pattern.day_of_month}"
        return f"Every {interval} months"

    if pattern.type == RecurrenceType.YEARLY:
        if interval == 1 and pattern.month and pattern.day_of_month:
            return f"Every year on {MONTH_NAMES[pattern.month - 1]} {pattern.day_of_month}"
        return f"Every {interval} years"

    if pattern.type == RecurrenceType.CUSTOM:
        parts = []
        if pattern.days_of_week:
            parts.append(f"on {_day_list(pattern.days_of_week)}")
        if pattern.day_of_month:
            parts.append(f"on day {pattern.day_of_month}")
        if pattern.month:
            parts.append(f"in {MONTH_NAMES[pattern.month - 1]}")
        every = f"every {interval} " if interval > 1 else ""
        return f"Custom {every}{' '.join(parts)}".strip()

    return "Recurring"


def _day_list(days) -> str:
    return ", ".join(DAY_NAMES[day] for day in days)
