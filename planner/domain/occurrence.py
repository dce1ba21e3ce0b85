"""Next-occurrence and activity checks for recurring tasks.

Both checks are advisory and never raise. When something goes wrong the
occurrence check answers "no next date" and the activity check answers
"still active".

Month, year and day overrides are applied one at a time and overflow spills
forward instead of clamping: forcing day 31 into April gives May 1, and
moving Jan 31 forward one month gives the 2nd or 3rd of March.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, TypeVar

from dateutil.relativedelta import relativedelta

from .entities import RecurringTask
from .enums import RecurrenceType
from .recurrence import RecurrencePattern, parse_pattern

logger = logging.getLogger(__name__)

Moment = TypeVar("Moment", bound=date)

SUNDAY = 0
SATURDAY = 6
WEEK_LENGTH = 7

_FAILURES = (ValueError, OverflowError, TypeError)


def next_occurrence(task: RecurringTask) -> Optional[date]:
    if not task.is_recurring or not task.date:
        return None
    try:
        pattern = parse_pattern(task.recurring_pattern or "")
        return compute_next(task.date, pattern)
    except _FAILURES:
        logger.warning(
            "Could not compute next occurrence for task %s",
            getattr(task, "id", None),
            exc_info=True,
        )
        return None


def compute_next(anchor: Moment, pattern: RecurrencePattern) -> Optional[Moment]:
    """Return the occurrence after ``anchor``, or None once the series has ended.

    The result has the same type as ``anchor`` and keeps its time of day.
    """
    step = pattern.interval

    if pattern.type == RecurrenceType.DAILY:
        candidate = anchor + timedelta(days=step)
    elif pattern.type == RecurrenceType.WEEKLY:
        candidate = anchor + timedelta(weeks=step)
        if pattern.days_of_week:
            candidate = find_next_weekday(candidate, pattern.days_of_week) or candidate
    elif pattern.type == RecurrenceType.WEEKDAY:
        candidate = anchor + timedelta(days=step)
        while weekday_index(candidate) in (SATURDAY, SUNDAY):
            candidate += timedelta(days=1)
    elif pattern.type == RecurrenceType.MONTHLY:
        candidate = set_month(anchor, anchor.month + step)
        if pattern.day_of_month:
            candidate = set_day(candidate, pattern.day_of_month)
    elif pattern.type == RecurrenceType.YEARLY:
        candidate = set_year(anchor, anchor.year + step)
        if pattern.month:
            candidate = set_month(candidate, pattern.month)
        if pattern.day_of_month:
            candidate = set_day(candidate, pattern.day_of_month)
    elif pattern.type == RecurrenceType.CUSTOM:
        candidate = _next_custom(anchor, pattern)
    else:
        return None

    if _past_end(candidate, pattern):
        return None
    return candidate


def is_active(task: RecurringTask, today: Optional[date] = None) -> bool:
    if not task.is_recurring or not task.recurring_pattern:
        return True
    try:
        end = parse_pattern(task.recurring_pattern).end_datetime()
    except _FAILURES:
        logger.warning(
            "Could not read end date for task %s",
            getattr(task, "id", None),
            exc_info=True,
        )
        return True
    if end is None:
        return True

    current = today or date.today()
    if isinstance(current, datetime):
        current = current.date()
    return current <= end.date()


def find_next_weekday(base: Moment, days_of_week) -> Optional[Moment]:
    """First day from ``base`` (inclusive) whose Sunday-based weekday is listed."""
    for offset in range(WEEK_LENGTH):
        candidate = base + timedelta(days=offset)
        if weekday_index(candidate) in days_of_week:
            return candidate
    return None


def weekday_index(moment: date) -> int:
    # 0 = Sunday ... 6 = Saturday
    return moment.isoweekday() % 7


def set_year(moment: Moment, year: int) -> Moment:
    return _roll(moment, year, moment.month, moment.day)


def set_month(moment: Moment, month: int) -> Moment:
    """Move to ``month`` (1-based, may run past 12) keeping the day."""
    return _roll(moment, moment.year, month, moment.day)


def set_day(moment: Moment, day: int) -> Moment:
    return _roll(moment, moment.year, moment.month, day)


def _roll(moment: Moment, year: int, month: int, day: int) -> Moment:
    first = moment.replace(day=1) + relativedelta(
        years=year - moment.year,
        months=month - moment.month,
    )
    return first + timedelta(days=day - 1)


def _next_custom(anchor: Moment, pattern: RecurrencePattern) -> Moment:
    if pattern.days_of_week:
        start = anchor + timedelta(days=1)
        return find_next_weekday(start, pattern.days_of_week) or start
    if pattern.day_of_month:
        return set_day(set_month(anchor, anchor.month + 1), pattern.day_of_month)
    return anchor + timedelta(days=1)


def _past_end(candidate: date, pattern: RecurrencePattern) -> bool:
    end = pattern.end_datetime()
    if end is None:
        return False
    if not isinstance(candidate, datetime):
        return candidate > end.date()
    if candidate.tzinfo is None:
        end = end.replace(tzinfo=None)
    elif end.tzinfo is None:
        end = end.replace(tzinfo=candidate.tzinfo)
    return candidate > end
