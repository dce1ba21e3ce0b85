from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol


class RecurringTask(Protocol):
    """Anything the recurrence engine can read a schedule from."""

    is_recurring: bool
    date: Optional[datetime]
    recurring_pattern: Optional[str]


@dataclass(frozen=True)
class TaskEntity:
    id: int | None
    name: str
    description: str
    date: Optional[datetime]
    deadline: Optional[datetime]
    priority: int
    is_recurring: bool
    recurring_pattern: str | None
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    sort_order: int
