from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

FILTER_KEYS = ("all", "open", "completed", "recurring", "overdue", "upcoming")


@dataclass(frozen=True)
class TaskFilters:
    filter_key: str = "all"
    search: str | None = None
    due_on: Optional[date] = None

    def __post_init__(self) -> None:
        if self.filter_key not in FILTER_KEYS:
            raise ValueError(f"Unknown task filter: {self.filter_key!r}")
