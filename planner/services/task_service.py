from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from planner.domain import occurrence
from planner.domain.entities import TaskEntity
from planner.domain.filters import TaskFilters
from planner.domain.recurrence import parse_pattern
from planner.domain.summary import summarize
from planner.infra.repository import TaskRepository
from planner.services.pattern_input import prepare_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecurrenceReport:
    task: TaskEntity
    summary: str
    next_date: datetime | None
    active: bool


class TaskService:
    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        return self._repo.list_tasks(filters)

    def get_task(self, task_id: int) -> TaskEntity | None:
        return self._repo.get_task(task_id)

    def create_task(self, data: dict) -> TaskEntity:
        return self._repo.create_task(self._normalize_data(data))

    def update_task(self, task_id: int, data: dict) -> TaskEntity | None:
        current = self._repo.get_task(task_id)
        if not current:
            return None
        return self._repo.update_task(task_id, self._normalize_data(data, current))

    def delete_task(self, task_id: int) -> None:
        self._repo.delete_task(task_id)

    def reorder_tasks(self, task_ids: list[int]) -> None:
        self._repo.reorder_tasks(task_ids)

    def list_due(self, today: date | None = None) -> list[TaskEntity]:
        return self._repo.list_due(today)

    def complete_task(self, task_id: int) -> TaskEntity | None:
        current = self._repo.get_task(task_id)
        if not current:
            return None
        if current.completed_at is not None:
            return current
        task = self._repo.update_task(task_id, {"completed_at": datetime.utcnow()})
        if not task:
            return None
        self._handle_recurrence(task)
        return task

    def next_occurrence(self, task_id: int) -> datetime | None:
        task = self._repo.get_task(task_id)
        return occurrence.next_occurrence(task) if task else None

    def describe_recurrence(self, task_id: int) -> str | None:
        task = self._repo.get_task(task_id)
        if not task or not task.is_recurring:
            return None
        return summarize(parse_pattern(task.recurring_pattern))

    def list_recurring(self, today: date | None = None) -> list[RecurrenceReport]:
        today = today or date.today()
        return [
            RecurrenceReport(
                task=task,
                summary=summarize(parse_pattern(task.recurring_pattern)),
                next_date=occurrence.next_occurrence(task),
                active=occurrence.is_active(task, today),
            )
            for task in self._repo.list_recurring()
        ]

    def _normalize_data(self, data: dict, current: TaskEntity | None = None) -> dict:
        normalized = dict(data)
        if "is_recurring" not in normalized and "recurring_pattern" not in normalized:
            return normalized

        is_recurring = bool(
            normalized.get("is_recurring", current.is_recurring if current else False)
        )
        raw = normalized.get(
            "recurring_pattern", current.recurring_pattern if current else None
        )
        normalized["is_recurring"] = is_recurring
        normalized["recurring_pattern"] = prepare_pattern(raw, is_recurring)
        return normalized

    def _handle_recurrence(self, task: TaskEntity) -> None:
        if not task.is_recurring or not task.date:
            return

        next_date = occurrence.next_occurrence(task)
        if next_date is None:
            logger.info("Recurring task %s has no further occurrences", task.id)
            return

        follow_up = self._repo.create_task({
            "name": task.name,
            "description": task.description,
            "priority": task.priority,
            "date": next_date,
            "is_recurring": True,
            "recurring_pattern": task.recurring_pattern,
        })
        logger.info(
            "Created task %s for the next occurrence of task %s on %s",
            follow_up.id,
            task.id,
            next_date.isoformat(),
        )
