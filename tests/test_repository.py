from __future__ import annotations

import json
from datetime import date, datetime

import pytest

from planner.domain.filters import TaskFilters
from planner.infra.repository import TaskRepository
from planner.services.task_service import TaskService

pytestmark = pytest.mark.usefixtures("db_schema")

TODAY = date(2024, 1, 15)


@pytest.fixture()
def repo() -> TaskRepository:
    return TaskRepository()


def _seed(repo: TaskRepository) -> dict[str, int]:
    ids = {}
    ids["standup"] = repo.create_task({
        "name": "Standup",
        "description": "daily sync",
        "date": datetime(2024, 1, 15, 9, 30),
        "is_recurring": True,
        "recurring_pattern": '{"type":"weekday","interval":1}',
    }).id
    ids["taxes"] = repo.create_task({"name": "Taxes", "date": datetime(2024, 1, 10)}).id
    ids["trip"] = repo.create_task({"name": "Trip", "date": datetime(2024, 1, 20)}).id
    ids["done"] = repo.create_task({
        "name": "Old habit",
        "date": datetime(2024, 1, 1),
        "is_recurring": True,
        "recurring_pattern": "weekly",
        "completed_at": datetime(2024, 1, 2),
    }).id
    return ids


def _names(tasks) -> list[str]:
    return sorted(task.name for task in tasks)


def test_create_and_get(repo: TaskRepository) -> None:
    first = repo.create_task({"name": "Write report"})
    second = repo.create_task({"name": "Send report"})

    loaded = repo.get_task(first.id)

    assert loaded == first
    assert loaded.is_recurring is False
    assert loaded.recurring_pattern is None
    assert second.sort_order == first.sort_order + 1


def test_get_missing_task(repo: TaskRepository) -> None:
    assert repo.get_task(404) is None
    assert repo.update_task(404, {"name": "x"}) is None


def test_filters(repo: TaskRepository) -> None:
    _seed(repo)

    assert _names(repo.list_tasks(TaskFilters(), TODAY)) == ["Old habit", "Standup", "Taxes", "Trip"]
    assert _names(repo.list_tasks(TaskFilters("recurring"), TODAY)) == ["Old habit", "Standup"]
    assert _names(repo.list_tasks(TaskFilters("completed"), TODAY)) == ["Old habit"]
    assert _names(repo.list_tasks(TaskFilters("open"), TODAY)) == ["Standup", "Taxes", "Trip"]
    assert _names(repo.list_tasks(TaskFilters("overdue"), TODAY)) == ["Taxes"]
    assert _names(repo.list_tasks(TaskFilters("upcoming"), TODAY)) == ["Standup", "Trip"]
    assert _names(repo.list_tasks(TaskFilters(search="SYNC"), TODAY)) == ["Standup"]
    assert _names(repo.list_tasks(TaskFilters(due_on=date(2024, 1, 20)), TODAY)) == ["Trip"]


def test_unknown_filter_key() -> None:
    with pytest.raises(ValueError):
        TaskFilters("someday")


def test_list_recurring_skips_completed(repo: TaskRepository) -> None:
    _seed(repo)

    assert _names(repo.list_recurring()) == ["Standup"]


def test_list_due(repo: TaskRepository) -> None:
    _seed(repo)

    assert _names(repo.list_due(TODAY)) == ["Standup", "Taxes"]


def test_reorder_and_delete(repo: TaskRepository) -> None:
    ids = _seed(repo)

    repo.reorder_tasks([ids["trip"], ids["taxes"]])
    repo.delete_task(ids["done"])

    assert repo.get_task(ids["trip"]).sort_order == 1
    assert repo.get_task(ids["taxes"]).sort_order == 2
    assert repo.get_task(ids["done"]) is None


def test_complete_recurring_task_persists_follow_up(repo: TaskRepository) -> None:
    ids = _seed(repo)
    service = TaskService(repo)

    service.complete_task(ids["standup"])

    open_recurring = repo.list_recurring()
    assert len(open_recurring) == 1
    follow_up = open_recurring[0]
    assert follow_up.id != ids["standup"]
    assert follow_up.date == datetime(2024, 1, 16, 9, 30)
    assert json.loads(follow_up.recurring_pattern) == {"type": "weekday", "interval": 1}
