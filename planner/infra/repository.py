from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import func, or_, select

from planner.domain.entities import TaskEntity
from planner.domain.filters import TaskFilters

from .db import SessionLocal
from .models import TaskModel

UPCOMING_DAYS = 7


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        name=model.name,
        description=model.description,
        date=model.date,
        deadline=model.deadline,
        priority=model.priority,
        is_recurring=model.is_recurring,
        recurring_pattern=model.recurring_pattern,
        completed_at=model.completed_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
        sort_order=model.sort_order,
    )


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def _apply_filters(stmt, filters: TaskFilters, today: date | None = None) -> object:
    today_start, tomorrow_start = _day_bounds(today or date.today())
    is_open = TaskModel.completed_at.is_(None)

    if filters.filter_key == "open":
        stmt = stmt.where(is_open)
    elif filters.filter_key == "completed":
        stmt = stmt.where(TaskModel.completed_at.is_not(None))
    elif filters.filter_key == "recurring":
        stmt = stmt.where(TaskModel.is_recurring.is_(True))
    elif filters.filter_key == "overdue":
        stmt = stmt.where(
            TaskModel.date.is_not(None),
            TaskModel.date < today_start,
            is_open,
        )
    elif filters.filter_key == "upcoming":
        horizon = today_start + timedelta(days=UPCOMING_DAYS + 1)
        stmt = stmt.where(
            TaskModel.date.is_not(None),
            TaskModel.date >= today_start,
            TaskModel.date < horizon,
            is_open,
        )

    if filters.due_on:
        day_start, day_end = _day_bounds(filters.due_on)
        stmt = stmt.where(TaskModel.date >= day_start, TaskModel.date < day_end)

    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(
            or_(
                TaskModel.name.ilike(pattern),
                TaskModel.description.ilike(pattern),
            )
        )

    return stmt


class TaskRepository:
    def list_tasks(self, filters: TaskFilters, today: date | None = None) -> list[TaskEntity]:
        with SessionLocal() as session:
            stmt = select(TaskModel)
            stmt = _apply_filters(stmt, filters, today)
            stmt = stmt.order_by(
                TaskModel.sort_order.asc(),
                TaskModel.date.is_(None),
                TaskModel.date.asc(),
                TaskModel.priority.desc(),
                TaskModel.created_at.desc(),
            )
            return [_to_entity(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: int) -> Optional[TaskEntity]:
        with SessionLocal() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def create_task(self, data: dict) -> TaskEntity:
        with SessionLocal() as session:
            if data.get("sort_order") is None:
                data["sort_order"] = self._next_sort_order(session)
            task = TaskModel(**data)
            session.add(task)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def update_task(self, task_id: int, data: dict) -> Optional[TaskEntity]:
        with SessionLocal() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None

            for key, value in data.items():
                setattr(task, key, value)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def reorder_tasks(self, task_ids: list[int]) -> None:
        if not task_ids:
            return
        with SessionLocal() as session:
            tasks = session.scalars(select(TaskModel).where(TaskModel.id.in_(task_ids))).all()
            order_map = {task_id: index for index, task_id in enumerate(task_ids, start=1)}
            for task in tasks:
                task.sort_order = order_map.get(task.id, task.sort_order)
            session.commit()

    def delete_task(self, task_id: int) -> None:
        with SessionLocal() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return
            session.delete(task)
            session.commit()

    def list_recurring(self) -> list[TaskEntity]:
        with SessionLocal() as session:
            stmt = (
                select(TaskModel)
                .where(
                    TaskModel.is_recurring.is_(True),
                    TaskModel.completed_at.is_(None),
                )
                .order_by(TaskModel.date.is_(None), TaskModel.date.asc(), TaskModel.id.asc())
            )
            return [_to_entity(task) for task in session.scalars(stmt)]

    def list_due(self, today: date | None = None) -> list[TaskEntity]:
        _, tomorrow_start = _day_bounds(today or date.today())
        with SessionLocal() as session:
            stmt = (
                select(TaskModel)
                .where(
                    TaskModel.date.is_not(None),
                    TaskModel.date < tomorrow_start,
                    TaskModel.completed_at.is_(None),
                )
                .order_by(TaskModel.date.asc())
            )
            return [_to_entity(task) for task in session.scalars(stmt)]

    @staticmethod
    def _next_sort_order(session) -> int:
        max_order = session.scalar(select(func.max(TaskModel.sort_order)))
        return (max_order or 0) + 1
