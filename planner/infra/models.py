from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from .db import Base


def utcnow() -> datetime:
    return datetime.utcnow()


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime, nullable=True, index=True)
    deadline = Column(DateTime, nullable=True)
    priority = Column(Integer, nullable=False, default=0)
    # JSON object text, or a bare type keyword on rows from older versions
    recurring_pattern = Column(Text, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False, index=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    sort_order = Column(Integer, nullable=False, default=0)
