"""Relational task storage."""

from taskmail.db.engine import Database
from taskmail.db.models import Base, TaskItem
from taskmail.db.store import TaskStore

__all__ = ["Base", "Database", "TaskItem", "TaskStore"]
