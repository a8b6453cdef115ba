"""Task persistence."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskmail.db.models import TaskItem
from taskmail.exceptions import TaskNotFoundError
from taskmail.models import TaskCreate, TaskUpdate


class TaskStore:
    """Create/read/update/delete access to tasks within one DB session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list(self) -> Sequence[TaskItem]:
        return self._session.scalars(select(TaskItem).order_by(TaskItem.id)).all()

    def get(self, task_id: int) -> TaskItem:
        """Return a task by id.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        task = self._session.get(TaskItem, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def create(self, data: TaskCreate) -> TaskItem:
        task = TaskItem(**data.model_dump())
        self._session.add(task)
        self._session.commit()
        self._session.refresh(task)
        return task

    def update(self, task_id: int, data: TaskUpdate) -> TaskItem:
        """Replace the fields of an existing task.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        task = self.get(task_id)
        for field, value in data.model_dump(exclude={"id"}).items():
            setattr(task, field, value)
        self._session.commit()
        return task

    def delete(self, task_id: int) -> None:
        """Delete a task.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        task = self.get(task_id)
        self._session.delete(task)
        self._session.commit()
