"""API models for tasks."""

from pydantic import BaseModel, ConfigDict, Field


class TaskBase(BaseModel):
    """Fields shared by task payloads."""

    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    is_completed: bool = False


class TaskCreate(TaskBase):
    """Payload for creating a task."""


class TaskUpdate(TaskBase):
    """Payload for replacing a task.

    ``id`` is optional; when present it must match the id in the URL.
    """

    id: int | None = None


class TaskRead(TaskBase):
    """Task as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
