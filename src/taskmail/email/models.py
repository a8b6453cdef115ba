"""Email data models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EmailAddress(BaseModel):
    """Parsed email address with optional display name."""

    name: str | None = None
    address: str

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address


class NotificationReason(str, Enum):
    """Why a task notification is being sent."""

    CREATED = "created"
    UPDATED = "updated"
    REMINDER = "reminder"


class NotificationRequest(BaseModel):
    """A single task notification to deliver. Never persisted."""

    task_title: str
    recipient_address: str
    reason: str


class OutboundMessage(BaseModel):
    """Plain-text message ready for submission."""

    from_name: str | None = None
    from_address: str
    to_address: str
    subject: str
    body: str


class MessageSummary(BaseModel):
    """Envelope metadata of a mailbox message.

    Serialized with the ``Subject``/``From``/``Date`` keys exposed by the API.
    """

    model_config = ConfigDict(populate_by_name=True)

    subject: str = Field(serialization_alias="Subject")
    sender: str = Field(serialization_alias="From")
    date: datetime = Field(serialization_alias="Date")
