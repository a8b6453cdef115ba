"""Composition of task notification messages."""

from datetime import datetime, timezone

from taskmail.config import SMTPSettings
from taskmail.email.models import NotificationReason, NotificationRequest, OutboundMessage

CREATION_MARKER = NotificationReason.CREATED.value

STATUS_NEW = "New"
STATUS_UPDATED = "Updated"


def task_status(reason: str) -> str:
    """Derive the status line from the free-text reason label."""
    if CREATION_MARKER in reason.lower():
        return STATUS_NEW
    return STATUS_UPDATED


def compose(
    request: NotificationRequest,
    sender: SMTPSettings,
    sent_at: datetime | None = None,
) -> OutboundMessage:
    """Build the notification message for a task.

    Pure apart from reading the clock when ``sent_at`` is not given. Addresses
    are not validated here; the SMTP session rejects bad ones at send time.

    Args:
        request: Task title, recipient and reason label.
        sender: Configured sender address and display name.
        sent_at: Timestamp to print in the body (default: now, UTC).

    Returns:
        The composed OutboundMessage.
    """
    timestamp = sent_at or datetime.now(timezone.utc)
    body = "\n".join(
        [
            f"Task: {request.task_title}",
            f"Status: {task_status(request.reason)}",
            f"Sent at: {timestamp:%Y-%m-%d %H:%M:%S %Z}".rstrip(),
        ]
    )
    return OutboundMessage(
        from_name=sender.sender_name,
        from_address=sender.sender_email,
        to_address=request.recipient_address,
        subject=f"{request.reason}: {request.task_title}",
        body=body + "\n",
    )
