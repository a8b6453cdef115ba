"""Email models, connectors and transport sessions for taskmail."""

from taskmail.email.models import (
    EmailAddress,
    MessageSummary,
    NotificationReason,
    NotificationRequest,
    OutboundMessage,
)

__all__ = [
    "EmailAddress",
    "MessageSummary",
    "NotificationReason",
    "NotificationRequest",
    "OutboundMessage",
]
