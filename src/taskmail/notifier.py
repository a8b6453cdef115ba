"""Task notification delivery."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from taskmail.config import SMTPSettings
from taskmail.email.composer import compose
from taskmail.email.connectors.smtp import SMTPConnector
from taskmail.email.models import NotificationRequest, OutboundMessage
from taskmail.email.session import SessionRole, TransportSessionManager
from taskmail.exceptions import TransportError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notifier:
    """Composes and sends one notification email per call, synchronously.

    There is no queue and no retry: a failed send is reported to the caller
    and dropped.
    """

    def __init__(
        self,
        sessions: TransportSessionManager,
        sender: SMTPSettings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the notifier.

        Args:
            sessions: Session manager used to open the SMTP session.
            sender: Sender address and display name.
            clock: Source of the timestamp printed in the message body.
        """
        self._sessions = sessions
        self._sender = sender
        self._clock = clock

    def notify(self, request: NotificationRequest) -> OutboundMessage:
        """Send a notification for a task.

        The caller is responsible for skipping requests without a recipient.

        Args:
            request: What to notify about and whom.

        Returns:
            The message that was sent.

        Raises:
            TransportError: If the message could not be submitted.
        """
        logger.info(
            "Sending task notification (reason=%s, recipient=%s)",
            request.reason,
            request.recipient_address,
        )
        message = compose(request, self._sender, sent_at=self._clock())

        def _send(connector: SMTPConnector) -> None:
            connector.send(message)

        try:
            self._sessions.run(SessionRole.SUBMISSION, "send", _send)  # type: ignore[arg-type]
        except TransportError:
            logger.error(
                "Task notification failed (reason=%s, recipient=%s)",
                request.reason,
                request.recipient_address,
            )
            raise
        logger.info(
            "Task notification delivered (reason=%s, recipient=%s)",
            request.reason,
            request.recipient_address,
        )
        return message
