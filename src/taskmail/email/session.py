"""Scoped mail server sessions.

Every send or poll opens its own connection through
``TransportSessionManager.session()``, which guarantees the connection is
closed on every exit path and reports failures as ``TransportError``.
"""

import imaplib
import logging
import poplib
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TypeVar

from imap_tools import ImapToolsError

from taskmail.config import Settings
from taskmail.email.connectors.base import BaseConnector
from taskmail.email.connectors.config import IMAPConfig, POP3Config, SMTPConfig
from taskmail.email.connectors.imap import IMAPConnector
from taskmail.email.connectors.pop3 import POP3Connector
from taskmail.email.connectors.smtp import SMTPConnector
from taskmail.exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# smtplib.SMTPException, ssl.SSLError, socket.gaierror and TimeoutError are all OSError.
# ValueError covers header values rejected while building a message.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    imaplib.IMAP4.error,
    ImapToolsError,
    poplib.error_proto,
    ValueError,
)


class SessionRole(str, Enum):
    """What a mail session is opened for."""

    SUBMISSION = "smtp"
    RETRIEVAL_IMAP = "imap"
    RETRIEVAL_POP3 = "pop3"


class TransportSessionManager:
    """Opens one authenticated, encrypted session per logical operation.

    Sessions are never pooled or reused. A bounded semaphore caps the number
    of sessions open at once across all request threads.
    """

    def __init__(
        self,
        settings: Settings,
        connector_factory: Callable[[SessionRole], BaseConnector] | None = None,
    ) -> None:
        """Initialize the session manager.

        Args:
            settings: Application settings; only read, never modified.
            connector_factory: Builds a fresh connector for a role. Defaults to
                building SMTP/IMAP/POP3 connectors from ``settings``.
        """
        self._settings = settings
        self._connector_factory = connector_factory or self._create_connector
        self._gate = threading.BoundedSemaphore(settings.max_concurrent_sessions)

    def _create_connector(self, role: SessionRole) -> BaseConnector:
        smtp = self._settings.smtp
        timeouts = self._settings.timeouts

        if role is SessionRole.SUBMISSION:
            return SMTPConnector(
                SMTPConfig(
                    host=smtp.host,
                    port=smtp.port,
                    username=smtp.sender_email,
                    password=smtp.sender_password,
                    timeouts=timeouts,
                )
            )
        if role is SessionRole.RETRIEVAL_IMAP:
            return IMAPConnector(
                IMAPConfig(
                    host=self._settings.imap.host,
                    port=self._settings.imap.port,
                    username=smtp.sender_email,
                    password=smtp.sender_password,
                    timeouts=timeouts,
                )
            )
        if role is SessionRole.RETRIEVAL_POP3:
            return POP3Connector(
                POP3Config(
                    host=self._settings.pop3.host,
                    port=self._settings.pop3.port,
                    username=smtp.sender_email,
                    password=smtp.sender_password,
                    timeouts=timeouts,
                )
            )
        raise ValueError(f"Unsupported session role: {role}")

    @contextmanager
    def session(self, role: SessionRole, operation: str) -> Iterator[BaseConnector]:
        """Open an authenticated session for ``role`` and close it on exit.

        Args:
            role: Which server to connect to.
            operation: Name of the work done inside the session, used in logs
                and error messages (e.g. "send", "poll").

        Yields:
            The connected connector.

        Raises:
            TransportError: If connecting, authenticating or the operation
                itself fails at the transport level.
        """
        step = "connect"
        with self._gate:
            connector = self._connector_factory(role)
            try:
                logger.info(
                    "Opening %s session (host=%s, operation=%s)",
                    role.value,
                    connector.host,
                    operation,
                )
                connector.connect()
                step = operation
                yield connector
            except TRANSPORT_ERRORS as e:
                logger.warning(
                    "%s session failed (host=%s, step=%s): %s",
                    role.value,
                    connector.host,
                    step,
                    e,
                )
                raise TransportError(role.value, connector.host, step, e) from e
            finally:
                connector.disconnect()

    def run(self, role: SessionRole, operation: str, func: Callable[[BaseConnector], T]) -> T:
        """Run ``func`` with a freshly opened session and return its result."""
        with self.session(role, operation) as connector:
            return func(connector)
