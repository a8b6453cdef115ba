"""SMTP connector for sending emails using smtplib."""

import logging
import re
import smtplib
import ssl
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate, make_msgid

from taskmail.email.connectors.base import BaseConnector, set_socket_timeout
from taskmail.email.connectors.config import SMTPConfig
from taskmail.email.models import OutboundMessage

logger = logging.getLogger(__name__)

_HEADER_INJECTION_RE = re.compile(r"[\r\n\0]")


def _validate_header_value(value: str) -> None:
    """Validate a string is safe from SMTP header injection.

    Raises:
        ValueError: If the value contains newline, carriage return, or null characters.
    """
    if _HEADER_INJECTION_RE.search(value):
        # SECURITY: Do not log the value, it may contain injection payloads
        logger.warning("Header injection attempt detected")
        raise ValueError("Value contains invalid characters (newline, carriage return, or null)")


class SMTPConnector(BaseConnector):
    """Connector for submitting emails via SMTP with STARTTLS."""

    def __init__(self, config: SMTPConfig) -> None:
        """Initialize SMTP connector.

        Args:
            config: SMTP server configuration.
        """
        self.config = config
        self._connection: smtplib.SMTP | None = None

    @property
    def host(self) -> str:
        return self.config.host

    def connect(self) -> None:
        """Connect in plaintext, upgrade with STARTTLS, then log in."""
        timeouts = self.config.timeouts
        logger.debug(
            "Connecting to SMTP server (host=%s, port=%s)",
            self.config.host,
            self.config.port,
        )
        self._connection = smtplib.SMTP(
            self.config.host,
            self.config.port,
            timeout=timeouts.connect_timeout,
        )
        set_socket_timeout(self._connection.sock, timeouts.auth_timeout)

        self._connection.starttls(context=ssl.create_default_context())
        logger.debug("STARTTLS negotiated (host=%s)", self.config.host)

        self._connection.login(
            self.config.username,
            self.config.password.get_secret_value(),
        )
        set_socket_timeout(self._connection.sock, timeouts.operation_timeout)
        logger.info("SMTP connection established (host=%s)", self.config.host)

    def disconnect(self) -> None:
        """Close connection to SMTP server."""
        if not self._connection:
            return
        try:
            self._connection.quit()
        except OSError:
            # smtplib.SMTPException derives from OSError
            logger.debug("SMTP quit failed (connection may already be closed)")
            try:
                self._connection.close()
            except OSError:
                pass
        finally:
            self._connection = None
        logger.info("SMTP connection closed (host=%s)", self.config.host)

    def build_message(self, message: OutboundMessage) -> MIMEText:
        """Build a plain-text MIME message with header injection validation.

        Args:
            message: The composed outbound message.

        Returns:
            MIMEText message ready for ``sendmail``.

        Raises:
            ValueError: If any header value contains injection characters.
        """
        _validate_header_value(message.from_address)
        _validate_header_value(message.to_address)
        _validate_header_value(message.subject)
        if message.from_name:
            _validate_header_value(message.from_name)

        msg = MIMEText(message.body, "plain", "utf-8")
        if message.from_name:
            msg["From"] = formataddr((message.from_name, message.from_address))
        else:
            msg["From"] = message.from_address
        msg["To"] = message.to_address
        msg["Subject"] = message.subject
        msg["Date"] = formatdate(localtime=True)
        msg["Message-ID"] = make_msgid()
        return msg

    def send(self, message: OutboundMessage) -> None:
        """Send a composed message over the open connection.

        Raises:
            RuntimeError: If not connected to SMTP server.
            ValueError: If a header value is unsafe.
            smtplib.SMTPException: If the server rejects the message.
        """
        if not self._connection:
            raise RuntimeError("Not connected. Call connect() first.")

        msg = self.build_message(message)
        self._connection.sendmail(message.from_address, [message.to_address], msg.as_string())
        logger.info("Email sent (host=%s, subject=%r)", self.config.host, message.subject)
