"""POP3 connector for retrieving messages using poplib."""

import logging
import poplib
import ssl

from imap_tools import MailMessage

from taskmail.email.connectors.base import BaseConnector, set_socket_timeout
from taskmail.email.connectors.config import POP3Config

logger = logging.getLogger(__name__)


class POP3Connector(BaseConnector):
    """POP3 connector over implicit TLS.

    POP3 has no header-only listing, so every message is retrieved in full.
    """

    def __init__(self, config: POP3Config) -> None:
        self.config = config
        self._connection: poplib.POP3_SSL | None = None

    @property
    def host(self) -> str:
        return self.config.host

    def connect(self) -> None:
        """Establish TLS connection to POP3 server and authenticate."""
        timeouts = self.config.timeouts
        logger.debug(
            "Connecting to POP3 server (host=%s, port=%s)",
            self.config.host,
            self.config.port,
        )
        self._connection = poplib.POP3_SSL(
            self.config.host,
            self.config.port,
            timeout=timeouts.connect_timeout,
            context=ssl.create_default_context(),
        )
        set_socket_timeout(self._connection.sock, timeouts.auth_timeout)

        self._connection.user(self.config.username)
        self._connection.pass_(self.config.password.get_secret_value())
        set_socket_timeout(self._connection.sock, timeouts.operation_timeout)
        logger.info("POP3 connection established (host=%s)", self.config.host)

    def disconnect(self) -> None:
        """Close connection to POP3 server."""
        if not self._connection:
            return
        try:
            self._connection.quit()
        except (poplib.error_proto, OSError):
            logger.debug("POP3 quit failed (connection may already be closed)")
            try:
                self._connection.close()
            except OSError:
                pass
        finally:
            self._connection = None
        logger.info("POP3 connection closed (host=%s)", self.config.host)

    def message_count(self) -> int:
        """Return the number of messages in the maildrop."""
        if not self._connection:
            raise RuntimeError("Not connected. Call connect() first.")
        count, _size = self._connection.stat()
        return count

    def fetch_message(self, index: int) -> MailMessage:
        """Retrieve and parse the full message at a zero-based index."""
        if not self._connection:
            raise RuntimeError("Not connected. Call connect() first.")
        # POP3 message numbers start at 1
        _response, lines, _octets = self._connection.retr(index + 1)
        return MailMessage.from_bytes(b"\r\n".join(lines))
