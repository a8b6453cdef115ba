"""IMAP connector for reading mailbox headers using imap-tools."""

import imaplib
import logging
from collections.abc import Iterator

from imap_tools import ImapToolsError, MailBox, MailMessage

from taskmail.email.connectors.base import BaseConnector, set_socket_timeout
from taskmail.email.connectors.config import IMAPConfig

logger = logging.getLogger(__name__)


class IMAPConnector(BaseConnector):
    """Read-only IMAP connector over implicit TLS."""

    def __init__(self, config: IMAPConfig) -> None:
        self.config = config
        self._mailbox: MailBox | None = None

    @property
    def host(self) -> str:
        return self.config.host

    def connect(self) -> None:
        """Establish TLS connection to IMAP server and log in."""
        timeouts = self.config.timeouts
        logger.debug(
            "Connecting to IMAP server (host=%s, port=%s)",
            self.config.host,
            self.config.port,
        )
        self._mailbox = MailBox(
            self.config.host,
            self.config.port,
            timeout=timeouts.connect_timeout,
        )
        set_socket_timeout(self._mailbox.client.sock, timeouts.auth_timeout)

        # No initial folder: the caller selects one explicitly in read-only mode
        self._mailbox.login(
            self.config.username,
            self.config.password.get_secret_value(),
            initial_folder=None,
        )
        set_socket_timeout(self._mailbox.client.sock, timeouts.operation_timeout)
        logger.info("IMAP connection established (host=%s)", self.config.host)

    def disconnect(self) -> None:
        """Close connection to IMAP server."""
        if not self._mailbox:
            return
        try:
            self._mailbox.logout()
        except (ImapToolsError, imaplib.IMAP4.error, OSError):
            logger.debug("IMAP logout failed (connection may already be closed)")
            try:
                self._mailbox.client.shutdown()
            except (OSError, imaplib.IMAP4.error):
                pass
        finally:
            self._mailbox = None
        logger.info("IMAP connection closed (host=%s)", self.config.host)

    def select_folder(self, folder: str) -> None:
        """Select a folder in read-only mode so no flags are changed."""
        if not self._mailbox:
            raise RuntimeError("Not connected. Call connect() first.")
        self._mailbox.folder.set(folder, readonly=True)

    def fetch_headers(self) -> Iterator[MailMessage]:
        """Lazily fetch message headers for the whole selected folder.

        Messages come back in server order, one round trip each, so a caller
        that stops iterating early does not download the rest.
        """
        if not self._mailbox:
            raise RuntimeError("Not connected. Call connect() first.")
        return self._mailbox.fetch("ALL", mark_seen=False, headers_only=True, bulk=False)
