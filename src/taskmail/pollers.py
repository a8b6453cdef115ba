"""Recent-message polling over IMAP and POP3.

The two pollers share only their output type. IMAP works on a selected
folder and can fetch headers alone; POP3 only knows a message count and
full-message retrieval by index.
"""

import logging
from itertools import islice

from taskmail.defaults import DEFAULT_INBOX_FOLDER, DEFAULT_RECENT_MESSAGE_LIMIT
from taskmail.email.connectors.imap import IMAPConnector
from taskmail.email.connectors.pop3 import POP3Connector
from taskmail.email.models import MessageSummary
from taskmail.email.parsing import to_summary
from taskmail.email.session import SessionRole, TransportSessionManager

logger = logging.getLogger(__name__)


class IMAPPoller:
    """Lists the first messages of an IMAP folder without marking them seen."""

    def __init__(
        self,
        sessions: TransportSessionManager,
        folder: str = DEFAULT_INBOX_FOLDER,
        limit: int = DEFAULT_RECENT_MESSAGE_LIMIT,
    ) -> None:
        self._sessions = sessions
        self._folder = folder
        self._limit = limit

    def poll(self) -> list[MessageSummary]:
        """Return up to ``limit`` summaries in the order the server lists them.

        No sorting is applied, so whether these are the newest messages
        depends on the server's enumeration order.

        Raises:
            TransportError: On any connection, folder or fetch failure. Partial
                results are never returned.
        """
        summaries = self._sessions.run(
            SessionRole.RETRIEVAL_IMAP,
            "poll",
            self._poll,  # type: ignore[arg-type]
        )
        logger.info("IMAP poll returned %d message(s)", len(summaries))
        return summaries

    def _poll(self, connector: IMAPConnector) -> list[MessageSummary]:
        connector.select_folder(self._folder)
        return [to_summary(msg) for msg in islice(connector.fetch_headers(), self._limit)]


class POP3Poller:
    """Lists the first messages of a POP3 maildrop.

    Each message is downloaded in full, which is slow on large mailboxes.
    """

    def __init__(
        self,
        sessions: TransportSessionManager,
        limit: int = DEFAULT_RECENT_MESSAGE_LIMIT,
    ) -> None:
        self._sessions = sessions
        self._limit = limit

    def poll(self) -> list[MessageSummary]:
        """Return summaries for message indices ``0 .. min(limit, count) - 1``.

        Raises:
            TransportError: On any failure, including a single failed retrieval.
        """
        summaries = self._sessions.run(
            SessionRole.RETRIEVAL_POP3,
            "poll",
            self._poll,  # type: ignore[arg-type]
        )
        logger.info("POP3 poll returned %d message(s)", len(summaries))
        return summaries

    def _poll(self, connector: POP3Connector) -> list[MessageSummary]:
        count = connector.message_count()
        logger.debug("POP3 maildrop holds %d message(s)", count)
        return [to_summary(connector.fetch_message(i)) for i in range(min(self._limit, count))]
