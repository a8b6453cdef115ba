"""Shared fixtures for taskmail tests."""

from collections.abc import Callable, Iterator
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from imap_tools import MailMessage
from pydantic import SecretStr

from taskmail.app import create_app
from taskmail.config import Settings, SMTPSettings
from taskmail.email.connectors.imap import IMAPConnector
from taskmail.email.connectors.pop3 import POP3Connector
from taskmail.email.connectors.smtp import SMTPConnector
from taskmail.email.session import SessionRole, TransportSessionManager
from taskmail.notifier import Notifier
from taskmail.pollers import IMAPPoller, POP3Poller


def _make_mail_message(index: int, sender: str = "Alice <alice@example.com>") -> MailMessage:
    """Parse a small RFC 822 message numbered ``index``."""
    raw = (
        f"From: {sender}\r\n"
        "To: tasks@example.com\r\n"
        f"Subject: Message {index}\r\n"
        f"Date: Mon, 05 Jan 2026 10:{index:02d}:00 +0000\r\n"
        f"Message-ID: <{index}@example.com>\r\n"
        "\r\n"
        f"Body of message {index}\r\n"
    )
    return MailMessage.from_bytes(raw.encode())


@pytest.fixture
def make_message() -> Callable[..., MailMessage]:
    """Factory for parsed test messages."""
    return _make_mail_message


@pytest.fixture
def smtp_settings() -> SMTPSettings:
    return SMTPSettings(
        host="smtp.example.com",
        port=587,
        sender_email="tasks@example.com",
        sender_password=SecretStr("app-password"),
        sender_name="Task Tracker",
    )


@pytest.fixture
def settings(smtp_settings: SMTPSettings) -> Settings:
    return Settings(smtp=smtp_settings, database_url="sqlite://")


@pytest.fixture
def smtp_connector() -> MagicMock:
    connector = MagicMock(spec=SMTPConnector)
    connector.host = "smtp.example.com"
    return connector


@pytest.fixture
def imap_connector() -> MagicMock:
    connector = MagicMock(spec=IMAPConnector)
    connector.host = "imap.example.com"
    connector.fetch_headers.return_value = iter([])
    return connector


@pytest.fixture
def pop3_connector() -> MagicMock:
    connector = MagicMock(spec=POP3Connector)
    connector.host = "pop.example.com"
    connector.message_count.return_value = 0
    return connector


@pytest.fixture
def connector_factory(
    smtp_connector: MagicMock,
    imap_connector: MagicMock,
    pop3_connector: MagicMock,
) -> MagicMock:
    """Connector factory double handing out one mock connector per role."""
    connectors = {
        SessionRole.SUBMISSION: smtp_connector,
        SessionRole.RETRIEVAL_IMAP: imap_connector,
        SessionRole.RETRIEVAL_POP3: pop3_connector,
    }
    return MagicMock(side_effect=lambda role: connectors[role])


@pytest.fixture
def sessions(settings: Settings, connector_factory: MagicMock) -> TransportSessionManager:
    return TransportSessionManager(settings, connector_factory=connector_factory)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI, sessions: TransportSessionManager) -> Iterator[TestClient]:
    """Test client with the lifespan started and mail sessions backed by mocks."""
    with TestClient(app) as test_client:
        # Swap the real session manager for the mocked one
        app.state.notifier = Notifier(sessions, app.state.settings.smtp)
        app.state.imap_poller = IMAPPoller(sessions)
        app.state.pop3_poller = POP3Poller(sessions)
        yield test_client
