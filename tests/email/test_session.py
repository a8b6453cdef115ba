"""Tests for TransportSessionManager."""

import imaplib
import smtplib
import threading
from unittest.mock import MagicMock

import pytest

from taskmail.config import Settings, SMTPSettings
from taskmail.email.connectors.imap import IMAPConnector
from taskmail.email.connectors.pop3 import POP3Connector
from taskmail.email.connectors.smtp import SMTPConnector
from taskmail.email.session import SessionRole, TransportSessionManager
from taskmail.exceptions import TransportError


class TestSession:
    def test_connects_and_disconnects(
        self, sessions: TransportSessionManager, smtp_connector: MagicMock
    ) -> None:
        with sessions.session(SessionRole.SUBMISSION, "send") as connector:
            assert connector is smtp_connector
            smtp_connector.connect.assert_called_once()
            smtp_connector.disconnect.assert_not_called()

        smtp_connector.disconnect.assert_called_once()

    def test_new_connector_per_session(
        self, sessions: TransportSessionManager, connector_factory: MagicMock
    ) -> None:
        with sessions.session(SessionRole.SUBMISSION, "send"):
            pass
        with sessions.session(SessionRole.SUBMISSION, "send"):
            pass

        assert connector_factory.call_count == 2

    def test_auth_failure_is_transport_error(
        self, sessions: TransportSessionManager, smtp_connector: MagicMock
    ) -> None:
        smtp_connector.connect.side_effect = smtplib.SMTPAuthenticationError(535, b"bad creds")

        with pytest.raises(TransportError) as exc_info:
            with sessions.session(SessionRole.SUBMISSION, "send"):
                pytest.fail("body must not run when connect fails")

        err = exc_info.value
        assert err.role == "smtp"
        assert err.host == "smtp.example.com"
        assert err.operation == "connect"
        assert isinstance(err.__cause__, smtplib.SMTPAuthenticationError)
        smtp_connector.disconnect.assert_called_once()

    def test_operation_failure_names_operation(
        self, sessions: TransportSessionManager, imap_connector: MagicMock
    ) -> None:
        with pytest.raises(TransportError, match="poll failed on imap server imap.example.com"):
            with sessions.session(SessionRole.RETRIEVAL_IMAP, "poll"):
                raise imaplib.IMAP4.error("SELECT failed")

        imap_connector.disconnect.assert_called_once()

    def test_network_failure_is_transport_error(
        self, sessions: TransportSessionManager, pop3_connector: MagicMock
    ) -> None:
        pop3_connector.connect.side_effect = TimeoutError()

        with pytest.raises(TransportError, match="TimeoutError"):
            with sessions.session(SessionRole.RETRIEVAL_POP3, "poll"):
                pass

        pop3_connector.disconnect.assert_called_once()

    def test_rejected_header_is_transport_error(
        self, sessions: TransportSessionManager, smtp_connector: MagicMock
    ) -> None:
        smtp_connector.send.side_effect = ValueError("Value contains invalid characters")

        with pytest.raises(TransportError) as exc_info:
            with sessions.session(SessionRole.SUBMISSION, "send") as connector:
                connector.send(MagicMock())

        assert exc_info.value.operation == "send"

    def test_programming_errors_are_not_wrapped(
        self, sessions: TransportSessionManager, smtp_connector: MagicMock
    ) -> None:
        with pytest.raises(RuntimeError):
            with sessions.session(SessionRole.SUBMISSION, "send"):
                raise RuntimeError("bug")

        smtp_connector.disconnect.assert_called_once()

    def test_gate_released_after_failure(
        self, smtp_settings: SMTPSettings, connector_factory: MagicMock, smtp_connector: MagicMock
    ) -> None:
        settings = Settings(smtp=smtp_settings, max_concurrent_sessions=1)
        sessions = TransportSessionManager(settings, connector_factory=connector_factory)
        smtp_connector.connect.side_effect = [OSError("refused"), None]

        with pytest.raises(TransportError):
            with sessions.session(SessionRole.SUBMISSION, "send"):
                pass
        with sessions.session(SessionRole.SUBMISSION, "send"):
            pass

        assert smtp_connector.disconnect.call_count == 2

    def test_gate_limits_concurrent_sessions(
        self, smtp_settings: SMTPSettings, connector_factory: MagicMock
    ) -> None:
        settings = Settings(smtp=smtp_settings, max_concurrent_sessions=1)
        sessions = TransportSessionManager(settings, connector_factory=connector_factory)
        second_done = threading.Event()

        def second_session() -> None:
            with sessions.session(SessionRole.RETRIEVAL_IMAP, "poll"):
                pass
            second_done.set()

        with sessions.session(SessionRole.SUBMISSION, "send"):
            worker = threading.Thread(target=second_session)
            worker.start()
            assert not second_done.wait(timeout=0.2)

        worker.join(timeout=5)
        assert second_done.is_set()

    def test_connector_built_after_gate_acquired(
        self, smtp_settings: SMTPSettings, connector_factory: MagicMock
    ) -> None:
        settings = Settings(smtp=smtp_settings, max_concurrent_sessions=1)
        sessions = TransportSessionManager(settings, connector_factory=connector_factory)

        def second_session() -> None:
            with sessions.session(SessionRole.RETRIEVAL_IMAP, "poll"):
                pass

        with sessions.session(SessionRole.SUBMISSION, "send"):
            worker = threading.Thread(target=second_session)
            worker.start()
            worker.join(timeout=0.2)
            assert connector_factory.call_count == 1

        worker.join(timeout=5)
        assert connector_factory.call_count == 2


class TestRun:
    def test_returns_result(
        self, sessions: TransportSessionManager, pop3_connector: MagicMock
    ) -> None:
        pop3_connector.message_count.return_value = 7

        result = sessions.run(
            SessionRole.RETRIEVAL_POP3, "poll", lambda c: c.message_count()
        )

        assert result == 7
        pop3_connector.disconnect.assert_called_once()


class TestCreateConnector:
    @pytest.fixture
    def manager(self, settings: Settings) -> TransportSessionManager:
        return TransportSessionManager(settings)

    def test_submission(self, manager: TransportSessionManager) -> None:
        connector = manager._create_connector(SessionRole.SUBMISSION)

        assert isinstance(connector, SMTPConnector)
        assert connector.config.host == "smtp.example.com"
        assert connector.config.port == 587
        assert connector.config.username == "tasks@example.com"

    def test_imap_uses_sender_credentials(self, manager: TransportSessionManager) -> None:
        connector = manager._create_connector(SessionRole.RETRIEVAL_IMAP)

        assert isinstance(connector, IMAPConnector)
        assert connector.config.host == "imap.gmail.com"
        assert connector.config.port == 993
        assert connector.config.username == "tasks@example.com"
        assert connector.config.password.get_secret_value() == "app-password"

    def test_pop3_uses_sender_credentials(self, manager: TransportSessionManager) -> None:
        connector = manager._create_connector(SessionRole.RETRIEVAL_POP3)

        assert isinstance(connector, POP3Connector)
        assert connector.config.host == "pop.gmail.com"
        assert connector.config.port == 995
        assert connector.config.username == "tasks@example.com"

    def test_timeouts_come_from_settings(self, smtp_settings: SMTPSettings) -> None:
        settings = Settings(smtp=smtp_settings, timeouts={"connect_timeout": 3})
        connector = TransportSessionManager(settings)._create_connector(SessionRole.SUBMISSION)

        assert connector.config.timeouts.connect_timeout == 3
