"""Mail server connectors for taskmail."""

from taskmail.email.connectors.base import BaseConnector
from taskmail.email.connectors.config import IMAPConfig, POP3Config, SMTPConfig, TimeoutConfig
from taskmail.email.connectors.imap import IMAPConnector
from taskmail.email.connectors.pop3 import POP3Connector
from taskmail.email.connectors.smtp import SMTPConnector

__all__ = [
    "BaseConnector",
    "IMAPConfig",
    "IMAPConnector",
    "POP3Config",
    "POP3Connector",
    "SMTPConfig",
    "SMTPConnector",
    "TimeoutConfig",
]
