"""Connector configuration models."""

from pydantic import BaseModel, PositiveFloat, SecretStr

from taskmail.defaults import (
    DEFAULT_AUTH_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_IMAP_PORT,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_POP3_PORT,
    DEFAULT_SMTP_PORT,
)


class TimeoutConfig(BaseModel):
    """Socket timeouts, in seconds, applied to every mail session."""

    connect_timeout: PositiveFloat = DEFAULT_CONNECT_TIMEOUT
    auth_timeout: PositiveFloat = DEFAULT_AUTH_TIMEOUT
    operation_timeout: PositiveFloat = DEFAULT_OPERATION_TIMEOUT


class SMTPConfig(BaseModel):
    """SMTP submission server configuration (STARTTLS)."""

    host: str
    port: int = DEFAULT_SMTP_PORT
    username: str
    password: SecretStr
    timeouts: TimeoutConfig = TimeoutConfig()


class IMAPConfig(BaseModel):
    """IMAP server configuration (implicit TLS)."""

    host: str
    port: int = DEFAULT_IMAP_PORT
    username: str
    password: SecretStr
    timeouts: TimeoutConfig = TimeoutConfig()


class POP3Config(BaseModel):
    """POP3 server configuration (implicit TLS)."""

    host: str
    port: int = DEFAULT_POP3_PORT
    username: str
    password: SecretStr
    timeouts: TimeoutConfig = TimeoutConfig()
