"""Configuration settings for taskmail using pydantic-settings."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, Field, PositiveInt, SecretStr
from pydantic_core import ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from taskmail.defaults import (
    DEFAULT_DATABASE_URL,
    DEFAULT_HTTP_PORT,
    DEFAULT_IMAP_HOST,
    DEFAULT_IMAP_PORT,
    DEFAULT_INBOX_FOLDER,
    DEFAULT_MAX_CONCURRENT_SESSIONS,
    DEFAULT_POP3_HOST,
    DEFAULT_POP3_PORT,
    DEFAULT_RECENT_MESSAGE_LIMIT,
    DEFAULT_SMTP_PORT,
)
from taskmail.email.connectors.config import TimeoutConfig
from taskmail.exceptions import ConfigError


class SMTPSettings(BaseModel):
    """Sender credentials and submission server.

    The sender address/password pair is also used to log in to the
    retrieval servers.
    """

    host: str
    port: int = DEFAULT_SMTP_PORT
    sender_email: str
    sender_password: SecretStr
    sender_name: str | None = None


class IMAPSettings(BaseModel):
    """IMAP retrieval endpoint."""

    host: str = DEFAULT_IMAP_HOST
    port: int = DEFAULT_IMAP_PORT
    folder: str = DEFAULT_INBOX_FOLDER


class POP3Settings(BaseModel):
    """POP3 retrieval endpoint."""

    host: str = DEFAULT_POP3_HOST
    port: int = DEFAULT_POP3_PORT


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that loads configuration from a YAML file.

    Looks for config file in the following order:
    1. TASKMAIL_CONFIG_FILE environment variable
    2. ./taskmail.yaml (current directory)
    3. $XDG_CONFIG_HOME/taskmail/config.yaml (defaults to ~/.config)
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get field value from YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML config."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load and cache YAML config file."""
        if not hasattr(self, "_yaml_data"):
            self._yaml_data = self._read_yaml_file()
        return self._yaml_data

    def _read_yaml_file(self) -> dict[str, Any]:
        """Read YAML config from the first config file that exists."""
        xdg_config = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        config_paths = [
            os.environ.get("TASKMAIL_CONFIG_FILE"),
            Path.cwd() / "taskmail.yaml",
            Path(xdg_config) / "taskmail" / "config.yaml",
        ]

        for path in config_paths:
            if not path:
                continue
            path_obj = Path(path)
            if not path_obj.exists():
                continue
            try:
                with open(path_obj) as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                raise ConfigError(
                    f"Invalid YAML syntax: {getattr(e, 'problem', None) or e}",
                    file_path=str(path_obj),
                    line=mark.line + 1 if mark else None,
                    col=mark.column + 1 if mark else None,
                ) from e
            except OSError as e:
                raise ConfigError(
                    f"Cannot read config file: {e}",
                    file_path=str(path_obj),
                ) from e
            if data is None:
                return {}
            if not isinstance(data, dict):
                raise ConfigError("Top level must be a mapping", file_path=str(path_obj))
            return data

        return {}


def _parse_validation_error(error: ValidationError) -> str:
    """Convert Pydantic ValidationError to user-friendly message."""
    errors = error.errors()
    if not errors:
        return "Unknown validation error"

    err = errors[0]
    loc = err.get("loc", ())
    field_name = ".".join(str(part) for part in loc)

    if err.get("type") == "missing" and loc:
        if loc[0] == "smtp":
            return (
                f"Missing required field '{field_name}'. The smtp block needs: "
                "host, sender_email, sender_password"
            )
        return f"Missing required field '{field_name}'"

    if loc:
        return f"Invalid value for '{field_name}': {err.get('msg', '')}"
    return str(error)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with TASKMAIL_ prefix.

    Nested blocks use ``__`` as delimiter (e.g. TASKMAIL_SMTP__HOST). YAML example:
        smtp:
          host: "smtp.gmail.com"
          sender_email: "tasks@example.com"
          sender_password: "app-password"
          sender_name: "Task Tracker"
    """

    model_config = SettingsConfigDict(env_prefix="TASKMAIL_", env_nested_delimiter="__")

    smtp: SMTPSettings
    imap: IMAPSettings = Field(default_factory=IMAPSettings)
    pop3: POP3Settings = Field(default_factory=POP3Settings)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)

    max_concurrent_sessions: PositiveInt = DEFAULT_MAX_CONCURRENT_SESSIONS
    recent_message_limit: PositiveInt = DEFAULT_RECENT_MESSAGE_LIMIT

    database_url: str = DEFAULT_DATABASE_URL

    host: str = "0.0.0.0"
    port: int = Field(
        default=DEFAULT_HTTP_PORT,
        validation_alias=AliasChoices("port", "PORT", "TASKMAIL_PORT"),
    )
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
            dotenv_settings,
            file_secret_settings,
        )


def get_settings_eager() -> Settings:
    """Load settings with eager validation at startup.

    Raises:
        ConfigError: If configuration is invalid, with a user-friendly message.
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        raise ConfigError(_parse_validation_error(e)) from e
