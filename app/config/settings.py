"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, HttpUrl, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for the connector endpoint, queue storage, and webhook delivery.

    Environment variable names map directly to field names in uppercase.
    Example: `webhook_url` reads from `WEBHOOK_URL`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        database_url: SQLAlchemy DSN for queue, archive, and dead-letter storage.
        database_auto_migrate: Whether schema migrations run at application startup.
        log_level: Root logging level name.
        webhook_url: Optional webhook listener URL, validated at startup; delivery is skipped when unset.
        webhook_timeout_seconds: Outbound webhook request timeout.
        answer_queue_max_size: Parsed answers allowed to wait for the processing worker.
        connector_username: Username the Web Connector must authenticate with.
        connector_password: Password the Web Connector must authenticate with.
        connector_session_ticket: Optional fixed session ticket; defaults to the connector username.
        server_version: Value returned by the `serverVersion` callback.
        client_version: Value returned by the `clientVersion` callback.
        qbxml_version: qbXML version declared in outbound request headers.
        default_max_returned: Result cap for default sync queries.
        api_username: Optional write-boundary Basic auth username.
        api_password: Optional write-boundary Basic auth password.
        api_dead_letter_default_limit: Default dead-letter list endpoint limit.
        api_dead_letter_max_limit: Maximum allowed dead-letter list endpoint limit.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=3000, ge=1, le=65535)
    database_url: str = Field(default="sqlite:///./qbwc_adapter.db")
    database_auto_migrate: bool = Field(default=True)
    log_level: str = Field(default="INFO")
    webhook_url: HttpUrl | None = Field(default=None)
    webhook_timeout_seconds: float = Field(default=10.0, gt=0)
    answer_queue_max_size: int = Field(default=100, ge=1)
    connector_username: str = Field(default="qbwc", min_length=1)
    connector_password: str = Field(default="")
    connector_session_ticket: str | None = Field(default=None)
    server_version: str = Field(default="1.0")
    client_version: str = Field(default="1.0")
    qbxml_version: str = Field(default="13.0", min_length=1)
    default_max_returned: int = Field(default=20, ge=1)
    api_username: str | None = Field(default=None)
    api_password: str | None = Field(default=None)
    api_dead_letter_default_limit: int = Field(default=50, ge=1)
    api_dead_letter_max_limit: int = Field(default=200, ge=1)

    @field_validator("connector_username", "qbxml_version", "database_url")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("webhook_url", mode="before")
    @classmethod
    def _validate_optional_url(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("connector_session_ticket", "api_username", "api_password")
    @classmethod
    def _validate_optional_string(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unsupported log level: {value}")
        return normalized_value

    @field_validator("api_dead_letter_max_limit")
    @classmethod
    def _validate_limit_bounds(cls, value: int, info) -> int:
        default_limit = info.data.get("api_dead_letter_default_limit", 50)
        if value < default_limit:
            raise ValueError("api_dead_letter_max_limit must be greater than or equal to api_dead_letter_default_limit")
        return value

    def settings_session_ticket(self) -> str:
        """Return the session ticket handed to the connector after authentication.

        Returns:
            str: Configured ticket or the connector username when unset.
        """

        return self.connector_session_ticket or self.connector_username


class DatabaseUrlSettings(BaseSettings):
    """Minimal settings model used by migration tooling.

    This model intentionally validates only database connectivity inputs so
    schema migration commands can run without requiring full runtime
    application settings.

    Attributes:
        database_url: SQLAlchemy DSN for schema migrations.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    database_url: str = Field(default="sqlite:///./qbwc_adapter.db")


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_load_database_url() -> str:
    """Load and validate only the database URL setting.

    Returns:
        str: Non-empty database URL for migration and db tooling.

    Raises:
        SettingsLoadError: Raised when database URL cannot be loaded.
    """

    try:
        database_settings = DatabaseUrlSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Database URL configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error

    database_url = str(database_settings.database_url).strip()
    if not database_url:
        raise SettingsLoadError("Database URL configuration validation failed. DATABASE_URL must not be blank.")
    return database_url
