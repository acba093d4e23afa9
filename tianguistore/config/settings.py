"""Typed runtime settings with dotenv support and startup validation."""

from typing import Any

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_SETTING_FIELDS: tuple[str, ...] = ("db_host", "db_port", "db_user", "db_name")

_BLANK_SETTING_ERROR_TYPE = "blank_setting"
_MISSING_ERROR_TYPES = frozenset({"missing", _BLANK_SETTING_ERROR_TYPE})


class ConfigurationError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated.

    Attributes:
        missing_keys: Environment keys that were absent or blank, in required-key order.
    """

    def __init__(self, message: str, missing_keys: tuple[str, ...] = ()):
        super().__init__(message)
        self.missing_keys = missing_keys


class AppSettings(BaseSettings):
    """Application settings for the front-controller runtime.

    Environment variable names map directly to field names in uppercase.
    Example: `db_host` reads from `DB_HOST`. The mode, host and port also accept
    the legacy keys `NODE_ENV`, `HOST` and `PORT`; the explicit key wins when both are set.

    Attributes:
        environment_name: Runtime environment label. Anything other than `production` is development.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        db_host: Data-store host.
        db_port: Data-store port.
        db_user: Data-store user.
        db_name: Data-store database name.
        db_password: Data-store password, empty when unset.
        db_driver: SQLAlchemy driver name used to build the data-store URL.
        cors_origin: Single origin allowed for cross-origin requests outside development.
        public_directory: Directory holding static assets and HTML pages.
        route_groups_factory: Optional `module:callable` that supplies route groups.
        log_level: Root logging level.
        log_format: Log output format, `text` or `json`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
    )

    environment_name: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT_NAME", "NODE_ENV"),
    )
    application_host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("APPLICATION_HOST", "HOST"),
    )
    application_port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("APPLICATION_PORT", "PORT"),
    )
    db_host: str
    db_port: int = Field(ge=1, le=65535)
    db_user: str
    db_name: str
    db_password: str = Field(default="")
    db_driver: str = Field(default="postgresql+psycopg", min_length=1)
    cors_origin: str | None = Field(default=None)
    public_directory: str = Field(default="public", min_length=1)
    route_groups_factory: str | None = Field(default=None)
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text", pattern="^(text|json)$")

    @field_validator(*REQUIRED_SETTING_FIELDS, mode="before")
    @classmethod
    def _validate_required_present(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError(_BLANK_SETTING_ERROR_TYPE, "value must not be blank")
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("db_password", mode="before")
    @classmethod
    def _validate_password_default(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value

    @field_validator("cors_origin", "route_groups_factory", mode="before")
    @classmethod
    def _validate_optional_blank_as_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def is_development(self) -> bool:
        """Return whether the runtime is in development mode.

        Returns:
            bool: True unless the environment name is `production`.
        """

        return self.environment_name.strip().lower() != "production"


def config_collect_missing_keys(error: ValidationError) -> tuple[str, ...]:
    """Extract the environment keys of required settings reported missing or blank.

    Args:
        error: Validation error raised by settings construction.

    Returns:
        tuple[str, ...]: Uppercase environment keys, in required-key order.
    """

    missing_fields = {
        str(item["loc"][0])
        for item in error.errors()
        if item["loc"] and item["type"] in _MISSING_ERROR_TYPES
    }
    return tuple(field_name.upper() for field_name in REQUIRED_SETTING_FIELDS if field_name in missing_fields)


def config_load_settings(env_file: str | None = ".env") -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Args:
        env_file: Dotenv file to read, or None to read the process environment only.

    Returns:
        AppSettings: Validated, immutable runtime settings object.

    Raises:
        ConfigurationError: Raised when required settings are missing or any value is invalid.
    """

    try:
        return AppSettings(_env_file=env_file)
    except ValidationError as error:
        missing_keys = config_collect_missing_keys(error)
        if missing_keys:
            raise ConfigurationError(
                f"Missing required configuration keys: {', '.join(missing_keys)}",
                missing_keys=missing_keys,
            ) from error
        raise ConfigurationError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_collect_warnings(settings: AppSettings) -> list[str]:
    """Return operator warnings for settings that are valid but risky.

    Args:
        settings: Validated runtime settings.

    Returns:
        list[str]: Human-readable warnings, empty when nothing looks misconfigured.
    """

    warnings: list[str] = []
    if not settings.is_development and settings.cors_origin is None:
        warnings.append("CORS_ORIGIN is not set outside development; every cross-origin request will be rejected")
    return warnings
