"""Application configuration and settings."""

import re
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BASE_DIR = Path(__file__).resolve().parents[2]
_ENV_FILE = _BASE_DIR / ".env"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


def parse_duration(value: str) -> timedelta:
    """Parse a duration string such as ``"15m"`` or ``"7d"``.

    A bare integer is read as seconds.

    Raises:
        ValueError: If the string is not a positive duration.
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration {value!r}; expected e.g. '15m' or '7d'")

    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Duration {value!r} must be positive")

    return timedelta(**{_DURATION_UNITS[match.group(2)]: amount})


@dataclass(frozen=True)
class TokenSettings:
    """Signing material and lifetimes for access/refresh tokens."""

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta
    refresh_ttl: timedelta
    algorithm: str = "HS256"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE, env_file_encoding="utf-8", frozen=True, extra="ignore"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./watchlist.db",
        description="SQLAlchemy database URL",
    )

    # CORS
    ui_origin: str = Field(default="*", description="Allowed CORS origin for clients")

    # JWT Configuration
    jwt_access_secret: str = Field(
        ..., min_length=1, description="HMAC secret for signing access tokens"
    )
    jwt_refresh_secret: str = Field(
        ..., min_length=1, description="HMAC secret for signing refresh tokens"
    )
    jwt_access_expires_in: str = Field(
        default="15m", description="Access token lifetime (e.g. 15m)"
    )
    jwt_refresh_expires_in: str = Field(
        default="7d", description="Refresh token lifetime (e.g. 7d)"
    )

    # Passwords
    password_min_length: int = Field(default=8, ge=1)
    password_max_length: int = Field(default=128, ge=8)
    reset_token_ttl_hours: int = Field(
        default=1, ge=1, description="Lifetime of password reset tokens"
    )

    # External APIs
    omdb_api_key: str = Field(..., min_length=1, description="OMDb API key")
    omdb_base_url: str = Field(default="https://www.omdbapi.com/")
    omdb_timeout_s: float = Field(default=5.0, gt=0, description="OMDb request timeout")

    log_level: str = Field(default="INFO")

    @field_validator("jwt_access_secret", "jwt_refresh_secret", "omdb_api_key")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("jwt_access_expires_in", "jwt_refresh_expires_in")
    @classmethod
    def _validate_duration(cls, value: str) -> str:
        parse_duration(value)
        return value

    @field_validator("database_url", mode="after")
    @classmethod
    def _normalize_sqlite_url(cls, value: str) -> str:
        """Ensure sqlite URLs always point to the repo root."""
        sqlite_prefixes = ("sqlite:///", "sqlite+pysqlite:///")
        for prefix in sqlite_prefixes:
            if value.startswith(prefix):
                path = value[len(prefix) :]
                if path and path != ":memory:" and not path.startswith("/"):
                    abs_path = (_BASE_DIR / path).resolve()
                    return f"{prefix}{abs_path.as_posix()}"
        return value

    @model_validator(mode="after")
    def _distinct_secrets(self) -> "Settings":
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")
        return self

    def token_settings(self) -> TokenSettings:
        return TokenSettings(
            access_secret=self.jwt_access_secret,
            refresh_secret=self.jwt_refresh_secret,
            access_ttl=parse_duration(self.jwt_access_expires_in),
            refresh_ttl=parse_duration(self.jwt_refresh_expires_in),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get application settings singleton.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in err["loc"]) or "settings"
                for err in e.errors()
            )
            raise ConfigurationError(
                f"Invalid or missing configuration: {fields}. "
                "Set JWT_ACCESS_SECRET, JWT_REFRESH_SECRET and OMDB_API_KEY in "
                "your environment (.env)."
            ) from e
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
