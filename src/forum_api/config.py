"""Forum settings, read from the environment or a .env file."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings. Only SECRET_KEY is required."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Forum API"
    debug: bool = False
    secret_key: str  # Required, no default

    # Database
    database_url: str = "sqlite+aiosqlite:///./forum.db"

    # Sessions
    session_cookie_name: str = "forum_session"
    session_cookie_secure: bool = False
    session_signing_algorithm: str = "HS256"
    session_ttl_minutes: int | None = None  # None means sessions never expire

    # Password hashing
    bcrypt_rounds: int = 12

    # Second factor
    totp_interval: int = 30
    totp_valid_window: int = 1

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Validate that secret_key is secure."""
        if not v:
            raise ValueError("SECRET_KEY is required")

        # In production mode, ensure secret key is strong
        debug = info.data.get("debug", False)
        if not debug:
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production mode")
            if v in ("change-me-in-production", "secret", "password", "changeme"):
                raise ValueError("SECRET_KEY must not be a common weak value")

        return v

    @field_validator("session_ttl_minutes", "totp_valid_window")
    @classmethod
    def validate_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    def validate_runtime_config(self) -> list[str]:
        """Return warnings about settings that are legal but risky in production."""
        warnings = []

        if self.session_ttl_minutes is None:
            warnings.append("SESSION_TTL_MINUTES is not set - sessions never expire")

        if not self.session_cookie_secure and not self.debug:
            warnings.append(
                "SESSION_COOKIE_SECURE is disabled - session cookies will be sent over plain HTTP"
            )

        if self.totp_valid_window > 1:
            warnings.append(
                f"TOTP_VALID_WINDOW={self.totp_valid_window} accepts codes up to "
                f"{self.totp_valid_window * self.totp_interval}s away from the current time"
            )

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
