"""
Application settings, loaded from the environment (prefix DASHPRINT_) or .env.

Settings are built once at startup and handed to request handlers through
dependency injection; nothing in the report pipeline reads them as globals.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Web service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DASHPRINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 10053
    log_level: str = "INFO"

    # Comma separated IPs, CIDR networks or host names. Empty allows everyone.
    allowed_ip: str = "127.0.0.1,::1"

    # PDF capture ceiling, seconds
    timeout: int = Field(default=3, ge=1, le=30)

    # Launch browser contexts that accept untrusted frontend certificates
    ignore_url_cert_errors: bool = False

    # TLS for the listening socket
    tls_cert_file: Path | None = None
    tls_key_file: Path | None = None
    tls_ca_file: Path | None = None

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    def get_allowed_ip(self) -> list[str]:
        """Allow-list entries with blanks removed."""
        return [part.strip() for part in self.allowed_ip.split(",") if part.strip()]

    @property
    def tls_enabled(self) -> bool:
        return self.tls_cert_file is not None and self.tls_key_file is not None


_settings: Settings | None = None


def init_settings(settings: Settings) -> Settings:
    """Install explicit settings (tests, embedding)."""
    global _settings
    _settings = settings
    _load_settings.cache_clear()
    return settings


def reset_settings() -> None:
    global _settings
    _settings = None
    _load_settings.cache_clear()


@lru_cache
def _load_settings() -> Settings:
    return Settings()


def get_settings() -> Settings:
    """Return installed settings, or load them from the environment once."""
    if _settings is not None:
        return _settings
    return _load_settings()
