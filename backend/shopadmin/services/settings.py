"""
Settings Service

Runtime settings loaded from the env file managed by EnvStore.

The Settings object is cached per process. After the env file is rewritten
call reload_config() so the next request picks up the new values.
"""

import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ENV_FILE = ".env"


def get_env_file_path() -> str:
    """Path of the env file (SHOPADMIN_ENV_FILE, defaults to ./.env)."""
    return os.getenv("SHOPADMIN_ENV_FILE", DEFAULT_ENV_FILE)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and the env file.

    Example .env:
    - MAIL_MAILER=smtp
    - FACEBOOK_PIXEL_ID=1234567890
    - GOOGLE_ANALYTICS_MEASUREMENT_ID=G-XXXXXXX
    """
    environment: str = "development"
    allowed_origins: str = ""
    session_secret: str = "change-me"

    # SMTP / mailer
    mail_mailer: str = "smtp"
    mail_host: str = ""
    # Kept as text: the env file may hold an empty quoted value
    mail_port: str = ""
    mail_username: Optional[str] = None
    mail_password: Optional[str] = None
    mail_encryption: Optional[str] = None
    mail_from_address: str = ""
    mail_from_name: str = ""

    # Facebook Pixel (Conversions API)
    facebook_pixel_id: Optional[str] = None
    facebook_pixel_access_token: Optional[str] = None
    facebook_pixel_debug_mode: bool = False
    facebook_pixel_enabled: bool = True

    # Google Analytics 4 (Measurement Protocol)
    google_analytics_measurement_id: Optional[str] = None
    google_analytics_api_secret: Optional[str] = None
    google_analytics_debug_mode: bool = False
    google_analytics_enabled: bool = True

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        """ALLOWED_ORIGINS as a list (comma-separated in the env file)."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings(_env_file=get_env_file_path())


def reload_config() -> None:
    """Drop the cached settings so the env file is read again."""
    get_settings.cache_clear()
