"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import List, Optional, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive values should be stored in .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database settings (pothole store)
    database_url: Optional[str] = None
    database_access_key: Optional[str] = None
    database_pool_size: int = 5
    database_max_overflow: int = 5
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600
    database_echo: bool = False  # Set to True for SQL query logging
    database_max_retries: int = 3
    database_retry_delay_seconds: float = 0.5

    # Nominatim geocoding settings
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_user_agent: str = "pothole-reporter/0.1 (contact: ops@example.org)"
    geocoder_timeout_seconds: float = 10.0
    geocoder_max_retries: int = 1
    geocoder_backoff_seconds: float = 1.0
    geocoder_country_codes: Optional[str] = None

    # Report matching
    match_case_insensitive: bool = True
    default_city: str = "Budapest"

    # Severity tiers: (exclusive upper bound of report count, tier name)
    severity_thresholds: List[Tuple[int, str]] = [(10, "low"), (30, "medium")]
    severity_top_tier: str = "high"

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"

    # Application settings
    environment: str = "development"
    debug: bool = False

    def is_store_configured(self) -> bool:
        """
        Check whether the pothole store has an endpoint and credentials.

        SQLite needs no credentials; every other backend needs either a
        password embedded in the URL or a separate access key.
        """
        if not self.database_url:
            return False

        url = make_url(self.database_url)
        if url.get_backend_name() == "sqlite":
            return True
        return bool(url.password or self.database_access_key)

    def resolved_database_url(self) -> Optional[str]:
        """Database URL with the access key injected as password when needed."""
        if not self.database_url:
            return None

        url = make_url(self.database_url)
        if self.database_access_key and not url.password:
            url = url.set(password=self.database_access_key)
        return url.render_as_string(hide_password=False)


# Singleton instance
settings = Settings()
