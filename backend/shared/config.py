"""
Centralized configuration for the PurdueRide backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, MOCK_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "PurdueRide API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # Supabase (optional durable session storage)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Session tokens
    jwt_secret: str = "purdueride-development-secret-change-me"
    session_ttl_seconds: int = 3600
    session_storage: str = "file"  # file or supabase
    session_storage_path: str = ".purdueride_session.json"
    session_client_id: str = "purdueride-cli"

    # Registration
    institutional_domain: str = "purdue.edu"

    # Mock API simulation
    mock_error_rate: float = 0.1
    mock_min_delay_ms: int = 200
    mock_max_delay_ms: int = 1000
    mock_seed_users: int = 20
    mock_seed_rides: int = 15
    mock_seed_requests: int = 30

    # Ride status polling
    ride_poll_interval: float = 5.0  # seconds


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
