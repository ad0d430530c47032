"""Application configuration."""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str

    # Catalog seed (YAML with users, categories, restaurants and dishes)
    catalog_file: Optional[str] = None

    # Orders
    orders_page_size: int = 25

    # Identity forwarded by the authenticating gateway
    identity_header: str = "x-user-id"

    # Notification bus
    bus_queue_size: int = 100

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
