"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://brocante:brocante_dev_password@db:5432/brocante"

    # Catalog
    catalog_page_size: int = 12
    latest_limit: int = 8

    # Bought products stay visible to the buyer this long after the cart date
    bought_window_days: int = 7

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
