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
    database_url: str = "postgresql+asyncpg://sportsmart:sportsmart_dev_password@db:5432/sportsmart"
    create_tables_on_startup: bool = False

    # Catalog listing
    default_page_limit: int = 100  # storefront groups a full page by brand
    admin_page_limit: int = 20

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
