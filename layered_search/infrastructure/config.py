"""Application configuration.

Loads settings from environment variables (prefix ``LAYERED_SEARCH_``)
with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LAYERED_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://layered:layered_dev_password@db:5432/catalog"

    # Search
    default_results_per_page: int = 12
    max_results_per_page: int = 100
    default_sort_order: str = "product.position.asc"
    default_language: str = "en"
    persist_selection: bool = True

    # Filter block
    filter_groups: list[str] = []
    manufacturer_filter_enabled: bool = True
    manufacturer_filter_label: str = "Brand"

    # Logging
    log_level: str = "INFO"


settings = Settings()
