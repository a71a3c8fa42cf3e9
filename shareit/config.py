"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from SHAREIT_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="SHAREIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "ShareIt"
    app_version: str = "0.1.0"
    database_url: str = "sqlite:///./data/shareit.db"
    log_level: str = "INFO"
    default_page_size: int = 10


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
