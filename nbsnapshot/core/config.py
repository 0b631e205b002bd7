from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "nbsnapshot"

    log_level: str = "INFO"
    log_format: str = "text"

    browser_headless: bool = True
    browser_timeout_ms: int = 30000
    login_check_timeout_ms: int = 15000
    # The console can take a while to stream a large export once the link is clicked.
    download_timeout_ms: int = 10 * 60 * 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
