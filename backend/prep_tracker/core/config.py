"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Interview Prep Tracker"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "sqlite:///./prep_tracker.db"
    auto_create_tables: bool = True
    sprint_max_days: int = 30
    confirmation_ttl_minutes: int = 30
    cas_max_retries: int = 3
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "prep-tracker"
    opik_workspace: str | None = None
    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    sweep_job_hour: int = 3
    sweep_job_minute: int = 0
    jobs_run_on_startup: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
