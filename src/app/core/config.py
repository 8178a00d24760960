"""Application configuration.

Defines `Settings` with environment variables (and an optional `.env` file)
and exposes a module-level `settings` instance.
"""
# app/core/config.py
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "CRediT Icon Survey"
    DEBUG: bool = False
    LOG_PATH: str = "logging"
    LOG_LEVEL: str = "INFO"

    # Supabase exposes a plain Postgres connection string; sqlite is for local runs
    DATABASE_URL: str = "sqlite:///./app.db"

    SURVEY_VERSION: str = "1.0"
    RANKING_SURVEY_VERSION: str = "tie-breaker-1.0"
    RESULTS_TOP_N: int = 3

    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    RATE_LIMIT: str = "100/15 minutes"
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    MAX_BODY_BYTES: int = 10 * 1024 * 1024  # 10MB

    JINJA2_TEMPLATES: str = str(APP_DIR / "templates")
    CONTACT_EMAIL: str = "info@scienceux.org"


settings = Settings()
