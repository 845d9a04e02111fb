# app/core/settings.py
import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "tiered-discount"
    ENVIRONMENT: str = "local"  # local | development | production

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    # log the raw function input whenever no discount comes out
    LOG_EMPTY_DECISION_INPUT: bool = False

    # --- Metrics ---
    METRICS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.ENVIRONMENT).lower()
    if env == "production":
        s.LOG_LEVEL = "WARNING"
    elif env == "development":
        s.LOG_LEVEL = "DEBUG"
        s.LOG_EMPTY_DECISION_INPUT = True

    return s


settings = get_settings()  # leest .env
