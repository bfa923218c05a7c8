"""Environment-driven configuration for the gadget API.

Every knob the service reads lives on ``Settings``. Values come from the
process environment first and then from ``.env`` / ``.env.local`` so a
developer can boot the API locally without exporting anything.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "IMF Gadget API"
    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2] / "data")

    # Database URL defaults to a SQLite file under DATA_DIR.
    DB_URL: str = Field(default="", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    # ---- Tokens
    JWT_SECRET: str = "change-me"
    JWT_TTL_MIN: int = 60

    # ---- Gadget lifecycle
    CODENAME_MAX_ATTEMPTS: int = Field(default=100, ge=1)
    CONFIRMATION_CODE_TTL_SEC: int = Field(default=0, ge=0)  # 0 disables expiry

    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    @model_validator(mode="after")
    def _default_db_url(self) -> "Settings":
        if not self.DB_URL:
            self.DB_URL = f"sqlite:///{self.DATA_DIR}/gadgets.db"
        return self

    @property
    def uses_sqlite_file(self) -> bool:
        return self.DB_URL.startswith("sqlite:///")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings()
    if settings.uses_sqlite_file:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings


settings = get_settings()
