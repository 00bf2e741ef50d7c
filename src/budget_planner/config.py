from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = Field(default="http://localhost:5000", alias="API_URL")
    master_key: str = Field(..., alias="MASTER_KEY")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cache_dir: Path = Field(default=Path(".cache"), alias="CACHE_DIR")
    http_timeout: float = Field(default=20.0, alias="HTTP_TIMEOUT")

    @property
    def session_file(self) -> Path:
        return self.cache_dir / "session.json"

    def validate_required(self) -> None:
        if not self.master_key:
            raise ValueError("MASTER_KEY is required")

        if not self.api_url:
            raise ValueError("API_URL is required")


@lru_cache
def load_settings() -> Settings:
    settings = Settings()
    settings.validate_required()
    settings.cache_dir.mkdir(parents=True, exist_ok=True)
    return settings
