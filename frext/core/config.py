from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_BASE_URL = "http://localhost:3001"


def _default_storage_dir() -> Path:
    return (Path.home() / ".frext").resolve()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FREXT_")
    APP_NAME: str = Field(default="frext-client")
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")
    API_BASE_URL: str = Field(default=DEFAULT_API_BASE_URL)
    API_PREFIX: str = Field(default="/api/v1")
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0)
    HEALTH_TIMEOUT_SECONDS: float = Field(default=5.0)
    CONNECTION_POLL_SECONDS: float = Field(default=30.0)
    VERIFY_SSL: bool = Field(default=True)
    STORAGE_DIR: Path = Field(default_factory=_default_storage_dir)
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024)

    @field_validator("API_BASE_URL", mode="before")
    @classmethod
    def _base_url_or_default(cls, v: object) -> object:
        # an exported but empty FREXT_API_BASE_URL means "use the default"
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_API_BASE_URL
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
