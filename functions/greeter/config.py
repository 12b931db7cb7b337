"""
Configuration and settings for the greeter service.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings (``GREETER_*`` variables)."""

    model_config = SettingsConfigDict(
        env_prefix="GREETER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_prefix: str = Field(default="/api")

    # /tmp is the only writable location on most serverless hosts and is
    # wiped whenever the instance is recycled.
    database_path: str = Field(default="/tmp/greeter.db")
    setting_key: str = Field(default="name_suffix")
    default_suffix: str = Field(default="World")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)


@dataclass(frozen=True)
class StoreConfig:
    """Explicit configuration handed to a settings store at construction."""

    database_path: str = "/tmp/greeter.db"
    setting_key: str = "name_suffix"
    default_value: str = "World"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoreConfig":
        return cls(
            database_path=settings.database_path,
            setting_key=settings.setting_key,
            default_value=settings.default_suffix,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
