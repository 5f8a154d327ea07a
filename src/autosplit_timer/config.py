"""Configuration management for autosplit-timer."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AutosplitSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    log_level: str = Field(default="INFO", validation_alias="AUTOSPLIT_LOG_LEVEL")
    log_file: Path | None = Field(default=None, validation_alias="AUTOSPLIT_LOG_FILE")
    bundle_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(Path("autosplitters"),), validation_alias="AUTOSPLIT_BUNDLE_PATHS"
    )
    poll_interval_ms: int = Field(default=16, validation_alias="AUTOSPLIT_POLL_INTERVAL_MS")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "AUTOSPLIT_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("log_file", mode="before")
    @classmethod
    def _empty_log_file(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value

    @field_validator("bundle_paths", mode="before")
    @classmethod
    def _parse_bundle_paths(cls, value):
        if value is None or value == "":
            return (Path("autosplitters"),)
        if isinstance(value, (list, tuple)):
            return tuple(Path(str(item)) for item in value)
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts) or (Path("autosplitters"),)
        raise TypeError("AUTOSPLIT_BUNDLE_PATHS must be a list of paths or a path-separated string")

    @field_validator("poll_interval_ms")
    @classmethod
    def _validate_poll_interval(cls, value: int) -> int:
        if value < 1:
            raise ValueError("AUTOSPLIT_POLL_INTERVAL_MS must be >= 1")
        return value

    @property
    def poll_interval(self) -> float:
        """Tick interval in seconds."""

        return self.poll_interval_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> AutosplitSettings:
    """Return cached settings instance."""

    settings = AutosplitSettings()
    settings.bundle_paths = tuple(path.expanduser().resolve() for path in settings.bundle_paths)
    if settings.log_file is not None:
        settings.log_file = settings.log_file.expanduser()
    return settings


__all__ = ["AutosplitSettings", "get_settings"]
