"""
Configuration for the image pipeline.

Settings are grouped into sections and read from IMAGE_PIPELINE_* environment
variables. Encoding quality is fixed in core.constants and is not configurable.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from core.constants import SystemConstants


class SystemSettings(BaseModel):
    """Logging and debug settings."""

    log_level: str = Field(SystemConstants.LOG_LEVEL_DEFAULT, description="Root log level")
    log_format: str = Field(SystemConstants.LOG_FORMAT, description="logging format string")
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


class ImageSettings(BaseModel):
    """Image loading settings."""

    load_exif: bool = Field(True, description="Read EXIF metadata from JPEG files on load")


class Settings(BaseModel):
    """Top-level settings."""

    environment: str = "development"
    system: SystemSettings = Field(default_factory=SystemSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


def _env(name: str, default: str) -> str:
    return os.getenv(f"{SystemConstants.ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Build settings from the environment."""
    return Settings(
        environment=_env("ENVIRONMENT", "development"),
        system=SystemSettings(
            log_level=_env("LOG_LEVEL", SystemConstants.LOG_LEVEL_DEFAULT),
            debug=_env_bool("DEBUG", False),
        ),
        image=ImageSettings(load_exif=_env_bool("LOAD_EXIF", True)),
    )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return load_settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply logging.basicConfig from settings."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.system.debug else getattr(logging, settings.system.log_level)
    logging.basicConfig(level=level, format=settings.system.log_format)
