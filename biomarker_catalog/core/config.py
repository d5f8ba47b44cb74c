from typing import Optional
from enum import Enum
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

from biomarker_catalog.schemas.ranges import Axis


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "biomarker-catalog"
    VERSION: str = "0.1.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None  # Also log to this file when set

    # Export
    EXPORT_SOURCE_NAME: str = "OpenCures"  # Prefix of exported file names
    EXPORT_INDENT: int = 2

    # Import
    SKIP_INVALID_RECORDS: bool = True  # Skip-and-log bad rows instead of failing the batch
    DEFAULT_AXIS: Axis = Axis.DIVERSE

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = str(v or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("EXPORT_INDENT")
    @classmethod
    def non_negative_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError("EXPORT_INDENT must not be negative")
        return v

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra='ignore')


settings = Settings()
