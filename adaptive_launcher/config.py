# adaptive_launcher/config.py
import logging
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LauncherSettings(BaseSettings):
    # Incremental updates
    DEBOUNCE_MS: int = Field(150, description="Delay before a rapid-fire batch is applied")
    FORCE_REFRESH_MS: int = Field(2000, description="Age after which a batch is applied immediately")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = SettingsConfigDict(
        env_prefix="LAUNCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator('DEBOUNCE_MS')
    @classmethod
    def validate_debounce(cls, v):
        if v < 0:
            raise ValueError('Debounce window must not be negative')
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @model_validator(mode='after')
    def validate_refresh_window(self):
        if self.FORCE_REFRESH_MS <= self.DEBOUNCE_MS:
            raise ValueError('Force refresh window must be longer than the debounce window')
        return self


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for launcher processes and scripts"""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=settings.LOG_FORMAT,
    )


settings = LauncherSettings()
