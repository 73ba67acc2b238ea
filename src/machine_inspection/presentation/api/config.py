"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List, Optional, Union
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore"
    )

    # Application
    debug: bool = True
    service_name: str = "machine-inspection-service"
    api_prefix: str = "/api/v1"

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    log_max_file_size: int = 10 * 1024 * 1024
    log_backup_count: int = 5
    log_enable_console: bool = True
    log_enable_file: bool = False
    log_requests: bool = True

    # Scoring flow
    auto_recalculate: bool = True
    report_list_limit: int = 50

    # CORS
    allowed_origins: Union[str, List[str]] = "http://localhost:3000,http://localhost:5173"
    allowed_methods: Union[str, List[str]] = "GET,POST,PUT,DELETE,OPTIONS"
    allowed_headers: Union[str, List[str]] = "*"

    @model_validator(mode='after')
    def convert_cors_lists(self):
        """Convert comma-separated strings to lists."""
        if isinstance(self.allowed_origins, str):
            self.allowed_origins = [item.strip() for item in self.allowed_origins.split(",") if item.strip()]
        if isinstance(self.allowed_methods, str):
            self.allowed_methods = [item.strip() for item in self.allowed_methods.split(",") if item.strip()]
        if isinstance(self.allowed_headers, str):
            self.allowed_headers = [item.strip() for item in self.allowed_headers.split(",") if item.strip()]
        return self

    @model_validator(mode='after')
    def validate_log_level(self):
        """Normalize and check the log level name."""
        level = self.log_level.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {self.log_level}")
        self.log_level = level
        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
