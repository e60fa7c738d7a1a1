#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class ConversionConfig:
    """Read-only conversion settings injected into request handlers."""
    enabled: bool = False
    tool: str = ""
    timeout_seconds: Optional[float] = None
    keep_artifacts: bool = False

    @property
    def tool_configured(self) -> bool:
        return len(self.tool.strip()) > 0


class Settings(BaseSettings):
    """Application settings"""

    # ========== Service ==========
    app_name: str = "Content Export Server"
    version: str = "1.0.0"

    # ========== RTF Conversion ==========
    # Conversion is off until an operator points it at a converter binary
    # (e.g. CONVERSION_RTF_TOOL=pandoc). Either missing value routes every
    # .rtf request to the 404 page.
    conversion_rtf_enabled: bool = False
    conversion_rtf_tool: str = ""
    conversion_timeout_seconds: float = 120  # 0 = wait forever
    conversion_keep_artifacts: bool = False  # Keep temp files for debugging
    conversion_rtf_probe: bool = False  # Run "<tool> --version" at startup

    # ========== Logging ==========
    log_level: str = "INFO"
    log_to_file: bool = False

    # ========== Rate Limiting & CORS ==========
    rate_limit_enabled: bool = True
    cors_origins: str = ""  # Empty = use default dev origins

    # ========== Cleanup / Retention ==========
    cleanup_temp_max_age_hours: int = 24

    # ========== Directories ==========
    content_dir: Path = BASE_DIR / "data" / "content"
    templates_dir: Path = BASE_DIR / "data" / "templates"
    temp_dir: Path = BASE_DIR / "data" / "temp"
    logs_dir: Path = BASE_DIR / "data" / "logs"

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Create directories
        for dir_path in [
            self.content_dir,
            self.templates_dir,
            self.temp_dir,
            self.logs_dir,
        ]:
            dir_path.mkdir(exist_ok=True, parents=True)

    def get_conversion_config(self) -> ConversionConfig:
        """Snapshot of the RTF conversion settings."""
        timeout = self.conversion_timeout_seconds
        return ConversionConfig(
            enabled=self.conversion_rtf_enabled,
            tool=self.conversion_rtf_tool.strip(),
            timeout_seconds=timeout if timeout and timeout > 0 else None,
            keep_artifacts=self.conversion_keep_artifacts,
        )

    def get_cors_origins(self) -> list:
        """Get CORS origins as a list. Falls back to dev defaults if empty."""
        if self.cors_origins:
            return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        # Dev defaults
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ]


# Global settings instance
settings = Settings()
