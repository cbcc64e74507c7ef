"""Configuration system for Tankerbook.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for report rendering and logging.

Usage:
    from tankerbook_core.config import TankerbookConfig

    # Load from environment variables and .env file
    config = TankerbookConfig()

    # Access report settings
    print(config.report.currency_symbol)
    print(config.report.page_content_threshold)
"""

import logging
from typing import Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportConfig(BaseSettings):
    """Monthly report layout settings.

    Vertical measures are millimetres on an A4 page and drive the
    between-sections page break decision.

    Environment Variables:
        TANKERBOOK_REPORT_CURRENCY_SYMBOL: Prefix for money amounts
        TANKERBOOK_REPORT_PAGE_CONTENT_THRESHOLD: Cursor position that forces a new page
        TANKERBOOK_REPORT_PAGE_TOP: Cursor position at the top of a fresh page
        TANKERBOOK_REPORT_TABLE_ROW_HEIGHT: Estimated height of one table row
    """

    model_config = SettingsConfigDict(
        env_prefix="TANKERBOOK_REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    currency_symbol: str = Field(
        default="Rs.",
        description="Currency prefix for money amounts (base-14 PDF fonts have no rupee glyph)",
    )
    page_content_threshold: float = Field(
        default=270.0,
        gt=0,
        description="Cursor position (mm) past which the next day starts on a new page",
    )
    page_top: float = Field(
        default=20.0,
        ge=0,
        description="Cursor position (mm) after a page break",
    )
    summary_top: float = Field(
        default=25.0,
        ge=0,
        description="Cursor position (mm) of the first summary line under the title",
    )
    summary_line_height: float = Field(
        default=7.0,
        gt=0,
        description="Height (mm) of one summary line in the header block",
    )
    day_header_height: float = Field(
        default=8.0,
        gt=0,
        description="Height (mm) of a day header line",
    )
    table_row_height: float = Field(
        default=7.0,
        gt=0,
        description="Estimated height (mm) of one table row, header row included",
    )
    section_gap: float = Field(
        default=10.0,
        ge=0,
        description="Gap (mm) after each day table",
    )
    title_font_size: int = Field(
        default=16,
        ge=6,
        le=48,
        description="Font size of the report title",
    )
    body_font_size: int = Field(
        default=10,
        ge=6,
        le=24,
        description="Font size of tables and the timestamp line",
    )
    header_color: str = Field(
        default="#3B82F6",
        description="Fill colour of table header rows",
    )

    @field_validator("header_color")
    @classmethod
    def validate_header_color(cls, v: str) -> str:
        """Ensure the header colour is a #RRGGBB hex string."""
        v = v.strip()
        if len(v) != 7 or not v.startswith("#"):
            raise ValueError(f"Invalid colour: {v}. Expected #RRGGBB")
        try:
            int(v[1:], 16)
        except ValueError as e:
            raise ValueError(f"Invalid colour: {v}. Expected #RRGGBB") from e
        return v.upper()

    @field_validator("page_top")
    @classmethod
    def validate_page_top(cls, v: float, info) -> float:
        """page_top must sit above the break threshold."""
        threshold = info.data.get("page_content_threshold")
        if threshold is not None and v >= threshold:
            raise ValueError("page_top must be smaller than page_content_threshold")
        return v


class TankerbookConfig(BaseSettings):
    """Root configuration for Tankerbook.

    Environment Variables:
        TANKERBOOK_ENV: Environment name (development, staging, production, test)
        TANKERBOOK_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        TANKERBOOK_OUTPUT_DIR: Directory exported reports are written to

    Example:
        config = TankerbookConfig(report=ReportConfig(currency_symbol="INR "))
    """

    model_config = SettingsConfigDict(
        env_prefix="TANKERBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    output_dir: Optional[str] = Field(
        default=None,
        description="Directory for exported reports; None keeps reports in memory",
    )

    report: ReportConfig = Field(default_factory=ReportConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"


def configure_logging(config: Optional[TankerbookConfig] = None) -> None:
    """Route structlog output through a level filter taken from config."""
    config = config or TankerbookConfig()
    level = logging.getLevelName(config.log_level)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )


__all__ = [
    "ReportConfig",
    "TankerbookConfig",
    "configure_logging",
]
