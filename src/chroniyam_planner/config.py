import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chroniyam_allocation import LedgerOrdering


class Settings(BaseSettings):
    """Planner settings"""

    app_title: str = "Chroniyam"
    app_version: str = "0.1.0"

    # Capacity defaults
    default_hours_per_day: float = Field(
        default=8.0, gt=0, le=24, description="Daily hour budget for new plans"
    )
    hours_granularity: float = Field(
        default=0.5, gt=0, description="Smallest hour step accepted for estimates"
    )
    ledger_ordering: LedgerOrdering = Field(
        default=LedgerOrdering.INSERTION,
        description="Order in which tasks claim partial-day capacity",
    )
    warn_on_truncation: bool = Field(
        default=True,
        description="Report tasks whose hours do not fit inside their date span",
    )
    future_week_options: int = Field(
        default=4, ge=1, le=12, description="Upcoming weeks offered when planning"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root logging level")

    # Environment
    environment: str = Field(
        default="development", pattern="^(development|test|production)$"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name"""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("hours_granularity")
    @classmethod
    def validate_granularity(cls, v: float) -> float:
        """Granularity must divide an hour evenly"""
        if abs(round(1 / v) * v - 1) > 1e-9:
            raise ValueError("Hours granularity must divide one hour evenly")
        return v

    model_config = SettingsConfigDict(
        env_prefix="CHRONIYAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()


def configure_logging(config: Settings | None = None) -> None:
    """Configure root logging from settings."""
    config = config or settings
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
