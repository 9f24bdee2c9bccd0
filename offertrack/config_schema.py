"""Declarative configuration schema for the offer tracker."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    PositiveInt,
    PrivateAttr,
    field_validator,
    model_validator,
)

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
ENVIRONMENTS = ("development", "staging", "production", "test")


class StrictModel(BaseModel):
    """Base model rejecting unknown keys and re-validating on assignment."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )


class AppSettings(StrictModel):
    environment: str = Field(default="development", description="Deployment environment.")
    debug: bool = Field(default=False, description="Verbose, colourised console logging.")
    timezone: str = Field(
        default="UTC",
        description="Zone deciding which calendar day a new observation is recorded on.",
    )

    @field_validator("environment")
    @classmethod
    def _known_environment(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of: {', '.join(ENVIRONMENTS)}")
        return normalized


class LoggingConfig(StrictModel):
    level: str = Field(default="INFO", description="Minimum level for every sink.")
    file_path: Optional[Path] = Field(
        default=None, description="Rotating log file; console only when unset."
    )
    max_file_size_mb: PositiveInt = Field(default=10, description="Rotation size in MiB.")
    retention_days: PositiveInt = Field(default=30, description="Days rotated files are kept.")
    format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {name}:{line} | {message}",
        description="loguru format template for the console sink.",
    )

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return normalized

    @field_validator("file_path", mode="before")
    @classmethod
    def _blank_path_is_unset(cls, value: Any) -> Any:
        # Environment overrides can only clear the path with an empty string.
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ScoreLabels(StrictModel):
    high: str = "Worth testing"
    medium: str = "Maybe"
    low: str = "Not worth it"
    insufficient: str = "Insufficient data"


class ScoringConfig(StrictModel):
    """Bands, labels and the minimum history behind an offer score."""

    min_observations: int = Field(
        default=3,
        ge=2,
        description="Observations required before a real score is computed.",
    )
    neutral_score: int = Field(default=50, ge=0, le=100)
    high_threshold: int = Field(default=70, ge=0, le=100)
    medium_threshold: int = Field(default=40, ge=0, le=100)
    labels: ScoreLabels = Field(default_factory=ScoreLabels)

    @model_validator(mode="after")
    def _ordered_bands(self) -> "ScoringConfig":
        if self.medium_threshold > self.high_threshold:
            raise ValueError("medium_threshold must not exceed high_threshold")
        if self.neutral_score >= self.high_threshold:
            raise ValueError("neutral_score must stay below high_threshold")
        return self


class TrendConfig(StrictModel):
    min_observations: int = Field(
        default=2,
        ge=2,
        description="Observations required before a direction is reported.",
    )
    significance_threshold: PositiveFloat = Field(
        default=5.0,
        description="Absolute percentage change below which the trend is stable.",
    )


class Config(StrictModel):
    """Complete offer tracker configuration."""

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    trend: TrendConfig = Field(default_factory=TrendConfig)
    _metadata: Any = PrivateAttr(default=None)


DEFAULT_CONFIG = Config()

__all__ = [
    "AppSettings",
    "Config",
    "DEFAULT_CONFIG",
    "LoggingConfig",
    "ScoreLabels",
    "ScoringConfig",
    "TrendConfig",
]
