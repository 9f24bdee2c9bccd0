"""Contracts for ad-count observations and the values derived from them."""

from __future__ import annotations

import re
from datetime import date as _date
from typing import Any, Dict, Literal, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")

ScoreResult = Literal["high", "medium", "low"]
TrendDirection = Literal["up", "down", "stable"]


class Observation(TypedDict, total=False):
    """Raw observation payload as exchanged with the dashboard."""

    date: str
    activeAds: int
    observation: str
    time: str
    trend: float


class ObservationModel(BaseModel):
    """One dated active-ad count for an offer.

    ``trend`` is ``None`` when there is no signal (first day, or the previous
    day had zero ads). It is never stored as ``0.0`` in that case.
    """

    date: str
    active_ads: int = Field(alias="activeAds", ge=0)
    observation: Optional[str] = None
    time: Optional[str] = None
    trend: Optional[float] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        text = value.strip()
        try:
            parsed = _date.fromisoformat(text)
        except ValueError as exc:
            raise ValueError("date must be a calendar date in YYYY-MM-DD format") from exc
        if parsed.isoformat() != text:
            raise ValueError("date must be a calendar date in YYYY-MM-DD format")
        return text

    @field_validator("time")
    @classmethod
    def _validate_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == "":
            return None
        if not _TIME_PATTERN.match(value):
            raise ValueError("time must use the HH:MM 24-hour format")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Return the camelCase payload, omitting unset optional fields."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ScoreModel(BaseModel):
    """Composite 0-100 quality rating for an offer."""

    value: int = Field(ge=0, le=100)
    label: str
    result: ScoreResult

    model_config = ConfigDict(frozen=True)


class TrendInfoModel(BaseModel):
    """Direction and signed percentage of the latest day-over-day change."""

    direction: TrendDirection
    percentage: float

    model_config = ConfigDict(frozen=True)


class ScoreBreakdownModel(BaseModel):
    """Per-term contributions behind a score, before rounding.

    Term fields stay unset when the series is too short to score.
    """

    observations: int
    score: ScoreModel
    average_active_ads: Optional[float] = None
    trend_delta: Optional[float] = None
    consistency: Optional[float] = None
    base: Optional[float] = None
    trend: Optional[float] = None
    consistency_bonus: Optional[float] = None
    longevity: Optional[float] = None
    raw: Optional[float] = None

    model_config = ConfigDict(frozen=True)
