"""Shared contracts for validated offer payloads."""

from .offers import OfferModel, OfferPreferences, PreferenceKind
from .series import (
    Observation,
    ObservationModel,
    ScoreBreakdownModel,
    ScoreModel,
    ScoreResult,
    TrendDirection,
    TrendInfoModel,
)

__all__ = [
    "Observation",
    "ObservationModel",
    "OfferModel",
    "OfferPreferences",
    "PreferenceKind",
    "ScoreBreakdownModel",
    "ScoreModel",
    "ScoreResult",
    "TrendDirection",
    "TrendInfoModel",
]
