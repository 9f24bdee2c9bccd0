"""Offer quality score and latest-trend computation over an ad-count series.

The score blends four terms into a 0-100 value:

* base: average active ads, worth up to 50 points;
* trend: growth (or decline) of the second half of the series over the
  first half, within +/-20 points;
* consistency: up to 15 points for low relative variability;
* longevity: up to 15 points for a longer observation history.

Series shorter than ``MIN_OBSERVATIONS_FOR_SCORE`` get a neutral score.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping, Optional, Sequence

from loguru import logger

from src.contracts import ScoreBreakdownModel, ScoreModel, TrendInfoModel

MIN_OBSERVATIONS_FOR_SCORE = 3
MIN_OBSERVATIONS_FOR_TREND = 2
TREND_SIGNIFICANCE_THRESHOLD = 5.0
HIGH_SCORE_THRESHOLD = 70
MEDIUM_SCORE_THRESHOLD = 40
NEUTRAL_SCORE = 50

DEFAULT_LABELS = {
    "high": "Worth testing",
    "medium": "Maybe",
    "low": "Not worth it",
    "insufficient": "Insufficient data",
}


def _get_attr(obj: Any, name: str, default=None):
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def active_ads_of(observation: Any) -> int:
    """Read the active-ad count from a model or a raw camelCase/snake_case mapping."""

    value = _get_attr(observation, "active_ads")
    if value is None:
        value = _get_attr(observation, "activeAds", 0)
    return value


def date_of(observation: Any) -> str:
    return _get_attr(observation, "date", "")


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def consistency(values: Sequence[float]) -> float:
    """Normalized population standard deviation, capped at 1 (lower is steadier)."""

    mean = _mean(values)
    variance = _mean([(value - mean) ** 2 for value in values])
    std_dev = math.sqrt(variance)
    return min(1.0, std_dev / max(mean, 1))


class OfferScorer:
    """Scores offers from their active-ad series.

    Thresholds, labels and minimum series lengths come from the ``scoring``
    and ``trend`` configuration sections; missing keys fall back to the
    module constants.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        trend_config: Optional[Dict[str, Any]] = None,
    ):
        self.config = config or {}
        self.trend_config = trend_config or {}
        # The halves split needs at least one element in each half.
        self.min_observations = max(
            2, int(self.config.get("min_observations", MIN_OBSERVATIONS_FOR_SCORE))
        )
        self.neutral_score = int(self.config.get("neutral_score", NEUTRAL_SCORE))
        self.high_threshold = int(self.config.get("high_threshold", HIGH_SCORE_THRESHOLD))
        self.medium_threshold = int(
            self.config.get("medium_threshold", MEDIUM_SCORE_THRESHOLD)
        )
        self.labels = {**DEFAULT_LABELS, **(self.config.get("labels") or {})}
        self.trend_min_observations = max(
            MIN_OBSERVATIONS_FOR_TREND,
            int(self.trend_config.get("min_observations", MIN_OBSERVATIONS_FOR_TREND)),
        )
        self.significance_threshold = float(
            self.trend_config.get("significance_threshold", TREND_SIGNIFICANCE_THRESHOLD)
        )

    def classify(self, value: int) -> ScoreModel:
        """Map a rounded score onto its result band and label."""

        if value >= self.high_threshold:
            result = "high"
        elif value >= self.medium_threshold:
            result = "medium"
        else:
            result = "low"
        return ScoreModel(value=value, label=self.labels[result], result=result)

    def explain(self, series: Sequence[Any]) -> ScoreBreakdownModel:
        """Compute the score along with every term that produced it.

        The series is taken in the order given; callers pass it sorted by date.
        """

        n = len(series) if series else 0
        if n < self.min_observations:
            neutral = ScoreModel(
                value=self.neutral_score,
                label=self.labels["insufficient"],
                result="medium",
            )
            return ScoreBreakdownModel(observations=n, score=neutral)

        values = [active_ads_of(item) for item in series]
        average = _mean(values)

        mid = n // 2
        trend_delta = _mean(values[mid:]) - _mean(values[:mid])
        consistency_factor = consistency(values)

        base = min(50.0, average * 2.5)
        if trend_delta > 0:
            trend_term = min(20.0, trend_delta * 2)
        else:
            trend_term = max(-20.0, trend_delta * 2)
        consistency_bonus = 15 * (1 - consistency_factor)
        longevity = min(15.0, n * 0.5)

        raw = base + trend_term + consistency_bonus + longevity
        value = _round_half_up(min(100.0, max(0.0, raw)))
        score = self.classify(value)

        logger.debug(
            "Scored series of {} observations: raw={:.2f} value={} result={}",
            n,
            raw,
            value,
            score.result,
        )
        return ScoreBreakdownModel(
            observations=n,
            score=score,
            average_active_ads=average,
            trend_delta=trend_delta,
            consistency=consistency_factor,
            base=base,
            trend=trend_term,
            consistency_bonus=consistency_bonus,
            longevity=longevity,
            raw=raw,
        )

    def score(self, series: Sequence[Any]) -> ScoreModel:
        return self.explain(series).score

    def trend(self, series: Sequence[Any]) -> TrendInfoModel:
        """Describe the change between the two most recent observations."""

        if not series or len(series) < self.trend_min_observations:
            return TrendInfoModel(direction="stable", percentage=0)

        ordered = sorted(series, key=date_of)
        latest = active_ads_of(ordered[-1])
        previous = active_ads_of(ordered[-2])

        if previous == 0:
            if latest > 0:
                return TrendInfoModel(direction="up", percentage=100)
            return TrendInfoModel(direction="stable", percentage=0)

        percent_change = (latest - previous) / previous * 100
        direction = "stable"
        if abs(percent_change) >= self.significance_threshold:
            direction = "up" if percent_change > 0 else "down"
        return TrendInfoModel(direction=direction, percentage=percent_change)


_DEFAULT_SCORER = OfferScorer()


def calculate_score(series: Sequence[Any]) -> ScoreModel:
    """Score a series with the built-in thresholds."""

    return _DEFAULT_SCORER.score(series)


def calculate_trend(series: Sequence[Any]) -> TrendInfoModel:
    """Latest day-over-day trend of a series with the built-in threshold."""

    return _DEFAULT_SCORER.trend(series)


__all__ = [
    "HIGH_SCORE_THRESHOLD",
    "MEDIUM_SCORE_THRESHOLD",
    "MIN_OBSERVATIONS_FOR_SCORE",
    "MIN_OBSERVATIONS_FOR_TREND",
    "NEUTRAL_SCORE",
    "TREND_SIGNIFICANCE_THRESHOLD",
    "OfferScorer",
    "active_ads_of",
    "calculate_score",
    "calculate_trend",
    "consistency",
    "date_of",
]
