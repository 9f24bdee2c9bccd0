"""Scoring package exports."""

from config import SCORING_CONFIG, TREND_CONFIG

from .offer_scorer import (
    MIN_OBSERVATIONS_FOR_SCORE,
    MIN_OBSERVATIONS_FOR_TREND,
    TREND_SIGNIFICANCE_THRESHOLD,
    OfferScorer,
    calculate_score,
    calculate_trend,
    consistency,
)


def create_scorer(config=None, trend_config=None) -> OfferScorer:
    """Factory returning a scorer built from the active configuration."""
    return OfferScorer(
        SCORING_CONFIG if config is None else config,
        TREND_CONFIG if trend_config is None else trend_config,
    )


def get_default_scorer() -> OfferScorer:
    """Return scorer using configuration defaults."""
    return create_scorer()


def score_offers(offers, scorer=None):
    """Score and trend every offer, keyed by offer id."""
    scorer = scorer or get_default_scorer()
    results = {}
    for offer in offers:
        results[offer.id] = {
            "score": scorer.score(offer.ad_data),
            "trend": scorer.trend(offer.ad_data),
        }
    return results


__all__ = [
    "MIN_OBSERVATIONS_FOR_SCORE",
    "MIN_OBSERVATIONS_FOR_TREND",
    "TREND_SIGNIFICANCE_THRESHOLD",
    "OfferScorer",
    "calculate_score",
    "calculate_trend",
    "consistency",
    "create_scorer",
    "get_default_scorer",
    "score_offers",
]
