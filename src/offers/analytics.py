"""Portfolio-level aggregates shown on the analytics page."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from src.contracts import OfferModel
from src.scoring.offer_scorer import OfferScorer


class OfferActivityRow(BaseModel):
    offer_id: str
    name: str
    active_ads: int
    total_page_ads: int
    change: float


class HistoryPoint(BaseModel):
    """Counts recorded on one date, keyed by offer id."""

    date: str
    counts: Dict[str, int] = Field(default_factory=dict)


class OffersSummary(BaseModel):
    total_offers: int
    total_active_ads: int
    total_page_ads: int
    by_offer: List[OfferActivityRow]
    score_distribution: Dict[str, int]
    history: List[HistoryPoint]


def summarize_offers(
    offers: Iterable[OfferModel], scorer: Optional[OfferScorer] = None
) -> OffersSummary:
    """Aggregate latest counts, score bands and the merged history of offers."""

    scorer = scorer or OfferScorer()
    offers = list(offers)

    rows: List[OfferActivityRow] = []
    distribution = {"high": 0, "medium": 0, "low": 0}
    history: Dict[str, Dict[str, int]] = {}
    total_active_ads = 0

    for offer in offers:
        latest = offer.latest_observation
        active_ads = latest.active_ads if latest else 0
        total_active_ads += active_ads

        trend = scorer.trend(offer.ad_data)
        rows.append(
            OfferActivityRow(
                offer_id=offer.id,
                name=offer.name,
                active_ads=active_ads,
                total_page_ads=offer.total_page_ads,
                change=0.0 if trend.direction == "stable" else trend.percentage,
            )
        )
        distribution[scorer.score(offer.ad_data).result] += 1

        for observation in offer.ad_data:
            history.setdefault(observation.date, {})[offer.id] = observation.active_ads

    rows.sort(key=lambda row: row.active_ads, reverse=True)
    return OffersSummary(
        total_offers=len(offers),
        total_active_ads=total_active_ads,
        total_page_ads=sum(offer.total_page_ads for offer in offers),
        by_offer=rows,
        score_distribution=distribution,
        history=[
            HistoryPoint(date=day, counts=history[day]) for day in sorted(history)
        ],
    )


__all__ = ["HistoryPoint", "OfferActivityRow", "OffersSummary", "summarize_offers"]
