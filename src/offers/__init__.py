"""Offer list handling and portfolio analytics."""

from .analytics import HistoryPoint, OfferActivityRow, OffersSummary, summarize_offers
from .catalog import (
    OfferView,
    filter_offers,
    matches_search,
    normalize_keywords,
    order_offers,
)

__all__ = [
    "HistoryPoint",
    "OfferActivityRow",
    "OfferView",
    "OffersSummary",
    "filter_offers",
    "matches_search",
    "normalize_keywords",
    "order_offers",
    "summarize_offers",
]
