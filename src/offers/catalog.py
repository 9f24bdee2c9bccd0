"""Search, view filters and ordering for the offer list."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Literal

from src.contracts import OfferModel, OfferPreferences
from src.contracts.offers import normalize_keywords

OfferView = Literal["all", "pinned", "favorites", "archived"]


def matches_search(offer: OfferModel, term: str) -> bool:
    needle = term.strip().lower()
    if not needle:
        return True
    if needle in offer.name.lower() or needle in offer.description.lower():
        return True
    return any(needle in keyword.lower() for keyword in offer.keywords)


def _in_view(offer: OfferModel, preferences: OfferPreferences, view: OfferView) -> bool:
    if view == "pinned":
        return offer.id in preferences.pinned
    if view == "favorites":
        return offer.id in preferences.favorites
    if view == "archived":
        return offer.id in preferences.archived
    if view == "all":
        return offer.id not in preferences.archived
    raise ValueError(f"unknown offer view: {view!r}")


def order_offers(
    offers: Iterable[OfferModel], preferences: OfferPreferences
) -> List[OfferModel]:
    """Pinned offers first, newest first within each group."""

    def sort_key(offer: OfferModel) -> tuple[bool, float]:
        created: datetime = offer.created_at
        return (offer.id not in preferences.pinned, -created.timestamp())

    return sorted(offers, key=sort_key)


def filter_offers(
    offers: Iterable[OfferModel],
    preferences: OfferPreferences,
    search: str = "",
    view: OfferView = "all",
) -> List[OfferModel]:
    """Apply the search box and view selector, then the list ordering.

    The ``all`` view hides archived offers.
    """

    selected = [
        offer
        for offer in offers
        if matches_search(offer, search) and _in_view(offer, preferences, view)
    ]
    return order_offers(selected, preferences)


__all__ = [
    "OfferView",
    "filter_offers",
    "matches_search",
    "normalize_keywords",
    "order_offers",
]
