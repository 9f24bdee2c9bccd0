"""Contracts describing tracked offers and per-user display preferences."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .series import ObservationModel

PreferenceKind = Literal["pin", "favorite", "archive"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_keywords(keywords: Iterable[str]) -> List[str]:
    """Strip tags, drop blanks and case-insensitive duplicates, keep first spelling."""

    seen = set()
    normalized: List[str] = []
    for keyword in keywords:
        tag = keyword.strip()
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        normalized.append(tag)
    return normalized


class OfferModel(BaseModel):
    """An advertising offer and its observation history."""

    id: str
    name: str
    description: str = ""
    ad_data: List[ObservationModel] = Field(default_factory=list, alias="adData")
    page_id: Optional[str] = Field(default=None, alias="pageId")
    page_name: Optional[str] = Field(default=None, alias="pageName")
    total_page_ads: int = Field(default=0, ge=0, alias="totalPageAds")
    keywords: List[str] = Field(default_factory=list)
    facebook_ad_library_url: Optional[str] = Field(
        default=None, alias="facebookAdLibraryUrl"
    )
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("offer name must not be blank")
        return value.strip()

    @field_validator("keywords", mode="before")
    @classmethod
    def _normalize_keywords(cls, value: Optional[List[str]]) -> List[str]:
        return normalize_keywords(value or [])

    @field_validator("ad_data")
    @classmethod
    def _order_by_date(cls, value: List[ObservationModel]) -> List[ObservationModel]:
        return sorted(value, key=lambda item: item.date)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value: Optional[str]) -> str:
        return value or ""

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def latest_observation(self) -> Optional[ObservationModel]:
        return self.ad_data[-1] if self.ad_data else None


class OfferPreferences(BaseModel):
    """Pinned, favorite and archived offer ids for one user."""

    pinned: Set[str] = Field(default_factory=set)
    favorites: Set[str] = Field(default_factory=set)
    archived: Set[str] = Field(default_factory=set)

    def _bucket(self, kind: PreferenceKind) -> Set[str]:
        if kind == "pin":
            return self.pinned
        if kind == "favorite":
            return self.favorites
        if kind == "archive":
            return self.archived
        raise ValueError(f"unknown preference kind: {kind!r}")

    def is_set(self, offer_id: str, kind: PreferenceKind) -> bool:
        return offer_id in self._bucket(kind)

    def set(self, offer_id: str, kind: PreferenceKind, value: bool) -> None:
        bucket = self._bucket(kind)
        if value:
            bucket.add(offer_id)
        else:
            bucket.discard(offer_id)

    def toggle(self, offer_id: str, kind: PreferenceKind) -> bool:
        """Flip one preference and return its new state."""

        new_value = not self.is_set(offer_id, kind)
        self.set(offer_id, kind, new_value)
        return new_value

    def forget(self, offer_id: str) -> None:
        """Drop every preference held for a deleted offer."""

        for bucket in (self.pinned, self.favorites, self.archived):
            bucket.discard(offer_id)
