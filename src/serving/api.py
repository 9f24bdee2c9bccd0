"""HTTP API surface for scoring and series maintenance.

The API is stateless: clients send the series they hold and receive the
derived values or the updated series back. Storage stays with the caller.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from config import IS_PRODUCTION
from config.version import PROJECT_VERSION
from src.contracts import (
    ObservationModel,
    OfferModel,
    ScoreBreakdownModel,
    TrendInfoModel,
)
from src.offers import OffersSummary, summarize_offers
from src.scoring import OfferScorer, get_default_scorer
from src.series import delete_observation, upsert_observation


class SeriesRequest(BaseModel):
    """A series of observations for one offer."""

    series: List[ObservationModel] = Field(default_factory=list)

    @field_validator("series")
    @classmethod
    def _order_by_date(cls, value: List[ObservationModel]) -> List[ObservationModel]:
        return sorted(value, key=lambda item: item.date)


class UpsertRequest(SeriesRequest):
    observation: ObservationModel


class DeleteRequest(SeriesRequest):
    date: str


class SeriesEnvelope(BaseModel):
    data: List[Dict[str, Any]]
    meta: Dict[str, Any]


class OffersRequest(BaseModel):
    offers: List[OfferModel] = Field(default_factory=list)


def _series_envelope(series: List[ObservationModel]) -> SeriesEnvelope:
    return SeriesEnvelope(
        data=[item.to_payload() for item in series],
        meta={
            "count": len(series),
            "generated_at": datetime.now(timezone.utc).isoformat(),
        },
    )


def create_app(scorer: Optional[OfferScorer] = None) -> FastAPI:
    """Create a configured FastAPI application."""

    active_scorer = scorer or get_default_scorer()
    app = FastAPI(
        title="Offer Tracker API",
        version=PROJECT_VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None,
    )

    def get_scorer() -> OfferScorer:
        return active_scorer

    @app.get("/healthz")
    def healthz() -> Dict[str, Any]:
        return {"status": "ok", "version": PROJECT_VERSION}

    @app.post("/v1/score", response_model=ScoreBreakdownModel)
    def score_series(
        payload: SeriesRequest, scorer: OfferScorer = Depends(get_scorer)
    ) -> ScoreBreakdownModel:
        return scorer.explain(payload.series)

    @app.post("/v1/trend", response_model=TrendInfoModel)
    def trend_series(
        payload: SeriesRequest, scorer: OfferScorer = Depends(get_scorer)
    ) -> TrendInfoModel:
        return scorer.trend(payload.series)

    @app.post("/v1/series/upsert", response_model=SeriesEnvelope)
    def upsert(payload: UpsertRequest) -> SeriesEnvelope:
        updated = upsert_observation(payload.series, payload.observation)
        logger.info(
            "Upserted {} via API, series now has {} observations",
            payload.observation.date,
            len(updated),
        )
        return _series_envelope(updated)

    @app.post("/v1/series/delete", response_model=SeriesEnvelope)
    def delete(payload: DeleteRequest) -> SeriesEnvelope:
        return _series_envelope(delete_observation(payload.series, payload.date))

    @app.post("/v1/offers/summary", response_model=OffersSummary)
    def offers_summary(
        payload: OffersRequest, scorer: OfferScorer = Depends(get_scorer)
    ) -> OffersSummary:
        return summarize_offers(payload.offers, scorer)

    return app


__all__ = ["create_app"]
