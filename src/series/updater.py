"""Upsert/delete rules for an offer's observation series.

Every operation returns a new list sorted by date with one element per date
and a freshly computed ``trend`` on each element. Inputs are never mutated;
storing the result is the caller's job.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

from loguru import logger

from src.contracts import ObservationModel

ObservationLike = Union[ObservationModel, Mapping[str, Any]]


def _as_model(item: ObservationLike) -> ObservationModel:
    if isinstance(item, ObservationModel):
        return item.model_copy()
    return ObservationModel.model_validate(item)


def sort_series(series: Iterable[ObservationLike]) -> List[ObservationModel]:
    """Return a copy ordered by date (ISO dates sort chronologically as text)."""

    return sorted((_as_model(item) for item in series), key=lambda item: item.date)


def recompute_trends(series: Iterable[ObservationLike]) -> List[ObservationModel]:
    """Recompute each element's change against its predecessor.

    The first element, and any element whose predecessor had zero ads, get
    ``trend=None``.
    """

    ordered = sort_series(series)
    updated: List[ObservationModel] = []
    previous: Optional[ObservationModel] = None
    for item in ordered:
        trend: Optional[float] = None
        if previous is not None and previous.active_ads > 0:
            trend = (item.active_ads - previous.active_ads) / previous.active_ads * 100
        updated.append(item.model_copy(update={"trend": trend}))
        previous = item
    return updated


def upsert_observation(
    series: Iterable[ObservationLike], new_obs: ObservationLike
) -> List[ObservationModel]:
    """Insert or replace the observation for ``new_obs.date``.

    A matching date keeps every other field of the stored element and only
    takes the new ``active_ads``, ``observation`` and ``time``.
    """

    incoming = _as_model(new_obs)
    result: List[ObservationModel] = []
    replaced = False
    for item in (_as_model(entry) for entry in series):
        if item.date == incoming.date and not replaced:
            item = item.model_copy(
                update={
                    "active_ads": incoming.active_ads,
                    "observation": incoming.observation,
                    "time": incoming.time,
                }
            )
            replaced = True
        elif item.date == incoming.date:
            # Collapse duplicate dates left behind by an inconsistent snapshot.
            continue
        result.append(item)
    if not replaced:
        result.append(incoming)

    logger.debug(
        "{} observation for {} ({} ads)",
        "Updated" if replaced else "Added",
        incoming.date,
        incoming.active_ads,
    )
    return recompute_trends(result)


def delete_observation(
    series: Iterable[ObservationLike], date: str
) -> List[ObservationModel]:
    """Remove the observation recorded for ``date``; absent dates are a no-op."""

    remaining = [item for item in (_as_model(entry) for entry in series) if item.date != date]
    logger.debug("Deleted observation for {}, {} remain", date, len(remaining))
    return recompute_trends(remaining)


__all__ = [
    "ObservationLike",
    "delete_observation",
    "recompute_trends",
    "sort_series",
    "upsert_observation",
]
