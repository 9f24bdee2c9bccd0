"""Series maintenance: upsert, delete and trend recomputation."""

from .updater import (
    delete_observation,
    recompute_trends,
    sort_series,
    upsert_observation,
)

__all__ = [
    "delete_observation",
    "recompute_trends",
    "sort_series",
    "upsert_observation",
]
