"""
Main package of the offer tracker.

Holds the scoring engine, series maintenance, offer list helpers and the
HTTP surface.
"""

from config.version import PROJECT_VERSION, PYTHON_REQUIRES_SPECIFIER

from .scoring import OfferScorer, calculate_score, calculate_trend, create_scorer
from .series import delete_observation, upsert_observation
from .serving import create_app
from .utils import get_logger, setup_logging

__version__ = PROJECT_VERSION
__description__ = "Quality score and trend tracking for advertising offers"

__package_info__ = {
    "name": "offer_tracker",
    "version": __version__,
    "description": __description__,
    "license": "MIT",
    "python_requires": PYTHON_REQUIRES_SPECIFIER,
}

__all__ = [
    "OfferScorer",
    "calculate_score",
    "calculate_trend",
    "create_scorer",
    "delete_observation",
    "upsert_observation",
    "create_app",
    "get_logger",
    "setup_logging",
]
