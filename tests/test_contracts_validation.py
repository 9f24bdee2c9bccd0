import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.contracts import (
    ObservationModel,
    OfferModel,
    OfferPreferences,
    ScoreModel,
    TrendInfoModel,
)


def _valid_offer_payload() -> dict[str, object]:
    return {
        "id": "offer-1",
        "name": "  Keto gummies  ",
        "description": None,
        "adData": [
            {"date": "2024-05-02", "activeAds": 14},
            {"date": "2024-05-01", "activeAds": 10, "observation": "launch"},
        ],
        "pageId": "1234",
        "totalPageAds": 40,
        "keywords": [" keto ", "Keto", "", "gummies"],
        "createdAt": "2024-05-01T08:00:00",
        "internalNote": "ignored",
    }


def test_observation_accepts_camel_and_snake_case() -> None:
    camel = ObservationModel.model_validate({"date": "2024-05-01", "activeAds": 3})
    snake = ObservationModel.model_validate({"date": "2024-05-01", "active_ads": 3})
    assert camel == snake
    assert camel.to_payload() == {"date": "2024-05-01", "activeAds": 3}


@pytest.mark.parametrize("value", ["2024-5-1", "2024-02-30", "01/05/2024", ""])
def test_observation_rejects_malformed_dates(value: str) -> None:
    with pytest.raises(ValidationError):
        ObservationModel.model_validate({"date": value, "activeAds": 1})


def test_observation_rejects_negative_count() -> None:
    with pytest.raises(ValidationError):
        ObservationModel.model_validate({"date": "2024-05-01", "activeAds": -1})


def test_observation_time_format() -> None:
    assert ObservationModel(date="2024-05-01", active_ads=1, time="").time is None
    assert ObservationModel(date="2024-05-01", active_ads=1, time="07:45").time == "07:45"
    with pytest.raises(ValidationError):
        ObservationModel(date="2024-05-01", active_ads=1, time="25:00")


def test_observation_keeps_unknown_fields() -> None:
    model = ObservationModel.model_validate(
        {"date": "2024-05-01", "activeAds": 2, "capturedBy": "extension"}
    )
    assert model.to_payload()["capturedBy"] == "extension"


def test_score_model_is_bounded_and_frozen() -> None:
    with pytest.raises(ValidationError):
        ScoreModel(value=101, label="x", result="high")
    with pytest.raises(ValidationError):
        ScoreModel(value=50, label="x", result="great")

    score = ScoreModel(value=50, label="Maybe", result="medium")
    with pytest.raises(ValidationError):
        score.value = 60


def test_trend_model_rejects_unknown_direction() -> None:
    with pytest.raises(ValidationError):
        TrendInfoModel(direction="sideways", percentage=0)


def test_offer_contract_normalizes_fields() -> None:
    offer = OfferModel.model_validate(_valid_offer_payload())

    assert offer.name == "Keto gummies"
    assert offer.description == ""
    assert offer.keywords == ["keto", "gummies"]
    assert [item.date for item in offer.ad_data] == ["2024-05-01", "2024-05-02"]
    assert offer.latest_observation is not None
    assert offer.latest_observation.active_ads == 14
    assert offer.created_at == datetime(2024, 5, 1, 8, tzinfo=timezone.utc)
    assert not hasattr(offer, "internalNote")


def test_offer_contract_requires_name() -> None:
    payload = _valid_offer_payload()
    payload["name"] = "   "

    with pytest.raises(ValidationError):
        OfferModel.model_validate(payload)


def test_offer_without_observations_has_no_latest() -> None:
    offer = OfferModel(id="o", name="Empty")
    assert offer.latest_observation is None
    assert offer.total_page_ads == 0


def test_preferences_toggle_and_forget() -> None:
    preferences = OfferPreferences()

    assert preferences.toggle("a", "pin") is True
    assert preferences.toggle("a", "favorite") is True
    assert preferences.toggle("a", "pin") is False
    assert preferences.is_set("a", "favorite")

    preferences.set("a", "archive", True)
    preferences.forget("a")
    assert not preferences.pinned and not preferences.favorites and not preferences.archived


def test_preferences_reject_unknown_kind() -> None:
    with pytest.raises(ValueError):
        OfferPreferences().toggle("a", "hide")
