"""End-to-end tests for the scoring command line entry point."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import run_scoring

pytestmark = pytest.mark.e2e


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _series(*counts: int) -> list[dict]:
    return [
        {"date": f"2024-03-{day:02d}", "activeAds": count}
        for day, count in enumerate(counts, start=1)
    ]


def test_text_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write(tmp_path / "series.json", _series(10, 10, 10, 10, 10))

    assert run_scoring.main([str(source)]) == 0

    out = capsys.readouterr().out
    assert "Score: 43 (Maybe, medium)" in out
    assert "Trend: stable 0.0%" in out
    assert "Observations: 5" in out
    assert "raw=42.50" in out


def test_record_count_and_write_offer(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    offer = {"id": "o1", "name": "Serum", "adData": _series(10, 12)}
    source = _write(tmp_path / "offer.json", offer)
    target = tmp_path / "updated.json"

    code = run_scoring.main(
        [
            str(source),
            "--ads",
            "18",
            "--date",
            "2024-03-03",
            "--note",
            "new creative",
            "--output",
            str(target),
            "--json",
        ]
    )
    assert code == 0

    report = json.loads(capsys.readouterr().out)
    assert report["observations"] == 3
    assert report["trend"] == {"direction": "up", "percentage": 50.0}

    written = json.loads(target.read_text(encoding="utf-8"))
    assert written["id"] == "o1"
    assert written["adData"][-1] == {
        "date": "2024-03-03",
        "activeAds": 18,
        "observation": "new creative",
        "trend": 50.0,
    }


def test_delete_observation(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write(tmp_path / "series.json", _series(10, 0, 20))

    assert run_scoring.main([str(source), "--delete", "2024-03-02", "--json"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["observations"] == 2
    assert report["score"]["label"] == "Insufficient data"
    assert report["trend"]["percentage"] == 100.0


def test_invalid_input_reports_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "broken.json"
    source.write_text("{not json", encoding="utf-8")

    assert run_scoring.main([str(source)]) == 1
    assert "error:" in capsys.readouterr().err


def test_negative_count_is_rejected(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write(tmp_path / "series.json", _series(1, 2))

    assert run_scoring.main([str(source), "--ads", "-4", "--date", "2024-03-03"]) == 1
    assert "error:" in capsys.readouterr().err


def test_note_without_count_is_a_usage_error(tmp_path: Path) -> None:
    source = _write(tmp_path / "series.json", _series(1))

    with pytest.raises(SystemExit) as excinfo:
        run_scoring.main([str(source), "--note", "orphan"])
    assert excinfo.value.code == 2
