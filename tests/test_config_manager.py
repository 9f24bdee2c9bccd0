from __future__ import annotations

from pathlib import Path

import pytest

from offertrack.config_manager import (
    Config,
    ConfigError,
    apply_updates,
    explain,
    load_config,
    save_config,
)
from offertrack.config_schema import DEFAULT_CONFIG


def test_precedence_env_overrides(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[scoring]\nhigh_threshold = 75\n", encoding="utf-8")
    env_file = tmp_path / ".env"
    env_file.write_text("OFFERTRACK__SCORING__HIGH_THRESHOLD=80\n", encoding="utf-8")
    environ = {"OFFERTRACK__SCORING__HIGH_THRESHOLD": "85"}
    config = load_config(config_file, environ=environ)
    assert config.scoring.high_threshold == 85
    provenance = config._metadata.provenance["scoring.high_threshold"]
    assert provenance.layer == "env"
    assert provenance.env_var == "OFFERTRACK__SCORING__HIGH_THRESHOLD"


def test_defaults_match_scoring_constants(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml", environ={})
    assert config.scoring.min_observations == 3
    assert config.scoring.neutral_score == 50
    assert config.scoring.high_threshold == 70
    assert config.scoring.medium_threshold == 40
    assert config.trend.significance_threshold == 5.0
    assert config.scoring.labels.insufficient == "Insufficient data"


def test_save_config_creates_backups(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[trend]\nsignificance_threshold = 5.0\n", encoding="utf-8")
    config = load_config(config_file, environ={})
    data = config.model_dump(mode="python")
    data["trend"]["significance_threshold"] = 7.5
    updated = Config.model_validate(data)
    updated._metadata = config._metadata
    save_config(updated)
    data["trend"]["significance_threshold"] = 10.0
    updated = Config.model_validate(data)
    updated._metadata = config._metadata
    save_config(updated)
    backups_dir = config_file.parent / "backups"
    backups = list(backups_dir.glob("config.toml.*.bak"))
    assert backups, "second save should produce a timestamped backup"
    assert load_config(config_file, environ={}).trend.significance_threshold == 10.0


def test_save_config_drops_optional_none(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('[logging]\nfile_path = "logs/app.log"\n', encoding="utf-8")
    config = load_config(config_file, environ={})
    data = config.model_dump(mode="python")
    data["logging"]["file_path"] = None
    updated = Config.model_validate(data)
    updated._metadata = config._metadata
    save_config(updated)
    content = config_file.read_text(encoding="utf-8")
    assert "file_path =" not in content


def test_blank_log_file_path_normalized(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('[logging]\nfile_path = ""\n', encoding="utf-8")
    config = load_config(config_file, environ={})
    assert config.logging.file_path is None


def test_validation_errors_report_source(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[scoring]\nhigh_threshold = 'abc'\n", encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_config(config_file, environ={})
    assert "scoring.high_threshold" in str(excinfo.value)
    assert "file" in str(excinfo.value)


def test_inverted_bands_are_rejected(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        "[scoring]\nhigh_threshold = 30\nmedium_threshold = 60\n", encoding="utf-8"
    )
    with pytest.raises(ConfigError):
        load_config(config_file, environ={})


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[scoring]\nbonus = 3\n", encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_config(config_file, environ={})
    assert "scoring.bonus" in str(excinfo.value)


def test_unparseable_toml_raises_config_error(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[scoring\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_file, environ={})


@pytest.mark.parametrize(
    "toml_text",
    [
        "[scoring]\nmin_observations = 1\n",
        "[trend]\nmin_observations = 1\n",
        "[scoring]\nneutral_score = 70\n",
    ],
)
def test_settings_that_would_break_scoring_are_rejected(tmp_path: Path, toml_text: str) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text(toml_text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_file, environ={})


def test_env_min_observations_below_two_is_rejected(tmp_path: Path) -> None:
    environ = {"OFFERTRACK__SCORING__MIN_OBSERVATIONS": "1"}
    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path / "config.toml", environ=environ)
    assert "scoring.min_observations" in str(excinfo.value)
    assert "OFFERTRACK__SCORING__MIN_OBSERVATIONS" in str(excinfo.value)


def test_defaults_have_no_unused_sections() -> None:
    assert set(DEFAULT_CONFIG.model_dump()) == {"app", "logging", "scoring", "trend"}


def test_explain_reports_layer(tmp_path: Path) -> None:
    config = load_config(
        tmp_path / "config.toml", environ={"OFFERTRACK__SCORING__LABELS__HIGH": "Test it"}
    )
    assert explain(config, "scoring.labels.high") == (
        'scoring.labels.high = "Test it"\n'
        "source: env (OFFERTRACK__SCORING__LABELS__HIGH, process)"
    )
    assert explain(config, "trend.min_observations").endswith("source: defaults")
    with pytest.raises(ConfigError):
        explain(config, "paths.data_dir")


def test_apply_updates_reports_changes(tmp_path: Path) -> None:
    config = load_config(tmp_path / "config.toml", environ={})
    updated, changes = apply_updates(
        config, {"scoring.high_threshold": "75", "trend.significance_threshold": "5"}
    )
    assert updated.scoring.high_threshold == 75
    assert changes == ["scoring.high_threshold: 70 -> 75"]
    assert updated._metadata.provenance["scoring.high_threshold"].layer == "cli"
    with pytest.raises(ConfigError):
        apply_updates(config, {"scoring.medium_threshold": "90"})
