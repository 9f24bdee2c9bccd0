"""Layered configuration loading and the ``offertrack-config`` CLI.

Every setting is resolved by its dotted key (``scoring.high_threshold``) from,
in increasing precedence: the schema defaults, ``config.toml``, a ``.env``
file and ``OFFERTRACK__SECTION__KEY`` process environment variables. The
layer that supplied each key is recorded so ``--explain`` can report it.
"""
from __future__ import annotations

import argparse
import json
import os
import shutil
import sys
import tempfile
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import tomli_w
from dotenv import dotenv_values
from pydantic import ValidationError

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python 3.10
    import tomli as tomllib  # type: ignore[no-redef]

from offertrack.config_schema import DEFAULT_CONFIG, Config

ENV_PREFIX = "OFFERTRACK"
CONFIG_FILENAME = "config.toml"
ENV_FILENAME = ".env"
BACKUP_DIRNAME = "backups"
LOAD_ORDER = ("defaults", "file", "env-file", "env")


class ConfigError(RuntimeError):
    """Raised when configuration cannot be read, validated or saved."""


@dataclass(frozen=True)
class ValueOrigin:
    """Which layer supplied a setting."""

    layer: str
    source: str = ""
    env_var: Optional[str] = None

    def render(self) -> str:
        details = ", ".join(item for item in (self.env_var, self.source) if item)
        return f"{self.layer} ({details})" if details else self.layer


@dataclass
class ConfigMetadata:
    config_path: Path
    env_path: Optional[Path]
    env_prefix: str
    provenance: Dict[str, ValueOrigin] = field(default_factory=dict)
    load_order: Tuple[str, ...] = LOAD_ORDER


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _settings_items(mapping: Mapping[str, Any], prefix: str = "") -> Iterator[Tuple[str, Any]]:
    """Yield ``(dotted_key, value)`` for every leaf setting of a nested mapping."""

    for name, value in mapping.items():
        key = f"{prefix}.{name}" if prefix else str(name)
        if isinstance(value, Mapping):
            yield from _settings_items(value, key)
        else:
            yield key, value


def _as_sections(values: Mapping[str, Any]) -> Dict[str, Any]:
    sections: Dict[str, Any] = {}
    for key, value in values.items():
        *parents, name = key.split(".")
        node = sections
        for parent in parents:
            child = node.get(parent)
            if not isinstance(child, dict):
                child = node[parent] = {}
            node = child
        node[name] = value
    return sections


def _env_key(name: str, prefix: str) -> Optional[str]:
    """Map ``OFFERTRACK__SCORING__HIGH_THRESHOLD`` to ``scoring.high_threshold``."""

    marker = prefix + "__"
    if not name.startswith(marker):
        return None
    segments = [segment.lower() for segment in name[len(marker) :].split("__") if segment]
    return ".".join(segments) or None


def _parse_text(text: str) -> Any:
    """Interpret an environment or ``--set`` value (booleans, numbers, JSON)."""

    value = text.strip()
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null"):
        return None
    if not value:
        return ""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _find_env_file(config_path: Path) -> Optional[Path]:
    for candidate in (config_path.parent / ENV_FILENAME, _project_root() / ENV_FILENAME):
        if candidate.exists():
            return candidate
    return None


def _validate(values: Mapping[str, Any], provenance: Mapping[str, ValueOrigin]) -> Config:
    try:
        return Config.model_validate(_as_sections(values))
    except ValidationError as exc:
        problems: List[str] = []
        for error in exc.errors():
            key = ".".join(str(part) for part in error["loc"]) or "<root>"
            origin = provenance.get(key)
            line = f"{key}: {error['msg']}"
            if not isinstance(error.get("input"), (Mapping, type(None))):
                line += f" (received={error['input']!r})"
            if origin is not None:
                line += f" [{origin.render()}]"
            problems.append(line)
        raise ConfigError(
            "Configuration validation failed:\n - " + "\n - ".join(problems)
        ) from exc


def load_config(
    path: Path | None = None,
    *,
    env_prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Resolve every setting through the layers and validate the result."""

    config_path = Path(path) if path else _project_root() / CONFIG_FILENAME
    env_path = _find_env_file(config_path)
    values: Dict[str, Any] = {}
    provenance: Dict[str, ValueOrigin] = {}

    def apply(key: str, value: Any, origin: ValueOrigin) -> None:
        values[key] = value
        provenance[key] = origin

    for key, value in _settings_items(DEFAULT_CONFIG.model_dump(mode="python")):
        apply(key, value, ValueOrigin("defaults"))
    for key, value in _settings_items(_read_toml(config_path)):
        apply(key, value, ValueOrigin("file", str(config_path)))
    if env_path is not None:
        for name, text in dotenv_values(env_path).items():
            key = _env_key(name, env_prefix)
            if key and text is not None:
                apply(key, _parse_text(text), ValueOrigin("env-file", str(env_path), name))
    for name, text in (os.environ if environ is None else environ).items():
        key = _env_key(name, env_prefix)
        if key:
            apply(key, _parse_text(text), ValueOrigin("env", "process", name))

    config = _validate(values, provenance)
    config._metadata = ConfigMetadata(
        config_path=config_path,
        env_path=env_path,
        env_prefix=env_prefix,
        provenance=provenance,
    )
    return config


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write ``config`` as TOML, keeping a timestamped copy of the previous file."""

    metadata: Optional[ConfigMetadata] = config._metadata
    target = Path(path) if path else (
        metadata.config_path if metadata else _project_root() / CONFIG_FILENAME
    )
    # TOML has no null: unset optional settings are left out.
    document = config.model_dump(mode="json", exclude_none=True)

    target.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        prefix=".offertrack-config-", dir=target.parent, delete=False
    ) as handle:
        tmp_path = Path(handle.name)
        tomli_w.dump(document, handle)
    try:
        if target.exists():
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
            backups = target.parent / BACKUP_DIRNAME
            backups.mkdir(exist_ok=True)
            shutil.copy2(target, backups / f"{target.name}.{stamp}.bak")
        os.replace(tmp_path, target)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise ConfigError(f"Failed to save configuration to {target}: {exc}") from exc
    return target


def _current_values(config: Config) -> Dict[str, Any]:
    return dict(_settings_items(config.model_dump(mode="json")))


def explain(config: Config, key: str) -> str:
    """Describe a setting's value and the layer it came from."""

    values = _current_values(config)
    if key not in values:
        raise ConfigError(f"Unknown configuration key: {key}")
    metadata: Optional[ConfigMetadata] = config._metadata
    origin = metadata.provenance.get(key) if metadata else None
    source = origin.render() if origin else "unknown"
    return f"{key} = {json.dumps(values[key])}\nsource: {source}"


def apply_updates(config: Config, assignments: Mapping[str, str]) -> Tuple[Config, List[str]]:
    """Return the updated configuration and one ``key: old -> new`` line per change."""

    before = _current_values(config)
    values = dict(_settings_items(config.model_dump(mode="python")))
    metadata: Optional[ConfigMetadata] = config._metadata
    provenance = dict(metadata.provenance) if metadata else {}
    for key, text in assignments.items():
        if key not in values:
            raise ConfigError(f"Unknown configuration key: {key}")
        values[key] = _parse_text(text)
        provenance[key] = ValueOrigin("cli", "--set")

    updated = _validate(values, provenance)
    updated._metadata = replace(metadata, provenance=provenance) if metadata else None

    after = _current_values(updated)
    changes = [
        f"{key}: {json.dumps(before.get(key))} -> {json.dumps(after.get(key))}"
        for key in assignments
        if before.get(key) != after.get(key)
    ]
    return updated, changes


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Offer tracker configuration")
    parser.add_argument("--config", type=Path, help="TOML configuration file")
    parser.add_argument("--env-prefix", default=ENV_PREFIX, help="Environment variable prefix")
    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("--validate", action="store_true", help="Validate the configuration")
    actions.add_argument("--explain", metavar="KEY", help="Show a value and where it came from")
    actions.add_argument(
        "--set",
        nargs="+",
        metavar="KEY=VALUE",
        help="Validate and persist one or more settings",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, env_prefix=args.env_prefix)
        if args.validate:
            print("Configuration OK")
        elif args.explain:
            print(explain(config, args.explain))
        else:
            assignments: Dict[str, str] = {}
            for item in args.set:
                key, separator, value = item.partition("=")
                if not separator:
                    raise ConfigError(f"Invalid --set argument: '{item}'")
                assignments[key.strip()] = value
            updated, changes = apply_updates(config, assignments)
            saved = save_config(updated, args.config)
            for line in changes:
                print(line)
            print(f"Saved configuration to {saved}")
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI entry point
    raise SystemExit(main())
