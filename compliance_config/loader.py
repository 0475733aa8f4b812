"""
Configuration Loader (``compliance_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into a typed
``RunnerConfig``.  Callers go through ``compliance_config.get_active_config()``
rather than calling this directly.

Invariants enforced
-------------------
* Every missing or mistyped required key raises ``ConfigurationError``
  naming the file and the key; there are no silent defaults for required
  fields.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  document so a run log can name the exact configuration it used.

Failure modes
-------------
* Missing file  -> ``ConfigurationError``.
* Malformed YAML  -> ``ConfigurationError`` wrapping ``yaml.YAMLError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from compliance_config.schema import DatabaseSettings, ModeDefinition, RunnerConfig
from compliance_kernel.exceptions import ConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: if the file is missing, unreadable, not valid
            YAML, or not a mapping at the top level.
    """
    if not path.is_file():
        raise ConfigurationError(str(path), "file not found")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(str(path), f"invalid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of a parsed configuration document."""
    canonical = json.dumps(data, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _require(data: dict[str, Any], key: str, source: str, where: str = "") -> Any:
    if key not in data or data[key] is None:
        raise ConfigurationError(source, f"missing required key '{where}{key}'")
    return data[key]


def parse_database(data: dict[str, Any], source: str) -> DatabaseSettings:
    if not isinstance(data, dict):
        raise ConfigurationError(source, "'database' must be a mapping")
    return DatabaseSettings(
        url=str(_require(data, "url", source, "database.")),
        echo=bool(data.get("echo", False)),
        pool_size=int(data.get("pool_size", 5)),
        max_overflow=int(data.get("max_overflow", 10)),
        pool_timeout=int(data.get("pool_timeout", 30)),
        pool_recycle=int(data.get("pool_recycle", 1800)),
    )


def parse_mode(data: dict[str, Any], source: str) -> ModeDefinition:
    if not isinstance(data, dict):
        raise ConfigurationError(source, "each mode must be a mapping")
    try:
        allowed = int(_require(data, "allowed_direct", source, "modes[]."))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(source, "modes[].allowed_direct must be an integer") from exc
    if allowed < 1:
        raise ConfigurationError(source, "modes[].allowed_direct must be at least 1")
    return ModeDefinition(
        name=str(_require(data, "name", source, "modes[].")),
        allowed_direct=allowed,
    )


def parse_config(data: dict[str, Any], source: str = "<memory>") -> RunnerConfig:
    """Parse a configuration document into a RunnerConfig."""
    modes_data = _require(data, "modes", source)
    if not isinstance(modes_data, list) or not modes_data:
        raise ConfigurationError(source, "'modes' must be a non-empty list")

    logging_data = data.get("logging") or {}

    return RunnerConfig(
        config_id=str(_require(data, "config_id", source)),
        version=int(data.get("version", 1)),
        database=parse_database(_require(data, "database", source), source),
        modes=tuple(parse_mode(m, source) for m in modes_data),
        log_level=str(logging_data.get("level", "INFO")).upper(),
        source_path=source,
        checksum=compute_checksum(data),
    )


def load_config_file(path: Path) -> RunnerConfig:
    return parse_config(load_yaml_file(path), str(path))
