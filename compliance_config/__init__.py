"""
compliance_config -- single public entrypoint for runner configuration.

Responsibility:
    Runtime configuration comes from ``get_active_config()`` alone.
    Nothing else reads configuration files or the ``COMPLIANCE_*``
    environment variables.

Architecture position:
    Configuration -- sits above ``compliance_kernel``.  The kernel never
    imports from this package; the CLI passes the parsed settings down.

Failure modes:
    - ``ConfigurationError`` -- missing file, malformed YAML, or a
      required key absent.

Audit relevance:
    Every successful ``get_active_config()`` call logs a
    ``config_loaded`` entry with the config id, version and checksum.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from compliance_config.loader import load_config_file
from compliance_config.schema import DatabaseSettings, ModeDefinition, RunnerConfig
from compliance_kernel.logging_config import get_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "COMPLIANCE_CONFIG"
DATABASE_URL_ENV_VAR = "COMPLIANCE_DATABASE_URL"

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> RunnerConfig:
    """Load, validate and log the runner configuration.

    Resolution order for the file: ``path``, then ``$COMPLIANCE_CONFIG``,
    then the packaged ``sets/default.yaml``.  ``$COMPLIANCE_DATABASE_URL``,
    when set, replaces ``database.url``.

    Args:
        path: Explicit configuration file.
        env: Environment mapping; defaults to ``os.environ``.

    Raises:
        ConfigurationError: If the file cannot be loaded or is incomplete.
    """
    env = os.environ if env is None else env

    config_path = Path(path or env.get(CONFIG_ENV_VAR) or _DEFAULT_CONFIG_FILE)
    config = load_config_file(config_path)

    url_override = env.get(DATABASE_URL_ENV_VAR)
    if url_override:
        config = replace(config, database=replace(config.database, url=url_override))

    logger.info(
        "config_loaded",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(config_path),
            "database_url_overridden": bool(url_override),
            "mode_count": len(config.modes),
        },
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "DATABASE_URL_ENV_VAR",
    "DatabaseSettings",
    "ModeDefinition",
    "RunnerConfig",
    "get_active_config",
]
