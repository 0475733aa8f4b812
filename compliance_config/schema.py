"""
Configuration schema (``compliance_config.schema``).

Frozen dataclasses that a parsed YAML configuration file is loaded into.
Nothing here performs I/O; ``compliance_config.loader`` builds these.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection settings passed to ``init_engine_from_url``."""

    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


@dataclass(frozen=True)
class ModeDefinition:
    """A mode seeded into the database on first use."""

    name: str
    allowed_direct: int


@dataclass(frozen=True)
class RunnerConfig:
    """The complete runner configuration."""

    config_id: str
    version: int
    database: DatabaseSettings
    modes: tuple[ModeDefinition, ...]
    log_level: str = "INFO"
    source_path: str | None = None
    checksum: str = field(default="", compare=False)

    def mode(self, name: str) -> ModeDefinition | None:
        for definition in self.modes:
            if definition.name == name:
                return definition
        return None
