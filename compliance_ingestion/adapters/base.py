"""
Hire export adapters: the reading contract and the header probe.

An adapter turns one export file into dicts keyed by header text.
HireImportService probes the file first and refuses it when required
columns are absent, so a half-matching export never writes a row.

File I/O only; no database or kernel imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):
    """Reads a hire export, one dict per data row."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        ...

    def probe(self, source_path: Path, options: dict[str, Any]) -> "SourceProbe":
        ...


@dataclass(frozen=True)
class SourceProbe:
    """Header and row count of an export, plus the first few rows."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]
    encoding: str | None = None

    def missing_columns(self, required: Iterable[str]) -> list[str]:
        """Required headers not present, in the order given."""
        present = set(self.columns)
        return [column for column in required if column not in present]
