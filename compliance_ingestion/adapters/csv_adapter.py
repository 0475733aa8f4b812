"""
CSV reader for hiring-hall exports.

Options: ``delimiter`` (default ``,``) and ``encoding`` (default utf-8,
read as utf-8-sig so an Excel BOM does not end up in the first header).
Header cells are stripped, so `` Employer ID`` still matches.
"""

from __future__ import annotations

import csv
from contextlib import contextmanager
from itertools import islice
from pathlib import Path
from typing import Any, Iterator

from compliance_ingestion.adapters.base import SourceProbe

PROBE_SAMPLE_ROWS = 5


def _encoding(options: dict[str, Any]) -> str:
    encoding = options.get("encoding", "utf-8")
    return "utf-8-sig" if encoding.lower() in ("utf-8", "utf8") else encoding


def _clean(row: dict[str | None, Any]) -> dict[str, Any]:
    # Surplus cells on a short-header row land under the None key.
    return {key.strip(): value for key, value in row.items() if key is not None}


@contextmanager
def _open_reader(source_path: Path, options: dict[str, Any]) -> Iterator[csv.DictReader]:
    with source_path.open("r", encoding=_encoding(options), newline="") as handle:
        yield csv.DictReader(handle, delimiter=options.get("delimiter", ","))


class CsvSourceAdapter:
    """Streams CSV rows as dicts keyed by the stripped header text."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        with _open_reader(source_path, options) as reader:
            for row in reader:
                yield _clean(row)

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        with _open_reader(source_path, options) as reader:
            columns = tuple(name.strip() for name in reader.fieldnames or ())
            sample = tuple(_clean(row) for row in islice(reader, PROBE_SAMPLE_ROWS))
            remaining = sum(1 for _ in reader)

        return SourceProbe(
            row_count=len(sample) + remaining,
            columns=columns,
            sample_rows=sample,
            encoding=_encoding(options),
        )
