"""
XLSX source adapter for hiring-hall exports saved from Excel.

Reads one sheet (``sheet`` option: 0-based index or name, default first)
with the header in the first row.  Cell values are passed through as
openpyxl returns them (datetimes stay datetimes); blank cells become None.
Fully blank rows are skipped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

from openpyxl import load_workbook

from compliance_ingestion.adapters.base import SourceProbe

_SAMPLE_SIZE = 5


def _header(values: tuple[Any, ...]) -> list[str]:
    return [str(v).strip() if v is not None else "" for v in values]


def _cell(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class XlsxSourceAdapter:
    """Read an Excel sheet as one dict per row."""

    def _rows(self, source_path: Path, options: dict[str, Any]) -> Iterator[tuple[Any, ...]]:
        workbook = load_workbook(source_path, read_only=True, data_only=True)
        try:
            sheet_ref = options.get("sheet", 0)
            if isinstance(sheet_ref, int):
                sheet = workbook.worksheets[sheet_ref]
            else:
                sheet = workbook[sheet_ref]
            yield from sheet.iter_rows(values_only=True)
        finally:
            workbook.close()

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        rows = self._rows(source_path, options)
        first = next(rows, None)
        if first is None:
            return
        columns = _header(first)
        for values in rows:
            if all(v is None or (isinstance(v, str) and not v.strip()) for v in values):
                continue
            yield {
                column: _cell(value)
                for column, value in zip(columns, values)
                if column
            }

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        rows = self._rows(source_path, options)
        first = next(rows, None)
        rows.close()
        if first is None:
            return SourceProbe(row_count=0, columns=(), sample_rows=())
        columns = [c for c in _header(first) if c]
        sample: list[dict[str, Any]] = []
        count = 0
        for record in self.read(source_path, options):
            count += 1
            if len(sample) < _SAMPLE_SIZE:
                sample.append(record)
        return SourceProbe(row_count=count, columns=tuple(columns), sample_rows=tuple(sample))
