"""Source adapters for hire export files."""

from compliance_ingestion.adapters.base import SourceAdapter, SourceProbe
from compliance_ingestion.adapters.csv_adapter import CsvSourceAdapter
from compliance_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter

__all__ = ["CsvSourceAdapter", "SourceAdapter", "SourceProbe", "XlsxSourceAdapter"]
