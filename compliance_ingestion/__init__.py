"""
compliance_ingestion -- import of hiring-hall hire exports.

Adapters read CSV/XLSX rows, converters coerce cell values, and
HireImportService writes them to ``reviewed_hires`` with duplicate skip.
"""

from compliance_ingestion.services.import_service import HireImportService

__all__ = ["HireImportService"]
