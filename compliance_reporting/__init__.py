"""compliance_reporting -- Excel export of committed runs."""

from compliance_reporting.workbook import add_sheet_from_rows, export_run_workbook

__all__ = ["add_sheet_from_rows", "export_run_workbook"]
