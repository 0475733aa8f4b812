"""ORM models for the compliance runner."""

from compliance_kernel.models.hire import ReviewedHire, hire_data_filter
from compliance_kernel.models.mode import Mode
from compliance_kernel.models.report import Report, ReportDetail, ReportNote
from compliance_kernel.models.run import Run

__all__ = [
    "Mode",
    "Report",
    "ReportDetail",
    "ReportNote",
    "ReviewedHire",
    "Run",
    "hire_data_filter",
]
