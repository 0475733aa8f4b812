"""Kernel services: mode resolution, run execution, report review."""

from compliance_kernel.services.base import BaseService
from compliance_kernel.services.mode_service import ModeService, normalize_mode_name
from compliance_kernel.services.report_service import ReportService
from compliance_kernel.services.run_service import DRY_RUN_MESSAGE, RunService

__all__ = [
    "BaseService",
    "DRY_RUN_MESSAGE",
    "ModeService",
    "ReportService",
    "RunService",
    "normalize_mode_name",
]
