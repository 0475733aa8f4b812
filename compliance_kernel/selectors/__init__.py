"""Read-only selectors returning domain DTOs."""

from compliance_kernel.selectors.base import BaseSelector
from compliance_kernel.selectors.hire_selector import HireSelector
from compliance_kernel.selectors.mode_selector import ModeSelector
from compliance_kernel.selectors.report_selector import ReportSelector
from compliance_kernel.selectors.run_selector import RunSelector

__all__ = [
    "BaseSelector",
    "HireSelector",
    "ModeSelector",
    "ReportSelector",
    "RunSelector",
]
