"""
compliance_kernel.domain -- Pure types and the compliance state machine.

ZERO I/O.
"""

from compliance_kernel.domain.compliance import (
    ComplianceEngine,
    ComplianceState,
    ComplianceSummary,
    apply_hire,
    code_to_status,
    create_compliance_state,
    get_compliance_summary,
    status_to_code,
)
from compliance_kernel.domain.types import (
    ContractorKey,
    HireEvent,
    HireImportResult,
    ModeInfo,
    NoteInfo,
    ReportDetailInfo,
    ReportInfo,
    ReportSeed,
    RunInfo,
    RunResult,
)

__all__ = [
    "ComplianceEngine",
    "ComplianceState",
    "ComplianceSummary",
    "ContractorKey",
    "HireEvent",
    "HireImportResult",
    "ModeInfo",
    "NoteInfo",
    "ReportDetailInfo",
    "ReportInfo",
    "ReportSeed",
    "RunInfo",
    "RunResult",
    "apply_hire",
    "code_to_status",
    "create_compliance_state",
    "get_compliance_summary",
    "status_to_code",
]
