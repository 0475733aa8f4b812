"""
Run workbook export.

Writes one run to an .xlsx file with four sheets:

    Detail       detail history up to the run (latest run per review date)
    Report       the run's per-contractor reports
    Last 4       the four most recent hires of every reported contractor
    Recent Hire  every hire reviewed on the run's review date

Each sheet has a bold, frozen header row and column widths fitted to the
longest value, clamped to [12, 60] characters.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from sqlalchemy.orm import Session

from compliance_kernel.exceptions import RunNotFoundError
from compliance_kernel.logging_config import get_logger
from compliance_kernel.selectors.hire_selector import HireSelector
from compliance_kernel.selectors.report_selector import ReportSelector
from compliance_kernel.selectors.run_selector import RunSelector

logger = get_logger("reporting.workbook")

MIN_COLUMN_WIDTH = 12
MAX_COLUMN_WIDTH = 60

DETAIL_COLUMNS = (
    "EmployerId", "ContractorId", "ContractorName", "MemberName", "IANumber",
    "StartDate", "HireType", "ComplianceStatus", "DirectCount", "DispatchNeeded",
    "NextHireDispatch", "ReviewedDate", "Mode",
)
REPORT_COLUMNS = (
    "ReportDate", "ReviewedDate", "Mode", "RunNumber", "EmployerId", "ContractorId",
    "ContractorName", "ComplianceStatus", "DirectCount", "DispatchNeeded",
    "NextHireDispatch", "Notes",
)
LAST_HIRES_COLUMNS = (
    "EmployerId", "ContractorId", "ContractorName", "MemberName", "IANumber",
    "StartDate", "HireType", "ComplianceStatus", "DirectCount", "DispatchNeeded",
    "NextHireDispatch", "ReviewedDate", "Order #",
)
RECENT_HIRE_COLUMNS = (
    "EmployerId", "ContractorId", "ContractorName", "MemberName", "IANumber",
    "StartDate", "HireType", "ReviewedDate",
)


def _width(value: Any) -> int:
    return len("" if value is None else str(value))


def add_sheet_from_rows(
    workbook: Workbook,
    name: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> Worksheet:
    """Append a sheet with a bold frozen header and fitted column widths."""
    sheet = workbook.create_sheet(title=name)
    sheet.append(list(columns))
    for row in rows:
        sheet.append(list(row))

    bold = Font(bold=True)
    for cell in sheet[1]:
        cell.font = bold
    sheet.freeze_panes = "A2"

    for index, column in enumerate(columns):
        longest = max([_width(column)] + [_width(row[index]) for row in rows])
        width = min(MAX_COLUMN_WIDTH, max(MIN_COLUMN_WIDTH, longest + 2))
        sheet.column_dimensions[get_column_letter(index + 1)].width = width

    return sheet


def export_run_workbook(session: Session, run_id: int, out_path: str | Path) -> Path:
    """
    Write the workbook for ``run_id`` to ``out_path``.

    Raises:
        RunNotFoundError: unknown run.
    """
    run = RunSelector(session).get_run_by_id(run_id)
    if run is None:
        raise RunNotFoundError(run_id)

    reports = ReportSelector(session)
    details = reports.get_details_by_run(run_id)
    run_reports = reports.get_reports_by_run(run_id)
    last_hires = reports.get_last_hires(run_id)
    recent = HireSelector(session).get_recent_hires(run_id)

    workbook = Workbook()
    workbook.remove(workbook.active)

    add_sheet_from_rows(
        workbook,
        "Detail",
        DETAIL_COLUMNS,
        [
            (
                d.employer_id, d.contractor_id, d.contractor_name, d.member_name,
                d.ia_number, d.start_date, d.hire_type, d.compliance_status,
                d.direct_count, d.dispatch_needed, d.next_hire_dispatch,
                d.reviewed_date, d.mode_name,
            )
            for d in details
        ],
    )
    add_sheet_from_rows(
        workbook,
        "Report",
        REPORT_COLUMNS,
        [
            (
                run.report_date, run.reviewed_date, run.mode_name, run.run_number,
                r.employer_id, r.contractor_id, r.contractor_name, r.compliance_status,
                r.direct_count, r.dispatch_needed, r.next_hire_dispatch, r.note_count,
            )
            for r in run_reports
        ],
    )
    add_sheet_from_rows(
        workbook,
        "Last 4",
        LAST_HIRES_COLUMNS,
        [
            (
                d.employer_id, d.contractor_id, d.contractor_name, d.member_name,
                d.ia_number, d.start_date, d.hire_type, d.compliance_status,
                d.direct_count, d.dispatch_needed, d.next_hire_dispatch,
                d.reviewed_date, d.rank,
            )
            for d in last_hires
        ],
    )
    add_sheet_from_rows(
        workbook,
        "Recent Hire",
        RECENT_HIRE_COLUMNS,
        [
            (
                h.employer_id, h.contractor_id, h.contractor_name, h.member_name,
                h.ia_number, h.start_date, h.hire_type, h.reviewed_date,
            )
            for h in recent
        ],
    )

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(out_path)

    logger.info(
        "workbook_exported",
        extra={
            "run_id": run_id,
            "path": str(out_path),
            "detail_rows": len(details),
            "report_rows": len(run_reports),
            "last_hire_rows": len(last_hires),
            "recent_hire_rows": len(recent),
        },
    )
    return out_path
