"""
ReportService -- reviewer access to run output.

Responsibility:
    Read access to Reports, detail history and notes for review screens
    and export, and the one sanctioned write path on a committed run:
    a reviewer correcting a Report, optionally with a note.

Architecture position:
    Kernel > Services -- imperative shell.  Flushes within the caller's
    transaction (``session_scope()``); never commits.

Invariants enforced:
    - ReportDetail rows are never touched here.
    - A note is appended only when both the note text and the reviewer
      name are supplied.  Notes are timestamped from the injected clock.
    - Stored status text is canonical ("Compliant"/"Noncompliant").

Failure modes:
    - ReportNotFoundError: unknown report id.
    - InvalidReportUpdateError: status or direct count missing.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from compliance_kernel.domain.clock import Clock, SystemClock
from compliance_kernel.domain.compliance import (
    ComplianceEngine,
    ComplianceSummary,
)
from compliance_kernel.domain.types import (
    NoteInfo,
    ReportDetailInfo,
    ReportInfo,
    ReportSeed,
)
from compliance_kernel.exceptions import InvalidReportUpdateError, ReportNotFoundError
from compliance_kernel.logging_config import get_logger
from compliance_kernel.models.report import Report, ReportNote
from compliance_kernel.selectors.mode_selector import ModeSelector
from compliance_kernel.selectors.report_selector import ReportSelector
from compliance_kernel.selectors.run_selector import RunSelector
from compliance_kernel.services.base import BaseService

logger = get_logger("services.report_service")


class ReportService(BaseService):
    """Report reads plus reviewer edits."""

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        engine: ComplianceEngine | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._engine = engine or ComplianceEngine()
        self._selector = ReportSelector(session)

    # -- Reads ---------------------------------------------------------------

    def get_reports(
        self,
        filters: dict[str, Any] | None = None,
        limit: int = 1000,
    ) -> list[ReportInfo]:
        return self._selector.get_reports(filters, limit)

    def get_reports_by_run(self, run_id: int) -> list[ReportInfo]:
        return self._selector.get_reports_by_run(run_id)

    def get_report_by_id(self, report_id: int) -> ReportInfo:
        report = self._selector.get_report_by_id(report_id)
        if report is None:
            raise ReportNotFoundError(report_id)
        return report

    def get_details_by_run(self, run_id: int) -> list[ReportDetailInfo]:
        return self._selector.get_details_by_run(run_id)

    def get_last_hires(self, run_id: int, per_contractor: int = 4) -> list[ReportDetailInfo]:
        return self._selector.get_last_hires(run_id, per_contractor)

    def get_report_notes(self, report_id: int) -> list[NoteInfo]:
        return self._selector.get_notes_by_report(report_id)

    def get_employer_notes(self, employer_id: str) -> list[NoteInfo]:
        return self._selector.get_notes_by_employer(employer_id)

    def summarize_report(self, report_id: int) -> ComplianceSummary:
        """
        Recompute the display summary of a stored Report.

        The stored counts are re-seeded through the engine with the quota
        of the report's run mode, so ``next_hire_dispatch`` reflects the
        counts even after a reviewer edited them by hand.
        """
        report = self.get_report_by_id(report_id)
        run = RunSelector(self.session).get_run_by_id(report.run_id)
        mode = ModeSelector(self.session).get_mode_by_id(run.mode_id) if run else None
        allowed_direct = mode.allowed_direct if mode is not None else 2

        seed = ReportSeed(
            status=report.compliance_status,
            direct_count=report.direct_count,
            dispatch_needed=report.dispatch_needed,
        )
        state = self._engine.create_compliance_state(seed, allowed_direct)
        return self._engine.get_compliance_summary(state)

    # -- Writes --------------------------------------------------------------

    def update_report(
        self,
        report_id: int,
        status: str | None,
        direct_count: int | None,
        dispatch_needed: int | None = 0,
        next_hire_dispatch: str | None = "N",
        employer_id: str | None = None,
        note: str | None = None,
        changed_by: str | None = None,
    ) -> ReportInfo:
        """
        Apply a reviewer's correction to a Report.

        Args:
            report_id: Report to edit.
            status: New status text; anything starting with "non" is
                stored as "Noncompliant", everything else "Compliant".
            direct_count: New direct count.
            dispatch_needed: New dispatch debt.
            next_hire_dispatch: "Y" or "N".
            employer_id: Employer the note is filed under; defaults to the
                report's employer.
            note: Optional reviewer comment.
            changed_by: Reviewer name; required for the note to be kept.

        Returns:
            The refreshed ReportInfo.

        Raises:
            InvalidReportUpdateError: status or direct_count missing.
            ReportNotFoundError: unknown report.
        """
        if not status:
            raise InvalidReportUpdateError(report_id, "status is required")
        if direct_count is None:
            raise InvalidReportUpdateError(report_id, "direct count is required")

        report = self.session.execute(
            select(Report).where(Report.id == report_id)
        ).scalar_one_or_none()
        if report is None:
            raise ReportNotFoundError(report_id)

        report.compliance_status = self._engine.code_to_status(
            self._engine.status_to_code(status)
        )
        report.direct_count = int(direct_count)
        report.dispatch_needed = int(dispatch_needed or 0)
        report.next_hire_dispatch = next_hire_dispatch or "N"

        note_added = bool(note and changed_by)
        if note_added:
            self.session.add(
                ReportNote(
                    report_id=report.id,
                    employer_id=employer_id or report.employer_id,
                    note=note,
                    created_by=changed_by,
                    created_at=self._clock.now(),
                )
            )

        self.session.flush()

        logger.info(
            "report_updated",
            extra={
                "report_id": report_id,
                "compliance_status": report.compliance_status,
                "direct_count": report.direct_count,
                "dispatch_needed": report.dispatch_needed,
                "note_added": note_added,
                "changed_by": changed_by,
            },
        )
        return self.get_report_by_id(report_id)
