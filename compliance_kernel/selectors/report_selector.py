"""
Module: compliance_kernel.selectors.report_selector
Responsibility: Read-only queries over run output: Reports, the ReportDetail
    audit trail, and ReportNotes.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Note counts and note listings are scoped to the employer, not the
      report, so a note follows the employer across runs.
    - Detail history for a run covers, for every review date whose latest
      run id is at most ``run_id``, the details of that latest run.  A
      review date re-run after ``run_id`` drops out of the history.

Failure modes:
    - None beyond database errors; missing rows return None or [].
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import and_, func, select

from compliance_kernel.domain.types import (
    NoteInfo,
    ReportDetailInfo,
    ReportInfo,
    ReportSeed,
)
from compliance_kernel.models.mode import Mode
from compliance_kernel.models.report import Report, ReportDetail, ReportNote
from compliance_kernel.models.run import Run
from compliance_kernel.selectors.base import BaseSelector


def report_to_info(report: Report, note_count: int = 0) -> ReportInfo:
    return ReportInfo(
        id=report.id,
        run_id=report.run_id,
        employer_id=report.employer_id,
        contractor_id=report.contractor_id,
        contractor_name=report.contractor_name,
        compliance_status=report.compliance_status,
        direct_count=report.direct_count,
        dispatch_needed=report.dispatch_needed,
        next_hire_dispatch=report.next_hire_dispatch,
        note_count=note_count,
    )


def detail_to_info(
    detail: ReportDetail,
    mode_name: str | None = None,
    rank: int | None = None,
) -> ReportDetailInfo:
    return ReportDetailInfo(
        run_id=detail.run_id,
        employer_id=detail.employer_id,
        contractor_id=detail.contractor_id,
        contractor_name=detail.contractor_name,
        member_name=detail.member_name,
        ia_number=detail.ia_number,
        start_date=detail.start_date,
        hire_type=detail.hire_type,
        compliance_status=detail.compliance_status,
        direct_count=detail.direct_count,
        dispatch_needed=detail.dispatch_needed,
        next_hire_dispatch=detail.next_hire_dispatch,
        reviewed_date=detail.reviewed_date,
        mode_name=mode_name,
        rank=rank,
    )


class ReportSelector(BaseSelector):
    """Report, detail and note queries for review screens and export."""

    # -- Reports -------------------------------------------------------------

    def _note_counts(self, employer_ids: set[str]) -> dict[str, int]:
        if not employer_ids:
            return {}
        rows = self._execute(
            select(ReportNote.employer_id, func.count(ReportNote.id))
            .where(ReportNote.employer_id.in_(employer_ids))
            .group_by(ReportNote.employer_id)
        ).all()
        return {employer_id: int(count) for employer_id, count in rows}

    def _with_note_counts(self, reports: list[Report]) -> list[ReportInfo]:
        counts = self._note_counts({r.employer_id for r in reports})
        return [report_to_info(r, counts.get(r.employer_id, 0)) for r in reports]

    def get_reports(
        self,
        filters: dict[str, Any] | None = None,
        limit: int = 1000,
    ) -> list[ReportInfo]:
        """
        Reports newest first.

        Args:
            filters: Optional ``run_id``, ``contractor_id``, ``employer_id``.
            limit: Maximum rows returned.
        """
        filters = filters or {}
        statement = select(Report)
        if filters.get("run_id"):
            statement = statement.where(Report.run_id == filters["run_id"])
        if filters.get("contractor_id"):
            statement = statement.where(Report.contractor_id == filters["contractor_id"])
        if filters.get("employer_id"):
            statement = statement.where(Report.employer_id == filters["employer_id"])
        statement = statement.order_by(Report.id.desc()).limit(limit)

        return self._with_note_counts(list(self._execute(statement).scalars().all()))

    def get_reports_by_run(self, run_id: int) -> list[ReportInfo]:
        reports = self._execute(
            select(Report)
            .where(Report.run_id == run_id)
            .order_by(Report.contractor_name, Report.id)
        ).scalars().all()
        return self._with_note_counts(list(reports))

    def get_report_by_id(self, report_id: int) -> ReportInfo | None:
        report = self._execute(
            select(Report).where(Report.id == report_id)
        ).scalar_one_or_none()
        if report is None:
            return None
        return self._with_note_counts([report])[0]

    def get_seed(
        self,
        run_id: int,
        contractor_id: int,
        employer_id: str,
    ) -> ReportSeed | None:
        """The contractor's Report in ``run_id`` as a seed, or None."""
        report = self._execute(
            select(Report)
            .where(
                Report.run_id == run_id,
                Report.contractor_id == contractor_id,
                Report.employer_id == employer_id,
            )
            .order_by(Report.id)
            .limit(1)
        ).scalar_one_or_none()
        if report is None:
            return None
        return ReportSeed(
            status=report.compliance_status,
            direct_count=report.direct_count,
            dispatch_needed=report.dispatch_needed,
            next_hire_dispatch=report.next_hire_dispatch,
        )

    # -- Details -------------------------------------------------------------

    def _history_run_ids(self, run_id: int):
        return (
            select(func.max(Run.id))
            .group_by(Run.reviewed_date)
            .having(func.max(Run.id) <= run_id)
        )

    def get_details_by_run(self, run_id: int) -> list[ReportDetailInfo]:
        """Detail history up to ``run_id``, one latest run per review date."""
        rows = self._execute(
            select(ReportDetail, Mode.mode_name)
            .join(Run, ReportDetail.run_id == Run.id)
            .join(Mode, Run.mode_id == Mode.id)
            .where(ReportDetail.run_id.in_(self._history_run_ids(run_id)))
            .order_by(
                ReportDetail.contractor_name,
                ReportDetail.reviewed_date,
                ReportDetail.start_date,
                ReportDetail.ia_number,
            )
        ).all()
        return [detail_to_info(detail, mode_name) for detail, mode_name in rows]

    def get_report_details(
        self,
        filters: dict[str, Any] | None = None,
        limit: int = 1000,
    ) -> list[ReportDetailInfo]:
        """
        Detail rows newest first.

        Args:
            filters: Optional ``run_id``, ``contractor_id``, ``employer_id``,
                and ``contractor_name`` (substring match).
            limit: Maximum rows returned.
        """
        filters = filters or {}
        statement = select(ReportDetail)
        if filters.get("run_id"):
            statement = statement.where(ReportDetail.run_id == filters["run_id"])
        if filters.get("contractor_id"):
            statement = statement.where(
                ReportDetail.contractor_id == filters["contractor_id"]
            )
        if filters.get("contractor_name"):
            statement = statement.where(
                ReportDetail.contractor_name.like(f"%{filters['contractor_name']}%")
            )
        if filters.get("employer_id"):
            statement = statement.where(ReportDetail.employer_id == filters["employer_id"])
        statement = statement.order_by(ReportDetail.id.desc()).limit(limit)

        return [detail_to_info(d) for d in self._execute(statement).scalars().all()]

    def get_last_hires(self, run_id: int, per_contractor: int = 4) -> list[ReportDetailInfo]:
        """
        The most recent ``per_contractor`` hires of every contractor reported
        in ``run_id``, drawn from the run's detail history.

        ``rank`` is 1 for the most recent hire.  Output is ordered by
        contractor name, then oldest hire first.
        """
        contractors = (
            select(Report.employer_id, Report.contractor_id)
            .where(Report.run_id == run_id)
            .distinct()
            .subquery()
        )
        rank = (
            func.row_number()
            .over(
                partition_by=(ReportDetail.employer_id, ReportDetail.contractor_id),
                order_by=(
                    ReportDetail.reviewed_date.desc(),
                    ReportDetail.start_date.desc(),
                    ReportDetail.ia_number.desc(),
                ),
            )
            .label("rank")
        )
        ranked = (
            select(ReportDetail.id.label("detail_id"), rank)
            .join(
                contractors,
                and_(
                    contractors.c.employer_id == ReportDetail.employer_id,
                    contractors.c.contractor_id == ReportDetail.contractor_id,
                ),
            )
            .where(ReportDetail.run_id.in_(self._history_run_ids(run_id)))
            .subquery()
        )
        rows = self._execute(
            select(ReportDetail, ranked.c.rank)
            .join(ranked, ranked.c.detail_id == ReportDetail.id)
            .where(ranked.c.rank <= per_contractor)
            .order_by(
                ReportDetail.contractor_name,
                ReportDetail.reviewed_date,
                ReportDetail.start_date,
            )
        ).all()
        return [detail_to_info(detail, rank=int(r)) for detail, r in rows]

    # -- Notes ---------------------------------------------------------------

    def _notes(self, condition) -> list[NoteInfo]:
        rows = self._execute(
            select(ReportNote, Run.reviewed_date)
            .join(Report, ReportNote.report_id == Report.id)
            .join(Run, Report.run_id == Run.id)
            .where(condition)
            .order_by(ReportNote.created_at, ReportNote.id)
        ).all()
        return [
            NoteInfo(
                id=note.id,
                report_id=note.report_id,
                employer_id=note.employer_id,
                note=note.note,
                created_by=note.created_by,
                created_at=note.created_at,
                reviewed_date=reviewed_date,
            )
            for note, reviewed_date in rows
        ]

    def get_notes_by_report(self, report_id: int) -> list[NoteInfo]:
        return self._notes(ReportNote.report_id == report_id)

    def get_notes_by_employer(self, employer_id: str) -> list[NoteInfo]:
        return self._notes(ReportNote.employer_id == employer_id)
