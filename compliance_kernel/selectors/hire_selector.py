"""
Module: compliance_kernel.selectors.hire_selector
Responsibility: Read-only queries over the hire-data view (active reviewed
    hires with no excluded compliance rules) feeding run execution and
    reporting.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Only rows passing ``hire_data_filter()`` are visible.
    - ``get_hires_for_contractor`` returns hires in fold order: start date,
      then reviewed timestamp, then IA number, ascending.  Changing this
      order changes every intermediate ReportDetail snapshot.
    - The contractor universe is returned in a deterministic order
      (contractor name, contractor id, employer id) so dry runs are
      reproducible.

Failure modes:
    - None beyond database errors; empty inputs return empty lists.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from sqlalchemy import select

from compliance_kernel.domain.types import ContractorKey, HireEvent
from compliance_kernel.models.hire import ReviewedHire, hire_data_filter
from compliance_kernel.models.report import Report
from compliance_kernel.models.run import Run
from compliance_kernel.selectors.base import BaseSelector


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) timestamp range covering ``day``."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def hire_to_event(hire: ReviewedHire) -> HireEvent:
    return HireEvent(
        employer_id=hire.employer_id,
        contractor_id=hire.contractor_id,
        contractor_name=hire.contractor_name,
        member_name=hire.member_name,
        ia_number=hire.ia_number,
        start_date=hire.start_date,
        hire_type=hire.hire_type,
        reviewed_date=hire.reviewed_date,
    )


def universe_sort_key(key: ContractorKey) -> tuple[str, int, str]:
    return (key.contractor_name or "", key.contractor_id, key.employer_id)


class HireSelector(BaseSelector):
    """Hire-data queries for run execution and the Recent Hire sheet."""

    def get_contractor_universe(
        self,
        reviewed_date: date,
        previous_run_id: int | None = None,
    ) -> list[ContractorKey]:
        """
        Every (employer, contractor) pair that a run must report on.

        The union of contractors with a hire reviewed on or after
        ``reviewed_date`` and contractors reported in ``previous_run_id``.
        Prior-run contractors carry forward regardless of how long ago
        they last hired.  Each pair appears once: the name comes from the
        most recent hire row, falling back to the prior run's report when
        the contractor has no new hires.
        """
        start, _ = day_bounds(reviewed_date)
        names: dict[tuple[str, int], str | None] = {}

        if previous_run_id is not None:
            reported = select(
                Report.employer_id,
                Report.contractor_id,
                Report.contractor_name,
            ).where(Report.run_id == previous_run_id)
            for employer_id, contractor_id, name in self._execute(reported).all():
                names[(employer_id, contractor_id)] = name

        hired = (
            select(
                ReviewedHire.employer_id,
                ReviewedHire.contractor_id,
                ReviewedHire.contractor_name,
            )
            .where(hire_data_filter(), ReviewedHire.reviewed_date >= start)
            .order_by(ReviewedHire.id)
        )
        # Later hire rows overwrite earlier ones and any prior report name.
        for employer_id, contractor_id, name in self._execute(hired).all():
            names[(employer_id, contractor_id)] = name

        keys = [
            ContractorKey(
                employer_id=employer_id,
                contractor_id=contractor_id,
                contractor_name=name,
            )
            for (employer_id, contractor_id), name in names.items()
        ]
        return sorted(keys, key=universe_sort_key)

    def get_hires_for_contractor(
        self,
        contractor_id: int,
        reviewed_date: date,
    ) -> list[HireEvent]:
        """Hires of ``contractor_id`` reviewed on ``reviewed_date``, in fold order."""
        start, end = day_bounds(reviewed_date)
        hires = self._execute(
            select(ReviewedHire)
            .where(
                hire_data_filter(),
                ReviewedHire.contractor_id == contractor_id,
                ReviewedHire.reviewed_date >= start,
                ReviewedHire.reviewed_date < end,
            )
            .order_by(
                ReviewedHire.start_date,
                ReviewedHire.reviewed_date,
                ReviewedHire.ia_number,
            )
        ).scalars().all()
        return [hire_to_event(h) for h in hires]

    def get_recent_hires(self, run_id: int) -> list[HireEvent]:
        """All hires reviewed on the review date of ``run_id``."""
        reviewed_date = self._execute(
            select(Run.reviewed_date).where(Run.id == run_id)
        ).scalar_one_or_none()
        if reviewed_date is None:
            return []

        start, end = day_bounds(reviewed_date)
        hires = self._execute(
            select(ReviewedHire)
            .where(
                hire_data_filter(),
                ReviewedHire.reviewed_date >= start,
                ReviewedHire.reviewed_date < end,
            )
            .order_by(
                ReviewedHire.contractor_name,
                ReviewedHire.start_date,
                ReviewedHire.ia_number,
            )
        ).scalars().all()
        return [hire_to_event(h) for h in hires]

    def get_hire_data(
        self,
        reviewed_date: date | None = None,
        limit: int = 2000,
    ) -> list[HireEvent]:
        """Hire-data rows, newest review first, optionally for one review date."""
        statement = select(ReviewedHire).where(hire_data_filter())
        if reviewed_date is not None:
            start, end = day_bounds(reviewed_date)
            statement = statement.where(
                ReviewedHire.reviewed_date >= start,
                ReviewedHire.reviewed_date < end,
            )
        statement = statement.order_by(
            ReviewedHire.reviewed_date.desc(),
            ReviewedHire.id.desc(),
        ).limit(limit)
        return [hire_to_event(h) for h in self._execute(statement).scalars().all()]

    def hire_exists(self, employer_id: str, ia_number: int, start_date: date) -> bool:
        """True if a raw hire row already has this identity (any status)."""
        found = self._execute(
            select(ReviewedHire.id)
            .where(
                ReviewedHire.employer_id == employer_id,
                ReviewedHire.ia_number == ia_number,
                ReviewedHire.start_date == start_date,
            )
            .limit(1)
        ).first()
        return found is not None
