"""
Module: compliance_kernel.selectors.run_selector
Responsibility: Read-only run lookups: prior-run seed source, run listing,
    next run number.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - The previous run of a review date is the run with the latest earlier
      review date, ties broken by highest id.  Mode is ignored unless the
      caller asks for it.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select

from compliance_kernel.domain.types import RunInfo
from compliance_kernel.models.mode import Mode
from compliance_kernel.models.run import Run
from compliance_kernel.selectors.base import BaseSelector


def run_to_info(run: Run, mode_name: str | None = None) -> RunInfo:
    return RunInfo(
        id=run.id,
        report_date=run.report_date,
        reviewed_date=run.reviewed_date,
        mode_id=run.mode_id,
        mode_name=mode_name,
        run_number=run.run_number,
        output=run.output,
    )


class RunSelector(BaseSelector):
    """Run queries.  Returns RunInfo DTOs with the mode name joined in."""

    def _with_mode(self):
        return select(Run, Mode.mode_name).join(Mode, Run.mode_id == Mode.id)

    def get_run_by_id(self, run_id: int) -> RunInfo | None:
        row = self._execute(self._with_mode().where(Run.id == run_id)).first()
        return run_to_info(row[0], row[1]) if row is not None else None

    def get_previous_run(
        self,
        reviewed_date: date,
        mode_id: int | None = None,
    ) -> RunInfo | None:
        """
        Most recent run reviewed strictly before ``reviewed_date``.

        Args:
            reviewed_date: Review date of the run being executed.
            mode_id: Restrict to one mode.  Run execution passes None so a
                contractor's state carries across mode changes.
        """
        statement = self._with_mode().where(Run.reviewed_date < reviewed_date)
        if mode_id is not None:
            statement = statement.where(Run.mode_id == mode_id)
        statement = statement.order_by(Run.reviewed_date.desc(), Run.id.desc()).limit(1)

        row = self._execute(statement).first()
        return run_to_info(row[0], row[1]) if row is not None else None

    def get_all_runs(self, limit: int = 100) -> list[RunInfo]:
        rows = self._execute(
            self._with_mode().order_by(Run.id.desc()).limit(limit)
        ).all()
        return [run_to_info(run, mode_name) for run, mode_name in rows]

    def get_max_run_number(self, mode_id: int, reviewed_date: date) -> int:
        """Highest run number for the mode and review date, 0 if none."""
        value = self._execute(
            select(func.coalesce(func.max(Run.run_number), 0)).where(
                Run.mode_id == mode_id,
                Run.reviewed_date == reviewed_date,
            )
        ).scalar_one()
        return int(value)
