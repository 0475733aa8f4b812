"""
Module: compliance_kernel.models.run
Responsibility: ORM persistence for compliance runs.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - A Run row is inserted in the same transaction as its Reports and
      ReportDetails; a rolled-back or dry run leaves no Run row.
    - Only ``output`` may change after creation.

Failure modes:
    - IntegrityError if mode_id does not reference a Mode.
"""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from compliance_kernel.db.base import Base


class Run(Base):
    """
    One execution of the compliance algorithm for a mode and review date.

    Guarantees:
        - run_number is sequential within (mode_id, reviewed_date) when the
          caller lets RunService assign it.  Duplicates are not rejected:
          re-runs are new rows.
    """

    __tablename__ = "runs"

    __table_args__ = (
        Index("idx_run_reviewed", "reviewed_date", "id"),
        Index("idx_run_mode_reviewed", "mode_id", "reviewed_date"),
    )

    # Calendar date the run was executed (from the injected clock)
    report_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Review date whose hires this run replays
    reviewed_date: Mapped[date] = mapped_column(Date, nullable=False)

    mode_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("modes.id"),
        nullable=False,
    )

    run_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Free-text log attached after the fact
    output: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Run {self.id}: mode={self.mode_id} {self.reviewed_date} #{self.run_number}>"
