"""
Module: compliance_kernel.models.report
Responsibility: ORM persistence for run output -- per-contractor Reports,
    the per-hire ReportDetail audit trail, and reviewer ReportNotes.
Architecture position: Kernel > Models.  May import from db/base.py and
    sibling models only.

Invariants enforced:
    - ReportDetail is append-only: one row per processed hire, holding the
      compliance state immediately after that hire was applied.
    - Report holds the final state per (run, employer, contractor) and is
      only edited through ReportService.update_report().
    - ReportNote rows are never edited or deleted.

Audit relevance:
    ReportDetail is the ledger a reviewer replays to explain a Report.
    Every reviewer edit that carries a comment leaves a ReportNote with its
    author and clock timestamp.
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from compliance_kernel.db.base import Base, TrackedBase


class Report(TrackedBase):
    """Final compliance state of one contractor at the end of a run."""

    __tablename__ = "reports"

    __table_args__ = (
        Index("idx_report_run_contractor", "run_id", "contractor_id", "employer_id"),
        Index("idx_report_employer", "employer_id"),
    )

    run_id: Mapped[int] = mapped_column(Integer, ForeignKey("runs.id"), nullable=False)
    employer_id: Mapped[str] = mapped_column(String(100), nullable=False)
    contractor_id: Mapped[int] = mapped_column(Integer, nullable=False)
    contractor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # "Compliant" or "Noncompliant"
    compliance_status: Mapped[str] = mapped_column(String(50), nullable=False)

    direct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dispatch_needed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_hire_dispatch: Mapped[str] = mapped_column(String(1), nullable=False, default="N")

    def __repr__(self) -> str:
        return (
            f"<Report run={self.run_id} {self.employer_id}/{self.contractor_id} "
            f"{self.compliance_status}>"
        )


class ReportDetail(Base):
    """State snapshot after one hire was applied during a run."""

    __tablename__ = "report_details"

    __table_args__ = (
        Index("idx_report_detail_run", "run_id"),
        Index("idx_report_detail_contractor", "employer_id", "contractor_id"),
    )

    run_id: Mapped[int] = mapped_column(Integer, ForeignKey("runs.id"), nullable=False)
    employer_id: Mapped[str] = mapped_column(String(100), nullable=False)
    contractor_id: Mapped[int] = mapped_column(Integer, nullable=False)
    contractor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    member_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Stored as text so leading zeros from other sources survive
    ia_number: Mapped[str] = mapped_column(String(100), nullable=False)

    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    hire_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    compliance_status: Mapped[str] = mapped_column(String(50), nullable=False)
    direct_count: Mapped[int] = mapped_column(Integer, nullable=False)
    dispatch_needed: Mapped[int] = mapped_column(Integer, nullable=False)
    next_hire_dispatch: Mapped[str] = mapped_column(String(1), nullable=False)

    reviewed_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ReportDetail run={self.run_id} {self.contractor_id} "
            f"IA {self.ia_number} {self.compliance_status}>"
        )


class ReportNote(Base):
    """Free-text reviewer comment on a report, scoped to its employer."""

    __tablename__ = "report_notes"

    __table_args__ = (
        Index("idx_report_note_report", "report_id"),
        Index("idx_report_note_employer", "employer_id"),
    )

    report_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reports.id"),
        nullable=False,
    )
    employer_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)

    # Set from the injected clock, not the database
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<ReportNote report={self.report_id} by {self.created_by}>"
