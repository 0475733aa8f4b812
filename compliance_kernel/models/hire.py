"""
Module: compliance_kernel.models.hire
Responsibility: ORM persistence for imported, reviewed hire records.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - A hire is identified by (employer_id, ia_number, start_date); the
      importer skips rows that would duplicate that triple.
    - The hire-data view the run reads is every row that is active and
      has no excluded compliance rules (see ``hire_data_filter``).

Audit relevance:
    Rows are never edited by the runner.  ReportDetail rows copy the hire
    identity fields so the audit trail survives later hire corrections.
"""

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    and_,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.elements import ColumnElement

from compliance_kernel.db.base import Base


class ReviewedHire(Base):
    """One hire as exported from the hiring hall and marked reviewed."""

    __tablename__ = "reviewed_hires"

    __table_args__ = (
        Index("idx_reviewed_hire_identity", "employer_id", "ia_number", "start_date"),
        Index("idx_reviewed_hire_contractor", "contractor_id", "reviewed_date"),
    )

    employer_id: Mapped[str] = mapped_column(String(50), nullable=False)
    contractor_id: Mapped[int] = mapped_column(Integer, nullable=False)
    contractor_name: Mapped[str] = mapped_column(String(100), nullable=False)
    member_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Hiring-hall IA number of the member
    ia_number: Mapped[int] = mapped_column(Integer, nullable=False)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # "direct" or "dispatch"; anything else is counted as direct
    hire_type: Mapped[str] = mapped_column(String(20), nullable=False)

    is_reviewed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_excluded: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_inactive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Naive timestamp; its date part is the review date a run targets
    reviewed_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    excluded_compliance_rules: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    created_by_user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_by_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_on: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ReviewedHire {self.employer_id}/{self.ia_number} "
            f"{self.hire_type} {self.start_date}>"
        )


def hire_data_filter() -> ColumnElement[bool]:
    """Predicate selecting the rows that count toward compliance."""
    return and_(
        ReviewedHire.is_inactive.is_(False),
        ReviewedHire.excluded_compliance_rules.is_(None),
    )
