"""
Module: compliance_kernel.models.mode
Responsibility: ORM persistence for compliance modes (the direct-hire quota).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - mode_name is unique; mode_value is the number of direct hires a
      contractor may take before a dispatch hire is owed.

Failure modes:
    - IntegrityError on a duplicate mode_name.
"""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from compliance_kernel.db.base import Base


class Mode(Base):
    """
    Named quota policy ("2To1" allows two direct hires, "3To1" three).

    Guarantees:
        - Rows are seeded from configuration by ModeService.ensure_modes().
    """

    __tablename__ = "modes"

    __table_args__ = (UniqueConstraint("mode_name", name="uq_mode_name"),)

    mode_name: Mapped[str] = mapped_column(String(10), nullable=False)

    # Allowed direct hires before a dispatch is owed
    mode_value: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Mode {self.mode_name}: {self.mode_value}>"
