"""
compliance_kernel.domain.types -- Pure frozen dataclasses for the run pipeline.

ZERO I/O.  Selectors and services return these DTOs instead of ORM rows so
callers never hold a live session object.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class ContractorKey:
    """One (employer, contractor) pair in a run's contractor universe."""

    employer_id: str
    contractor_id: int
    contractor_name: str | None


@dataclass(frozen=True)
class HireEvent:
    """One reviewed hire for a contractor on a review date.  Never mutated."""

    employer_id: str
    contractor_id: int
    contractor_name: str | None
    member_name: str | None
    ia_number: int
    start_date: date
    hire_type: str | None
    reviewed_date: datetime | None


@dataclass(frozen=True)
class ReportSeed:
    """A contractor's summary from the prior run, used to seed its state."""

    status: str | None
    direct_count: int | None
    dispatch_needed: int | None
    next_hire_dispatch: str | None = None


@dataclass(frozen=True)
class RunResult:
    """Structured outcome of a run execution (never raised as an error)."""

    success: bool
    run_id: int | None
    message: str


@dataclass(frozen=True)
class ModeInfo:
    id: int
    mode_name: str
    allowed_direct: int


@dataclass(frozen=True)
class RunInfo:
    id: int
    report_date: date | None
    reviewed_date: date
    mode_id: int
    mode_name: str | None
    run_number: int
    output: str | None = None


@dataclass(frozen=True)
class ReportInfo:
    """Per-contractor summary row of a run, with the employer's note count."""

    id: int
    run_id: int
    employer_id: str
    contractor_id: int
    contractor_name: str | None
    compliance_status: str
    direct_count: int
    dispatch_needed: int
    next_hire_dispatch: str
    note_count: int = 0


@dataclass(frozen=True)
class ReportDetailInfo:
    """One audit row: a processed hire and the state after applying it."""

    run_id: int
    employer_id: str
    contractor_id: int
    contractor_name: str | None
    member_name: str | None
    ia_number: str
    start_date: date | None
    hire_type: str | None
    compliance_status: str
    direct_count: int
    dispatch_needed: int
    next_hire_dispatch: str
    reviewed_date: datetime | None
    mode_name: str | None = None
    rank: int | None = None  # 1 = most recent, set by last-hires queries


@dataclass(frozen=True)
class NoteInfo:
    id: int
    report_id: int
    employer_id: str | None
    note: str
    created_by: str
    created_at: datetime
    reviewed_date: date | None = None


@dataclass(frozen=True)
class HireImportResult:
    """Counts and per-row messages from a hire import."""

    success_count: int = 0
    skipped_count: int = 0
    fail_count: int = 0
    errors: tuple[str, ...] = ()
