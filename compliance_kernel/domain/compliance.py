"""
Compliance -- the hiring-hall compliance state machine.

Responsibility:
    Seeds a contractor's ``ComplianceState`` from the prior run, folds one
    hire at a time into that state, and projects the state into a
    reporting summary.

Architecture position:
    Kernel > Domain -- pure functional core, ZERO I/O.  Called only by
    RunService (run execution) and ReportService (summary display).

Invariants enforced:
    - ``next_hire_dispatch`` is a pure function of ``dispatch_needed`` and
      ``direct_count``; it is recomputed after every mutation and any
      seeded value for it is ignored.
    - Counters never go below zero.
    - Unknown or empty hire types count as direct hires; nothing here
      raises over its documented input domain.

Transition rules (allowed_direct = 2 for "2To1", 3 for "3To1"):

    dispatch hire
        compliant, or noncompliant owing exactly one  -> C, 0 direct, 0 owed
        otherwise                                     -> both counters - 1

    direct hire (direct_count += 1)
        compliant and direct_count == allowed + 1     -> N, 1 owed
        direct_count > allowed + 1                    -> N, owed + 1
        otherwise                                     -> unchanged
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

COMPLIANT = "C"
NONCOMPLIANT = "N"

STATUS_COMPLIANT = "Compliant"
STATUS_NONCOMPLIANT = "Noncompliant"

DISPATCH = "dispatch"
DIRECT = "direct"


@dataclass
class ComplianceState:
    """Per-contractor working state threaded through one run's hire replay.

    Mutable: ``apply_hire`` updates and returns the same
    instance so a contractor's hires fold into one object.
    """

    compliance: str = COMPLIANT
    direct_count: int = 0
    dispatch_needed: int = 0
    next_hire_dispatch: str = "N"


@dataclass(frozen=True)
class ComplianceSummary:
    """Read-only projection of a ComplianceState for reporting."""

    status: str
    code: str
    direct_count: int
    dispatch_needed: int
    next_hire_dispatch: str


def status_to_code(status: str | None) -> str:
    """Map a status string to its code; anything not starting with "non" is C."""
    if str(status or "").lower().startswith("non"):
        return NONCOMPLIANT
    return COMPLIANT


def code_to_status(code: str | None) -> str:
    return STATUS_NONCOMPLIANT if code == NONCOMPLIANT else STATUS_COMPLIANT


def is_dispatch(hire_type: str | None) -> bool:
    return str(hire_type or "").strip().lower() == DISPATCH


def _seed_value(seed: Any, name: str) -> Any:
    if isinstance(seed, Mapping):
        return seed.get(name)
    return getattr(seed, name, None)


def _refresh_next_hire_dispatch(state: ComplianceState, allowed_direct: int) -> None:
    owes = state.dispatch_needed > 0 or state.direct_count >= allowed_direct
    state.next_hire_dispatch = "Y" if owes else "N"


def create_compliance_state(seed: Any, allowed_direct: int) -> ComplianceState:
    """Build the starting state for a contractor entering a run.

    Args:
        seed: The contractor's report from the prior run (a ``ReportSeed``
            or a mapping with ``status``, ``direct_count`` and
            ``dispatch_needed``), or None when there is no prior report.
        allowed_direct: Direct hires allowed before a dispatch is owed.
    """
    state = ComplianceState()
    if seed is not None:
        state.compliance = status_to_code(_seed_value(seed, "status"))
        direct = _seed_value(seed, "direct_count")
        owed = _seed_value(seed, "dispatch_needed")
        state.direct_count = int(direct) if direct is not None else 0
        state.dispatch_needed = int(owed) if owed is not None else 0
    _refresh_next_hire_dispatch(state, allowed_direct)
    return state


def apply_hire(
    state: ComplianceState,
    hire_type: str | None,
    allowed_direct: int,
) -> ComplianceState:
    """Fold one hire into ``state`` (mutated in place) and return it."""
    if is_dispatch(hire_type):
        if state.compliance == COMPLIANT or (
            state.compliance == NONCOMPLIANT and state.dispatch_needed == 1
        ):
            state.dispatch_needed = 0
            state.direct_count = 0
            state.compliance = COMPLIANT
        else:
            # Partial repayment; stays noncompliant until the last one owed.
            state.dispatch_needed = max(0, state.dispatch_needed - 1)
            state.direct_count = max(0, state.direct_count - 1)
    else:
        state.direct_count += 1
        tipping_point = allowed_direct + 1
        if state.compliance == COMPLIANT and state.direct_count == tipping_point:
            state.compliance = NONCOMPLIANT
            state.dispatch_needed = 1
        elif state.direct_count > tipping_point:
            state.compliance = NONCOMPLIANT
            state.dispatch_needed += 1

    _refresh_next_hire_dispatch(state, allowed_direct)
    return state


def get_compliance_summary(state: ComplianceState) -> ComplianceSummary:
    return ComplianceSummary(
        status=code_to_status(state.compliance),
        code=state.compliance,
        direct_count=state.direct_count,
        dispatch_needed=state.dispatch_needed,
        next_hire_dispatch=state.next_hire_dispatch,
    )


class ComplianceEngine:
    """Stateless facade over the module functions, injected into services."""

    def status_to_code(self, status: str | None) -> str:
        return status_to_code(status)

    def code_to_status(self, code: str | None) -> str:
        return code_to_status(code)

    def create_compliance_state(self, seed: Any, allowed_direct: int) -> ComplianceState:
        return create_compliance_state(seed, allowed_direct)

    def apply_hire(
        self,
        state: ComplianceState,
        hire_type: str | None,
        allowed_direct: int,
    ) -> ComplianceState:
        return apply_hire(state, hire_type, allowed_direct)

    def get_compliance_summary(self, state: ComplianceState) -> ComplianceSummary:
        return get_compliance_summary(state)
