"""
RunService -- executes a compliance run inside one transaction.

Responsibility:
    Validates run parameters, then for one (mode, review date) discovers
    the contractor universe, seeds each contractor from the previous run,
    folds the day's hires through the ComplianceEngine, and writes one
    ReportDetail per hire plus one Report per contractor.  A dry run does
    all of the work and then rolls it back.

Architecture position:
    Kernel > Services -- imperative shell, transaction owner.
    Unlike BaseService subclasses, RunService opens its own session from
    the injected factory and commits or rolls back itself, the way the
    CLI expects a single call to either persist a whole run or nothing.

Invariants enforced:
    - Atomicity: the Run row, every ReportDetail and every Report commit
      together or not at all.  A dry run leaves no Run row.
    - Fold order: hires are applied in start date, reviewed timestamp,
      IA number order; the ReportDetail for each hire records the state
      immediately after it.
    - Carry-forward: every contractor reported in the previous run gets a
      Report in this run, even with no new hires.
    - Re-runs are new runs.  Nothing is deduplicated.

Failure modes:
    - MissingRunParameterError / ModeNotFoundError: raised by create_run
      before any transaction opens.
    - Anything raised inside the transaction: rolled back and returned as
      ``RunResult(success=False, ...)``; never raised.
    - RunNotFoundError: get_run_by_id on an unknown id.

Audit relevance:
    Each processed contractor is logged with its final state; the run
    outcome is logged with its duration.  ``run_id`` is bound into the
    log context for the contractor loop.
"""

from __future__ import annotations

import time
from datetime import date
from typing import Callable

from sqlalchemy.orm import Session

from compliance_kernel.domain.clock import Clock, SystemClock
from compliance_kernel.domain.compliance import ComplianceEngine
from compliance_kernel.domain.types import ContractorKey, RunInfo, RunResult
from compliance_kernel.exceptions import MissingRunParameterError, RunNotFoundError
from compliance_kernel.logging_config import LogContext, get_logger
from compliance_kernel.models.report import Report, ReportDetail
from compliance_kernel.models.run import Run
from compliance_kernel.selectors.hire_selector import HireSelector
from compliance_kernel.selectors.report_selector import ReportSelector
from compliance_kernel.selectors.run_selector import RunSelector
from compliance_kernel.services.mode_service import ModeService

logger = get_logger("services.run_service")

DRY_RUN_MESSAGE = "Dry run completed successfully. No data was written."


class RunService:
    """
    Creates and executes compliance runs.

    Contract:
        ``create_run`` validates and resolves defaults, then delegates to
        ``execute_run``.  ``execute_run`` always returns a RunResult.

    Non-goals:
        - Does NOT retry a failed run.  Read-side retry lives in selectors.
        - Does NOT serialise concurrent runs for the same review date.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        clock: Clock | None = None,
        engine: ComplianceEngine | None = None,
    ):
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._engine = engine or ComplianceEngine()

    # -- Queries -------------------------------------------------------------

    def get_all_runs(self, limit: int = 100) -> list[RunInfo]:
        with self._session_factory() as session:
            return RunSelector(session).get_all_runs(limit)

    def get_run_by_id(self, run_id: int) -> RunInfo:
        with self._session_factory() as session:
            run = RunSelector(session).get_run_by_id(run_id)
        if run is None:
            raise RunNotFoundError(run_id)
        return run

    def get_next_run_number(self, mode_id: int, reviewed_date: date) -> int:
        with self._session_factory() as session:
            return RunSelector(session).get_max_run_number(mode_id, reviewed_date) + 1

    # -- Commands ------------------------------------------------------------

    def create_run(
        self,
        mode_id: int | None,
        reviewed_date: date | None,
        run_number: int | None = None,
        dry_run: bool = False,
    ) -> RunResult:
        """
        Validate parameters and execute a run.

        Args:
            mode_id: Mode to run under.
            reviewed_date: Review date whose hires are replayed.
            run_number: Explicit run number.  When omitted or 0, the next
                number for this mode and review date is used.
            dry_run: Roll back instead of committing.

        Raises:
            MissingRunParameterError: mode_id or reviewed_date is missing.
            ModeNotFoundError: mode_id does not exist.
        """
        missing = [
            name
            for name, value in (("mode_id", mode_id), ("reviewed_date", reviewed_date))
            if value is None
        ]
        if missing:
            raise MissingRunParameterError(missing)

        with self._session_factory() as session:
            mode = ModeService(session).get_mode_by_id(mode_id)
            if not run_number:
                run_number = (
                    RunSelector(session).get_max_run_number(mode_id, reviewed_date) + 1
                )

        return self.execute_run(
            mode_id=mode_id,
            run_number=run_number,
            reviewed_date=reviewed_date,
            dry_run=dry_run,
            allowed_direct=mode.allowed_direct,
        )

    def execute_run(
        self,
        mode_id: int,
        run_number: int,
        reviewed_date: date,
        dry_run: bool = False,
        allowed_direct: int = 2,
    ) -> RunResult:
        """
        Execute one run in a single transaction.

        Postconditions:
            - success and not dry_run: the Run, its Reports and its
              ReportDetails are committed; ``run_id`` is the new id.
            - success and dry_run: nothing persisted; ``run_id`` is None.
            - failure: nothing persisted; ``run_id`` is None and
              ``message`` carries the error.
        """
        with LogContext.bind(mode_id=mode_id, reviewed_date=reviewed_date):
            logger.info(
                "run_started",
                extra={
                    "run_number": run_number,
                    "dry_run": dry_run,
                    "allowed_direct": allowed_direct,
                },
            )
            t0 = time.monotonic()

            session: Session | None = None
            try:
                session = self._session_factory()
                session.connection()
            except Exception as exc:
                if session is not None:
                    session.close()
                logger.error(
                    "run_failed",
                    extra={"stage": "open_transaction", "error": str(exc)},
                    exc_info=True,
                )
                return RunResult(False, None, f"Run execution failed: {exc}")

            try:
                run_id = self._replay(
                    session,
                    mode_id=mode_id,
                    run_number=run_number,
                    reviewed_date=reviewed_date,
                    dry_run=dry_run,
                    allowed_direct=allowed_direct,
                )
                duration_ms = round((time.monotonic() - t0) * 1000, 2)

                if dry_run:
                    session.rollback()
                    logger.info(
                        "run_dry_run_rolled_back",
                        extra={"duration_ms": duration_ms},
                    )
                    return RunResult(True, None, DRY_RUN_MESSAGE)

                session.commit()
                logger.info(
                    "run_committed",
                    extra={"run_id": run_id, "duration_ms": duration_ms},
                )
                return RunResult(True, run_id, f"Run executed successfully with ID: {run_id}")

            except Exception as exc:
                session.rollback()
                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                logger.error(
                    "run_failed",
                    extra={
                        "stage": "transaction",
                        "error": str(exc),
                        "duration_ms": duration_ms,
                    },
                    exc_info=True,
                )
                return RunResult(
                    False, None, f"Error during transaction execution: {exc}"
                )
            finally:
                session.close()

    # -- Internals -----------------------------------------------------------

    def _replay(
        self,
        session: Session,
        *,
        mode_id: int,
        run_number: int,
        reviewed_date: date,
        dry_run: bool,
        allowed_direct: int,
    ) -> int:
        run = Run(
            report_date=self._clock.today(),
            reviewed_date=reviewed_date,
            mode_id=mode_id,
            run_number=run_number,
        )
        session.add(run)
        session.flush()

        hires = HireSelector(session, max_retries=1)
        reports = ReportSelector(session, max_retries=1)

        previous = RunSelector(session, max_retries=1).get_previous_run(reviewed_date)
        previous_run_id = previous.id if previous is not None else None
        universe = hires.get_contractor_universe(reviewed_date, previous_run_id)

        with LogContext.bind(run_id=run.id):
            logger.info(
                "contractor_universe_resolved",
                extra={
                    "previous_run_id": previous_run_id,
                    "contractor_count": len(universe),
                },
            )
            for contractor in universe:
                self._process_contractor(
                    session,
                    hires,
                    reports,
                    run_id=run.id,
                    contractor=contractor,
                    previous_run_id=previous_run_id,
                    reviewed_date=reviewed_date,
                    dry_run=dry_run,
                    allowed_direct=allowed_direct,
                )

        return run.id

    def _process_contractor(
        self,
        session: Session,
        hires: HireSelector,
        reports: ReportSelector,
        *,
        run_id: int,
        contractor: ContractorKey,
        previous_run_id: int | None,
        reviewed_date: date,
        dry_run: bool,
        allowed_direct: int,
    ) -> None:
        seed = None
        if previous_run_id is not None:
            seed = reports.get_seed(
                previous_run_id, contractor.contractor_id, contractor.employer_id
            )

        state = self._engine.create_compliance_state(seed, allowed_direct)
        events = hires.get_hires_for_contractor(contractor.contractor_id, reviewed_date)

        for event in events:
            self._engine.apply_hire(state, event.hire_type, allowed_direct)
            if dry_run:
                continue
            summary = self._engine.get_compliance_summary(state)
            session.add(
                ReportDetail(
                    run_id=run_id,
                    employer_id=event.employer_id,
                    contractor_id=event.contractor_id,
                    contractor_name=event.contractor_name,
                    member_name=event.member_name,
                    ia_number=str(event.ia_number),
                    start_date=event.start_date,
                    hire_type=event.hire_type,
                    compliance_status=summary.status,
                    direct_count=summary.direct_count,
                    dispatch_needed=summary.dispatch_needed,
                    next_hire_dispatch=summary.next_hire_dispatch,
                    reviewed_date=event.reviewed_date,
                )
            )
            session.flush()

        summary = self._engine.get_compliance_summary(state)
        if not dry_run:
            session.add(
                Report(
                    run_id=run_id,
                    employer_id=contractor.employer_id,
                    contractor_id=contractor.contractor_id,
                    contractor_name=contractor.contractor_name,
                    compliance_status=summary.status,
                    direct_count=summary.direct_count,
                    dispatch_needed=summary.dispatch_needed,
                    next_hire_dispatch=summary.next_hire_dispatch,
                )
            )
            session.flush()

        logger.info(
            "contractor_processed",
            extra={
                "employer_id": contractor.employer_id,
                "contractor_id": contractor.contractor_id,
                "seeded": seed is not None,
                "hire_count": len(events),
                "compliance_status": summary.status,
                "direct_count": summary.direct_count,
                "dispatch_needed": summary.dispatch_needed,
                "next_hire_dispatch": summary.next_hire_dispatch,
            },
        )
