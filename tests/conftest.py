"""
Pytest fixtures for the compliance runner test suite.

Provides:
- SQLite database sessions (a fresh file database per test)
- A session factory for RunService, which owns its own transaction
- Seeded modes and a hire builder
- Structured log capture
"""

import json
import logging
from datetime import date, datetime, timezone
from io import StringIO

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

import compliance_kernel.models  # noqa: F401  registers tables
from compliance_kernel.db.base import Base
from compliance_kernel.domain.clock import DeterministicClock
from compliance_kernel.domain.types import ModeInfo
from compliance_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from compliance_kernel.models.hire import ReviewedHire
from compliance_kernel.models.mode import Mode
from compliance_kernel.models.report import Report
from compliance_kernel.models.run import Run
from compliance_kernel.services.run_service import RunService

REVIEWED = date(2025, 11, 16)
PRIOR_REVIEWED = date(2025, 11, 9)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """JSON logging at DEBUG for the whole session."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Each test starts with no bound log fields."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture compliance_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, run_service):
            run_service.create_run(...)
            logs = captured_logs()
            assert any(r["message"] == "run_committed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("compliance_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine(tmp_path):
    """File-backed SQLite so separate sessions see only committed data."""
    engine = create_engine(f"sqlite:///{tmp_path / 'compliance.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory) -> Session:
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def clock():
    return DeterministicClock(datetime(2025, 11, 20, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def modes(db_session) -> dict[str, ModeInfo]:
    """The two standard modes, committed."""
    two = Mode(mode_name="2To1", mode_value=2)
    three = Mode(mode_name="3To1", mode_value=3)
    db_session.add_all([two, three])
    db_session.commit()
    return {
        "2To1": ModeInfo(id=two.id, mode_name="2To1", allowed_direct=2),
        "3To1": ModeInfo(id=three.id, mode_name="3To1", allowed_direct=3),
    }


@pytest.fixture
def add_hires(db_session):
    """
    Insert and commit reviewed hires.

    Usage::

        add_hires(
            dict(contractor_id=100, ia_number=1, hire_type="direct"),
            dict(contractor_id=100, ia_number=2, hire_type="dispatch"),
        )
    """
    counter = {"ia": 1000}

    def _add(*rows: dict) -> list[ReviewedHire]:
        hires = []
        for overrides in rows:
            counter["ia"] += 1
            values = {
                "employer_id": "E100",
                "contractor_id": 100,
                "contractor_name": "Acme Electric",
                "member_name": "Pat Member",
                "ia_number": counter["ia"],
                "start_date": date(2025, 11, 10),
                "hire_type": "direct",
                "is_reviewed": True,
                "is_inactive": False,
                "reviewed_date": datetime(2025, 11, 16, 10, 30),
                "created_by_user_name": "tester",
                "created_by_name": "Test User",
                "created_on": datetime(2025, 11, 16, 10, 30),
            }
            values.update(overrides)
            hires.append(ReviewedHire(**values))
        db_session.add_all(hires)
        db_session.commit()
        return hires

    return _add


@pytest.fixture
def add_prior_run(db_session):
    """
    Commit a run with the given reports, as if executed earlier.

    Usage::

        run = add_prior_run(
            mode_id, PRIOR_REVIEWED,
            dict(contractor_id=100, compliance_status="Noncompliant",
                 direct_count=3, dispatch_needed=1),
        )
    """

    def _add(mode_id: int, reviewed_date: date, *reports: dict, run_number: int = 1) -> Run:
        run = Run(
            report_date=reviewed_date,
            reviewed_date=reviewed_date,
            mode_id=mode_id,
            run_number=run_number,
        )
        db_session.add(run)
        db_session.flush()
        for overrides in reports:
            values = {
                "employer_id": "E100",
                "contractor_id": 100,
                "contractor_name": "Acme Electric",
                "compliance_status": "Compliant",
                "direct_count": 0,
                "dispatch_needed": 0,
                "next_hire_dispatch": "N",
            }
            values.update(overrides)
            db_session.add(Report(run_id=run.id, **values))
        db_session.commit()
        return run

    return _add


@pytest.fixture
def run_service(session_factory, clock):
    return RunService(session_factory, clock)
