"""
Hire import service: export file -> reviewed_hires.

Responsibility:
    Reads a hiring-hall export (CSV or XLSX) through a source adapter,
    converts each row with the tolerant converters, and inserts it into
    ``reviewed_hires`` unless a hire with the same (employer id, IA number,
    start date) already exists.

Architecture position:
    Ingestion > Services.  Flushes within the caller's transaction; the CLI
    wraps an import and the run that follows it in separate transactions.

Failure modes:
    - HireImportError: file missing, unsupported extension, or required
      header columns absent.  Nothing is inserted.
    - Row-level problems (missing or unparseable values) are counted and
      reported as ``Row N: message``; the remaining rows still import.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from compliance_kernel.domain.clock import Clock, SystemClock
from compliance_kernel.domain.types import HireImportResult
from compliance_kernel.exceptions import HireImportError
from compliance_kernel.logging_config import LogContext, get_logger
from compliance_kernel.models.hire import ReviewedHire
from compliance_kernel.selectors.hire_selector import HireSelector
from compliance_kernel.services.base import BaseService

from compliance_ingestion.adapters.base import SourceAdapter
from compliance_ingestion.adapters.csv_adapter import CsvSourceAdapter
from compliance_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter
from compliance_ingestion.domain.converters import (
    to_bool,
    to_date,
    to_datetime,
    to_int,
    to_text,
)

logger = get_logger("ingestion.import_service")

EMPLOYER_ID = "Employer ID"
CONTRACTOR_NAME = "Contractor Name"
MEMBER_NAME = "Member Name"
IA_NUMBER = "IA Number"
START_DATE = "Start Date"
HIRE_TYPE = "Hire Type"
IS_REVIEWED = "Is Reviewed"
IS_EXCLUDED = "Is Excluded"
END_DATE = "End Date"
CONTRACTOR_ID = "Contractor ID"
IS_INACTIVE = "Is Inactive"
REVIEWED_DATE = "Reviewed Date"
EXCLUDED_COMPLIANCE_RULES = "Excluded Compliance Rules"
CREATED_BY_USER_NAME = "Created By User Name"
CREATED_BY_NAME = "Created By Name"
CREATED_ON = "Created on"

HIRE_COLUMNS = (
    EMPLOYER_ID,
    CONTRACTOR_NAME,
    MEMBER_NAME,
    IA_NUMBER,
    START_DATE,
    HIRE_TYPE,
    IS_REVIEWED,
    IS_EXCLUDED,
    END_DATE,
    CONTRACTOR_ID,
    IS_INACTIVE,
    REVIEWED_DATE,
    EXCLUDED_COMPLIANCE_RULES,
    CREATED_BY_USER_NAME,
    CREATED_BY_NAME,
    CREATED_ON,
)

# Header columns a file must carry before any row is read
REQUIRED_COLUMNS = (
    EMPLOYER_ID,
    CONTRACTOR_ID,
    CONTRACTOR_NAME,
    MEMBER_NAME,
    IA_NUMBER,
    START_DATE,
    HIRE_TYPE,
    REVIEWED_DATE,
)

IMPORT_ACTOR = "import"


def _default_adapters() -> dict[str, SourceAdapter]:
    return {
        ".csv": CsvSourceAdapter(),
        ".xlsx": XlsxSourceAdapter(),
    }


def _required(value: Any, column: str) -> Any:
    if value is None:
        raise ValueError(f"{column} is required")
    return value


class HireImportService(BaseService):
    """Imports reviewed hires, skipping ones already on file."""

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        adapters: dict[str, SourceAdapter] | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._adapters = adapters or _default_adapters()
        self._hires = HireSelector(session, max_retries=1)

    def import_file(self, source_path: Path, options: dict[str, Any] | None = None) -> HireImportResult:
        """
        Import every row of an export file.

        Raises:
            HireImportError: file missing, unsupported, or lacking columns.
        """
        options = options or {}
        source_path = Path(source_path)
        if not source_path.is_file():
            raise HireImportError(str(source_path), "file not found")

        adapter = self._adapters.get(source_path.suffix.lower())
        if adapter is None:
            raise HireImportError(
                str(source_path), f"unsupported file type '{source_path.suffix}'"
            )

        probe = adapter.probe(source_path, options)
        missing = probe.missing_columns(REQUIRED_COLUMNS)
        if missing:
            raise HireImportError(
                str(source_path), f"missing columns: {', '.join(missing)}"
            )

        with LogContext.bind(actor=IMPORT_ACTOR):
            logger.info(
                "hire_import_started",
                extra={"source": str(source_path), "row_count": probe.row_count},
            )
            return self.import_rows(adapter.read(source_path, options), source=str(source_path))

    def import_rows(
        self,
        rows: Iterable[dict[str, Any]],
        source: str = "<rows>",
    ) -> HireImportResult:
        """Import already-parsed rows keyed by export header text."""
        success = skipped = failed = 0
        errors: list[str] = []

        for index, row in enumerate(rows, start=1):
            try:
                hire = self._build_hire(row)
            except ValueError as exc:
                failed += 1
                errors.append(f"Row {index}: {exc}")
                continue

            if self._hires.hire_exists(hire.employer_id, hire.ia_number, hire.start_date):
                skipped += 1
                continue

            self.session.add(hire)
            self.session.flush()
            success += 1

        result = HireImportResult(
            success_count=success,
            skipped_count=skipped,
            fail_count=failed,
            errors=tuple(errors),
        )
        logger.info(
            "hire_import_completed",
            extra={
                "source": source,
                "success_count": success,
                "skipped_count": skipped,
                "fail_count": failed,
            },
        )
        return result

    def _build_hire(self, row: dict[str, Any]) -> ReviewedHire:
        """Convert one export row.  Raises ValueError naming the bad column."""
        return ReviewedHire(
            employer_id=_required(to_text(row.get(EMPLOYER_ID)), EMPLOYER_ID),
            contractor_id=_required(to_int(row.get(CONTRACTOR_ID)), CONTRACTOR_ID),
            contractor_name=_required(to_text(row.get(CONTRACTOR_NAME)), CONTRACTOR_NAME),
            member_name=_required(to_text(row.get(MEMBER_NAME)), MEMBER_NAME),
            ia_number=_required(to_int(row.get(IA_NUMBER)), IA_NUMBER),
            start_date=_required(to_date(row.get(START_DATE)), START_DATE),
            end_date=to_date(row.get(END_DATE)),
            hire_type=_required(to_text(row.get(HIRE_TYPE)), HIRE_TYPE),
            is_reviewed=bool(to_bool(row.get(IS_REVIEWED))),
            is_excluded=to_bool(row.get(IS_EXCLUDED)) or None,
            is_inactive=bool(to_bool(row.get(IS_INACTIVE))),
            reviewed_date=to_datetime(row.get(REVIEWED_DATE)),
            excluded_compliance_rules=to_text(row.get(EXCLUDED_COMPLIANCE_RULES)),
            created_by_user_name=to_text(row.get(CREATED_BY_USER_NAME)) or IMPORT_ACTOR,
            created_by_name=to_text(row.get(CREATED_BY_NAME)) or IMPORT_ACTOR,
            created_on=to_datetime(row.get(CREATED_ON))
            or self._clock.now().replace(tzinfo=None),
        )
