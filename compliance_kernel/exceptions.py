"""
Typed Exception Hierarchy for the Compliance Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the run pipeline (CLI, HTTP layers, report editors) must be able
to tell a bad request apart from a storage fault without parsing message
strings. Every error here:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        result = run_service.create_run(mode_id=7, reviewed_date=day)
    except ModeNotFoundError as e:
        api_response(code=e.code, mode=e.mode_id)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ComplianceKernelError (base)
    |
    +-- RunError
    |   +-- MissingRunParameterError
    |   +-- RunNotFoundError
    |
    +-- ModeError
    |   +-- ModeNotFoundError
    |   +-- InvalidModeNameError
    |
    +-- ReportError
    |   +-- ReportNotFoundError
    |   +-- InvalidReportUpdateError
    |
    +-- HireImportError
    |
    +-- ConfigurationError

===============================================================================
PROPAGATION
===============================================================================

Precondition errors (missing mode or reviewed date, unknown mode) are raised
BEFORE a run transaction begins and propagate to the caller.  Errors inside
the run transaction are converted by RunService into a failed ``RunResult``
and never escape as exceptions.  The compliance engine raises nothing.
"""


class ComplianceKernelError(Exception):
    """
    Base exception for all compliance kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "COMPLIANCE_KERNEL_ERROR"


# Run-related exceptions


class RunError(ComplianceKernelError):
    """Base exception for run-related errors."""

    code: str = "RUN_ERROR"


class MissingRunParameterError(RunError):
    """A required run parameter (mode or reviewed date) was not supplied."""

    code: str = "MISSING_RUN_PARAMETER"

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Missing required run parameter(s): {', '.join(missing)}"
        )


class RunNotFoundError(RunError):
    """Run with given ID was not found."""

    code: str = "RUN_NOT_FOUND"

    def __init__(self, run_id: int):
        self.run_id = run_id
        super().__init__(f"Run {run_id} not found")


# Mode-related exceptions


class ModeError(ComplianceKernelError):
    """Base exception for mode-related errors."""

    code: str = "MODE_ERROR"


class ModeNotFoundError(ModeError):
    """Mode with given ID or name was not found."""

    code: str = "MODE_NOT_FOUND"

    def __init__(self, mode_id: int | str):
        self.mode_id = mode_id
        super().__init__(f"Mode {mode_id} not found")


class InvalidModeNameError(ModeError):
    """Mode name is not one of the recognised ratio names."""

    code: str = "INVALID_MODE_NAME"

    def __init__(self, mode_name: str | None):
        self.mode_name = mode_name
        super().__init__(f"mode must be 2To1 or 3To1 (got: {mode_name})")


# Report-related exceptions


class ReportError(ComplianceKernelError):
    """Base exception for report-related errors."""

    code: str = "REPORT_ERROR"


class ReportNotFoundError(ReportError):
    """Report with given ID was not found."""

    code: str = "REPORT_NOT_FOUND"

    def __init__(self, report_id: int):
        self.report_id = report_id
        super().__init__(f"Report {report_id} not found")


class InvalidReportUpdateError(ReportError):
    """A review edit is missing required values."""

    code: str = "INVALID_REPORT_UPDATE"

    def __init__(self, report_id: int, reason: str):
        self.report_id = report_id
        self.reason = reason
        super().__init__(f"Invalid update for report {report_id}: {reason}")


# Ingestion


class HireImportError(ComplianceKernelError):
    """A hire import source cannot be read at all."""

    code: str = "HIRE_IMPORT_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot import hires from {source}: {reason}")


# Configuration


class ConfigurationError(ComplianceKernelError):
    """Configuration file is missing, malformed, or incomplete."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")
