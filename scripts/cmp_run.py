#!/usr/bin/env python3
"""
cmp-run: execute one hiring-hall compliance run from the command line.

Steps:
  1. Load configuration (--config, $COMPLIANCE_CONFIG, or the packaged default;
     $COMPLIANCE_DATABASE_URL overrides the database).
  2. Create tables if missing and seed the configured modes.
  3. Optionally import a hire export (CSV or XLSX) with --import.
  4. Create and execute the run (or a dry run with --dry-run).
  5. Optionally write the run workbook with --out.

Usage:
    python3 scripts/cmp_run.py --reviewed-date 2025-11-16 --mode 2To1
    python3 scripts/cmp_run.py --reviewed-date 2025-11-16 --mode 3 \\
        --import hires.csv --out out/run.xlsx
    python3 scripts/cmp_run.py --reviewed-date 2025-11-16 --mode 2to1 --dry-run

Exit codes: 0 success, 1 run failure, 2 usage or precondition error.
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from compliance_config import get_active_config  # noqa: E402
from compliance_ingestion.services.import_service import HireImportService  # noqa: E402
from compliance_kernel.db.engine import (  # noqa: E402
    create_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from compliance_kernel.domain.clock import SystemClock  # noqa: E402
from compliance_kernel.exceptions import ComplianceKernelError  # noqa: E402
from compliance_kernel.logging_config import configure_logging, set_log_level  # noqa: E402
from compliance_kernel.services.mode_service import (  # noqa: E402
    ModeService,
    normalize_mode_name,
)
from compliance_kernel.services.run_service import RunService  # noqa: E402
from compliance_reporting.workbook import export_run_workbook  # noqa: E402

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_USAGE = 2


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cmp-run",
        description="Execute a hiring-hall compliance run for one review date.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--reviewed-date",
        required=True,
        help="Review date to process (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--mode",
        required=True,
        help="Compliance mode: 2To1 or 3To1 (also 2to1, 3to1, 2, 3).",
    )
    parser.add_argument(
        "--run-number",
        type=int,
        default=None,
        help="Run number (default: next number for this mode and date).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Execute the run and roll it back; nothing is written.",
    )
    parser.add_argument(
        "--import",
        dest="import_file",
        type=Path,
        default=None,
        help="Hire export (CSV or XLSX) to import before the run.",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write the run workbook (.xlsx) here after a committed run.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration YAML (default: $COMPLIANCE_CONFIG or packaged default).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        reviewed_date = date.fromisoformat(args.reviewed_date)
    except ValueError:
        print(f"ERROR: reviewed date must be YYYY-MM-DD (got: {args.reviewed_date})")
        return EXIT_USAGE

    # Handler first, so the config_loaded record is written.
    configure_logging()
    try:
        mode_name = normalize_mode_name(args.mode)
        config = get_active_config(args.config)
    except ComplianceKernelError as exc:
        print(f"ERROR: {exc}")
        return EXIT_USAGE

    set_log_level(config.log_level)
    db = config.database
    init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
    )
    clock = SystemClock()

    try:
        create_tables()

        try:
            with session_scope() as session:
                modes = ModeService(session)
                modes.ensure_modes(config.modes)
                mode = modes.get_mode_by_name(mode_name)

            if args.import_file is not None:
                with session_scope() as session:
                    imported = HireImportService(session, clock).import_file(args.import_file)
                print(
                    f"Imported {imported.success_count} hire(s), "
                    f"skipped {imported.skipped_count} duplicate(s), "
                    f"{imported.fail_count} failed."
                )
                for error in imported.errors:
                    print(f"  {error}")

            result = RunService(get_session_factory(), clock).create_run(
                mode.id,
                reviewed_date,
                run_number=args.run_number,
                dry_run=args.dry_run,
            )
        except ComplianceKernelError as exc:
            print(f"ERROR: {exc}")
            return EXIT_USAGE

        print(result.message)
        if not result.success:
            return EXIT_RUN_FAILED

        if args.out is not None and result.run_id is not None:
            with session_scope() as session:
                path = export_run_workbook(session, result.run_id, args.out)
            print(f"Workbook written to {path}")

        return EXIT_OK
    finally:
        reset_engine()


if __name__ == "__main__":
    raise SystemExit(main())
