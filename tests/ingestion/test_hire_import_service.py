"""
Tests for HireImportService: CSV and XLSX exports into reviewed_hires.
"""

import csv
from datetime import date, datetime

import pytest
from openpyxl import Workbook
from sqlalchemy import select

from compliance_ingestion.services.import_service import (
    HIRE_COLUMNS,
    HireImportService,
)
from compliance_kernel.exceptions import HireImportError
from compliance_kernel.models.hire import ReviewedHire


def _row(**overrides):
    row = {
        "Employer ID": "E100",
        "Contractor Name": "Acme Electric",
        "Member Name": "Pat Member",
        "IA Number": "1001",
        "Start Date": "2025-11-10",
        "Hire Type": "direct",
        "Is Reviewed": "1",
        "Is Excluded": "",
        "End Date": "",
        "Contractor ID": "100",
        "Is Inactive": "0",
        "Reviewed Date": "2025-11-16 10:30:00",
        "Excluded Compliance Rules": "",
        "Created By User Name": "jdoe",
        "Created By Name": "Jane Doe",
        "Created on": "2025-11-16 10:31:00",
    }
    row.update(overrides)
    return row


def _write_csv(path, rows, columns=HIRE_COLUMNS):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(columns))
        writer.writeheader()
        for row in rows:
            writer.writerow({c: row.get(c, "") for c in columns})
    return path


@pytest.fixture
def importer(db_session, clock):
    return HireImportService(db_session, clock)


def _hires(db_session):
    return list(
        db_session.execute(select(ReviewedHire).order_by(ReviewedHire.id)).scalars().all()
    )


class TestCsvImport:
    def test_imports_rows(self, importer, db_session, tmp_path):
        path = _write_csv(
            tmp_path / "hires.csv",
            [_row(), _row(**{"IA Number": "1002", "Hire Type": "dispatch"})],
        )

        result = importer.import_file(path)

        assert result.success_count == 2
        assert result.skipped_count == 0
        assert result.fail_count == 0
        hires = _hires(db_session)
        assert [h.ia_number for h in hires] == [1001, 1002]
        first = hires[0]
        assert first.contractor_id == 100
        assert first.start_date == date(2025, 11, 10)
        assert first.reviewed_date == datetime(2025, 11, 16, 10, 30)
        assert first.is_reviewed is True
        assert first.is_inactive is False
        assert first.excluded_compliance_rules is None
        assert first.created_by_user_name == "jdoe"

    def test_duplicates_are_skipped(self, importer, db_session, tmp_path):
        path = _write_csv(tmp_path / "hires.csv", [_row(), _row()])

        first = importer.import_file(path)
        second = importer.import_file(path)

        assert (first.success_count, first.skipped_count) == (1, 1)
        assert (second.success_count, second.skipped_count) == (0, 2)
        assert len(_hires(db_session)) == 1

    def test_bad_rows_are_reported(self, importer, db_session, tmp_path):
        path = _write_csv(
            tmp_path / "hires.csv",
            [
                _row(),
                _row(**{"IA Number": "abc"}),
                _row(**{"IA Number": "1003", "Reviewed Date": "someday"}),
                _row(**{"IA Number": "1004"}),
            ],
        )

        result = importer.import_file(path)

        assert result.success_count == 2
        assert result.fail_count == 2
        assert result.errors[0] == "Row 2: IA Number is required"
        assert result.errors[1].startswith("Row 3: Unrecognised date")

    def test_missing_audit_fields_default_to_import(self, importer, db_session, tmp_path):
        path = _write_csv(
            tmp_path / "hires.csv",
            [_row(**{"Created By User Name": "", "Created By Name": "", "Created on": ""})],
        )

        importer.import_file(path)

        hire = _hires(db_session)[0]
        assert hire.created_by_user_name == "import"
        assert hire.created_by_name == "import"
        assert hire.created_on == datetime(2025, 11, 20, 9, 0)

    def test_missing_columns(self, importer, db_session, tmp_path):
        columns = [c for c in HIRE_COLUMNS if c not in ("Hire Type", "Reviewed Date")]
        path = _write_csv(tmp_path / "hires.csv", [_row()], columns=columns)

        with pytest.raises(HireImportError) as exc_info:
            importer.import_file(path)

        assert "missing columns: Hire Type, Reviewed Date" in str(exc_info.value)
        assert _hires(db_session) == []

    def test_missing_file(self, importer, tmp_path):
        with pytest.raises(HireImportError, match="file not found"):
            importer.import_file(tmp_path / "absent.csv")

    def test_unsupported_type(self, importer, tmp_path):
        path = tmp_path / "hires.json"
        path.write_text("[]")
        with pytest.raises(HireImportError, match="unsupported file type"):
            importer.import_file(path)

    def test_import_is_logged(self, importer, tmp_path, captured_logs):
        importer.import_file(_write_csv(tmp_path / "hires.csv", [_row()]))
        completed = [r for r in captured_logs() if r["message"] == "hire_import_completed"]
        assert completed[0]["success_count"] == 1


class TestXlsxImport:
    def _write_xlsx(self, path, rows):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(list(HIRE_COLUMNS))
        for row in rows:
            sheet.append([row.get(c) for c in HIRE_COLUMNS])
        workbook.save(path)
        return path

    def test_native_cell_types(self, importer, db_session, tmp_path):
        path = self._write_xlsx(
            tmp_path / "hires.xlsx",
            [
                _row(**{
                    "IA Number": 2001,
                    "Contractor ID": 100,
                    "Start Date": datetime(2025, 11, 10),
                    "Reviewed Date": datetime(2025, 11, 16, 10, 30),
                    "Is Reviewed": True,
                    "Is Inactive": False,
                    "Is Excluded": None,
                    "End Date": None,
                    "Excluded Compliance Rules": None,
                }),
            ],
        )

        result = importer.import_file(path)

        assert result.success_count == 1
        hire = _hires(db_session)[0]
        assert hire.ia_number == 2001
        assert hire.start_date == date(2025, 11, 10)
        assert hire.reviewed_date == datetime(2025, 11, 16, 10, 30)


class TestImportRows:
    def test_rows_without_file(self, importer, db_session):
        result = importer.import_rows([_row(), _row(**{"Employer ID": ""})])
        assert result.success_count == 1
        assert result.errors == ("Row 2: Employer ID is required",)
