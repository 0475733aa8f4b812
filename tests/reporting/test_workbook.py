"""Tests for the run workbook export."""

from datetime import date

import pytest
from openpyxl import Workbook, load_workbook

from compliance_kernel.exceptions import RunNotFoundError
from compliance_reporting.workbook import (
    MAX_COLUMN_WIDTH,
    MIN_COLUMN_WIDTH,
    add_sheet_from_rows,
    export_run_workbook,
)

REVIEWED = date(2025, 11, 16)


class TestAddSheetFromRows:
    def test_header_and_widths(self):
        workbook = Workbook()
        sheet = add_sheet_from_rows(
            workbook,
            "Data",
            ("Short", "Long", "Medium"),
            [("a", "x" * 200, "y" * 20)],
        )

        assert [c.value for c in sheet[1]] == ["Short", "Long", "Medium"]
        assert all(c.font.bold for c in sheet[1])
        assert sheet.freeze_panes == "A2"
        assert sheet.column_dimensions["A"].width == MIN_COLUMN_WIDTH
        assert sheet.column_dimensions["B"].width == MAX_COLUMN_WIDTH
        assert sheet.column_dimensions["C"].width == 22

    def test_empty_rows(self):
        sheet = add_sheet_from_rows(Workbook(), "Empty", ("A",), [])
        assert sheet.max_row == 1


class TestExportRunWorkbook:
    def test_writes_all_sheets(self, run_service, modes, add_hires, db_session, tmp_path):
        add_hires({}, {}, {}, {"contractor_id": 200, "contractor_name": "Bolt Builders"})
        result = run_service.create_run(modes["2To1"].id, REVIEWED)

        path = export_run_workbook(db_session, result.run_id, tmp_path / "out" / "run.xlsx")

        assert path.is_file()
        workbook = load_workbook(path)
        assert workbook.sheetnames == ["Detail", "Report", "Last 4", "Recent Hire"]

        report_rows = list(workbook["Report"].iter_rows(min_row=2, values_only=True))
        assert [(r[6], r[7], r[8]) for r in report_rows] == [
            ("Acme Electric", "Noncompliant", 3),
            ("Bolt Builders", "Compliant", 1),
        ]
        assert report_rows[0][2] == "2To1"

        assert workbook["Detail"].max_row == 5
        assert workbook["Recent Hire"].max_row == 5
        last = list(workbook["Last 4"].iter_rows(min_row=2, values_only=True))
        assert len(last) == 4
        assert workbook["Last 4"].freeze_panes == "A2"

    def test_export_is_logged(self, run_service, modes, add_hires, db_session, tmp_path, captured_logs):
        add_hires({})
        result = run_service.create_run(modes["2To1"].id, REVIEWED)

        export_run_workbook(db_session, result.run_id, tmp_path / "run.xlsx")

        exported = [r for r in captured_logs() if r["message"] == "workbook_exported"]
        assert exported[0]["report_rows"] == 1
        assert exported[0]["detail_rows"] == 1

    def test_unknown_run(self, db_session, modes, tmp_path):
        with pytest.raises(RunNotFoundError):
            export_run_workbook(db_session, 9999, tmp_path / "run.xlsx")
        assert not (tmp_path / "run.xlsx").exists()
