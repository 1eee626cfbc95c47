from __future__ import annotations

import csv
import json
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

import openpyxl

from bulletin_finder.models import EnrichedRow
from bulletin_finder.report import REPORT_COLUMNS, REPORT_TITLE, export_rows, other_data, project, project_row


def sample_rows() -> list[EnrichedRow]:
    return [
        EnrichedRow(
            sheet_name="Civil",
            position=3,
            cells=("2023-00112", "Nancy Gómez", "Banco Popular", "Auto admite", datetime(2024, 3, 15), None, "folio 3"),
            organization="JUZGADO SEXTO CIVIL MUNICIPAL",
            state="ESTADO 18 DE MARZO",
        ),
        EnrichedRow(sheet_name="Penal", position=1, cells=("2024-00010", "  ", None)),
    ]


class ProjectionTests(unittest.TestCase):
    def test_column_order(self):
        self.assertEqual(
            project_row(sample_rows()[0]),
            (
                "JUZGADO SEXTO CIVIL MUNICIPAL",
                "ESTADO 18 DE MARZO",
                "2023-00112",
                "Nancy Gómez",
                "Banco Popular",
                "Auto admite",
                "Civil",
            ),
        )

    def test_missing_values_use_placeholders(self):
        self.assertEqual(
            project_row(sample_rows()[1]),
            ("-", "-", "2024-00010", "-", "-", "-", "Penal"),
        )
        self.assertEqual(
            project_row(sample_rows()[1], organization_placeholder="(sin juzgado)", missing_placeholder=""),
            ("(sin juzgado)", "", "2024-00010", "", "", "", "Penal"),
        )

    def test_project_keeps_input_order(self):
        table = project(reversed(sample_rows()))
        self.assertEqual([line[-1] for line in table], ["Penal", "Civil"])

    def test_other_data_joins_trailing_non_empty_cells(self):
        self.assertEqual(other_data(sample_rows()[0]), "2024-03-15 | folio 3")
        self.assertEqual(other_data(sample_rows()[1]), "")


class ExportTests(unittest.TestCase):
    def test_empty_selection_writes_nothing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / "report.xlsx"
            self.assertIsNone(export_rows([], output))
            self.assertFalse(output.exists())

    def test_unknown_format_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ValueError):
                export_rows(sample_rows(), Path(tmpdir) / "report.pdf", fmt="pdf")

    def test_xlsx_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / "nested" / "report.xlsx"
            self.assertEqual(export_rows(sample_rows(), output), output)
            wb = openpyxl.load_workbook(output)
            self.assertEqual(wb.sheetnames, ["Report", "Summary"])
            ws = wb["Report"]
            values = [list(row) for row in ws.iter_rows(values_only=True)]
            self.assertEqual(tuple(values[0]), REPORT_COLUMNS)
            self.assertEqual(values[1][3], "Nancy Gómez")
            self.assertEqual(values[2][0], "-")
            self.assertEqual(ws.freeze_panes, "A2")
            summary = wb["Summary"]
            self.assertEqual(summary["A1"].value, REPORT_TITLE)
            self.assertEqual(summary["B3"].value, 2)

    def test_csv_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / "report.csv"
            export_rows(sample_rows(), output, fmt="csv")
            with output.open(newline="", encoding="utf-8") as handle:
                lines = list(csv.reader(handle))
            self.assertEqual(tuple(lines[0]), REPORT_COLUMNS)
            self.assertEqual(lines[2], ["-", "-", "2024-00010", "-", "-", "-", "Penal"])

    def test_json_report(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            output = Path(tmpdir) / "report.json"
            export_rows(sample_rows(), output, fmt="json", input_path="boletin.xlsx")
            payload = json.loads(output.read_text(encoding="utf-8"))
            self.assertEqual(payload["contract"]["name"], "bulletin_finder.export")
            self.assertEqual(payload["columns"], list(REPORT_COLUMNS))
            self.assertEqual(payload["selected_ids"], ["Civil-3", "Penal-1"])
            self.assertEqual(payload["run_summary"]["metrics"]["selected_rows"], 2)
            self.assertEqual(payload["run_summary"]["input_file"], "boletin.xlsx")


if __name__ == "__main__":
    unittest.main()
