from __future__ import annotations

import importlib.util
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

import openpyxl

from bulletin_finder.loader import DECODE_MESSAGE, DecodeFailure, clean_cell, load_bulletin, read_workbook


ROOT = Path(__file__).resolve().parents[1]
GENERATOR_PATH = ROOT / "sample-data" / "generate_bulletin.py"


def load_generator():
    spec = importlib.util.spec_from_file_location("generate_bulletin", GENERATOR_PATH)
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


class CleanCellTests(unittest.TestCase):
    def test_clean_cell(self):
        self.assertIsNone(clean_cell(None))
        self.assertIsNone(clean_cell(float("nan")))
        self.assertEqual(clean_cell(12.0), 12)
        self.assertEqual(clean_cell(12.5), 12.5)
        self.assertEqual(clean_cell("Nancy"), "Nancy")
        self.assertEqual(clean_cell(datetime(2024, 3, 15)), datetime(2024, 3, 15))


class SpreadsheetLoaderTests(unittest.TestCase):
    def test_generated_bulletin_keeps_sheets_and_row_positions(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = load_generator().write_workbook(Path(tmpdir) / "boletin.xlsx")
            result = load_bulletin(path)

        workbook = result["workbook"]
        self.assertEqual(result["detected_format"], "xlsx")
        self.assertEqual(result["sheet_names"], ["Civil", "Penal"])
        self.assertEqual(result["original_rows"], 15)
        civil = workbook.sheet("Civil")
        self.assertEqual(civil.rows[0][0], "JUZGADO   SEXTO   CIVIL   MUNICIPAL")
        self.assertTrue(all(value is None for value in civil.rows[0][1:]))
        self.assertEqual(civil.rows[3][1], "Nancy Gómez")
        self.assertEqual(civil.rows[3][4], datetime(2024, 3, 15))
        self.assertIsNone(civil.rows[4][4])

    def test_bytes_need_a_filename(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = load_generator().write_workbook(Path(tmpdir) / "boletin.xlsx")
            raw = path.read_bytes()
        workbook = read_workbook(raw, filename="subido.xlsx")
        self.assertEqual(workbook.sheet_names, ["Civil", "Penal"])
        with self.assertRaises(DecodeFailure):
            load_bulletin(raw)

    def test_empty_sheet_is_kept_with_a_warning(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "two.xlsx"
            wb = openpyxl.Workbook()
            wb.active.title = "Datos"
            wb.active.append(["JUZGADO PRIMERO LABORAL"])
            wb.active.append(["001", "Nancy"])
            wb.create_sheet("Vacia")
            wb.save(path)
            result = load_bulletin(path)
        self.assertEqual(result["sheet_names"], ["Datos", "Vacia"])
        self.assertEqual(len(result["workbook"].sheet("Vacia")), 0)
        self.assertIn("Sheet 'Vacia' is empty", result["warnings"])

    def test_corrupt_workbook_raises_decode_failure(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "corrupt.xlsx"
            path.write_bytes(b"this is not a spreadsheet")
            with self.assertRaises(DecodeFailure) as ctx:
                load_bulletin(path)
        self.assertTrue(str(ctx.exception).startswith(DECODE_MESSAGE))

    def test_unsupported_and_empty_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            pdf = Path(tmpdir) / "boletin.pdf"
            pdf.write_bytes(b"%PDF-1.4")
            empty = Path(tmpdir) / "empty.csv"
            empty.write_bytes(b"")
            with self.assertRaises(DecodeFailure):
                load_bulletin(pdf)
            with self.assertRaises(DecodeFailure):
                load_bulletin(empty)

    def test_missing_path(self):
        with self.assertRaises(FileNotFoundError):
            load_bulletin("/nonexistent/boletin.xlsx")


class TextLoaderTests(unittest.TestCase):
    def test_csv_rows_stay_ragged(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "boletin.csv"
            path.write_text(
                "JUZGADO SEXTO CIVIL,,\n001,Nancy Gómez,Banco\n002,Pedro Salas,Luis Torres\n\n",
                encoding="utf-8",
            )
            result = load_bulletin(path)
        workbook = result["workbook"]
        self.assertEqual(result["delimiter"], ",")
        self.assertEqual(workbook.sheet_names, ["boletin"])
        rows = workbook.sheet("boletin").rows
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[0], ("JUZGADO SEXTO CIVIL", None, None))
        self.assertEqual(rows[1], ("001", "Nancy Gómez", "Banco"))

    def test_tsv_uses_tabs(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "boletin.tsv"
            path.write_text("ESTADO 12\n001\tNancy, Gómez\n", encoding="utf-8")
            rows = read_workbook(path).sheet("boletin").rows
        self.assertEqual(rows[0], ("ESTADO 12",))
        self.assertEqual(rows[1], ("001", "Nancy, Gómez"))


if __name__ == "__main__":
    unittest.main()
