from __future__ import annotations

import unittest
from datetime import datetime

from bulletin_finder.models import EnrichedRow, Workbook
from bulletin_finder.search import filter_rows, matches, row_search_text, search


def bulletin() -> Workbook:
    return Workbook.from_pairs(
        [
            (
                "Civil",
                [
                    ("JUZGADO SEXTO CIVIL MUNICIPAL", None),
                    ("ESTADO 18 DE MARZO", None),
                    ("2023-00112", "Banco Popular", "Nancy Gómez", "Auto"),
                    ("2023-00418", "Carlos Pérez", None, "Traslado", datetime(2024, 3, 15)),
                    ("NANCY GÓMEZ", None),
                ],
            ),
            ("Penal", [("2024-00010", "Fiscalía", "nancy gómez ruiz", 1500.0)]),
        ]
    )


class MatchTests(unittest.TestCase):
    def test_case_insensitive_in_any_column(self):
        self.assertTrue(matches(("2023-00112", "Banco", "Nancy Gómez"), "nancy"))
        self.assertTrue(matches(("2023-00112", "Banco", "Nancy Gómez"), "GÓMEZ"))
        self.assertFalse(matches(("2023-00112", "Banco", "Nancy Gómez"), "gomez"))

    def test_non_text_cells_are_searched_as_displayed(self):
        self.assertTrue(matches(("x", None, 1500.0), "1500"))
        self.assertTrue(matches(("x", datetime(2024, 3, 15)), "2024-03-15"))
        self.assertEqual(row_search_text(("A", None, 2.0)), "a  2")

    def test_blank_term_matches_nothing(self):
        self.assertFalse(matches(("anything",), ""))
        self.assertFalse(matches(("anything",), "   "))

    def test_filter_rows(self):
        rows = [
            EnrichedRow(sheet_name="S", position=0, cells=("a", "Nancy")),
            EnrichedRow(sheet_name="S", position=1, cells=("b", "Pedro")),
        ]
        self.assertEqual([row.position for row in filter_rows(rows, " nancy ")], [0])
        self.assertEqual(filter_rows(rows, ""), [])


class SearchTests(unittest.TestCase):
    def test_results_in_sheet_then_row_order_with_context(self):
        results = search(bulletin(), "nancy")
        self.assertEqual([row.key for row in results], ["Civil-2", "Civil-4", "Penal-0"])
        self.assertEqual(results[0].organization, "JUZGADO SEXTO CIVIL MUNICIPAL")
        self.assertEqual(results[0].state, "ESTADO 18 DE MARZO")
        self.assertEqual(results[2].organization, "")

    def test_header_rows_match_with_context_from_above(self):
        results = search(bulletin(), "juzgado")
        self.assertEqual([row.key for row in results], ["Civil-0"])
        self.assertEqual(results[0].organization, "")
        self.assertEqual(results[0].state, "")

        (estado,) = search(bulletin(), "estado 18")
        self.assertEqual(estado.organization, "JUZGADO SEXTO CIVIL MUNICIPAL")
        self.assertEqual(estado.state, "")

    def test_blank_term_returns_nothing(self):
        self.assertEqual(search(bulletin(), ""), [])
        self.assertEqual(search(bulletin(), "  "), [])

    def test_search_is_repeatable(self):
        workbook = bulletin()
        self.assertEqual(search(workbook, "nancy"), search(workbook, "nancy"))


if __name__ == "__main__":
    unittest.main()
