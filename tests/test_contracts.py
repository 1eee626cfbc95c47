from __future__ import annotations

import re
import unittest
from pathlib import Path

from bulletin_finder import __version__
from bulletin_finder.contracts import CONTRACT_VERSIONS, build_contract, build_run_summary, utc_now_iso, wrap_payload


class ContractTests(unittest.TestCase):
    def test_every_output_has_a_versioned_contract(self):
        self.assertEqual(
            sorted(CONTRACT_VERSIONS),
            ["bulletin_finder.export", "bulletin_finder.headers", "bulletin_finder.search"],
        )
        for name in CONTRACT_VERSIONS:
            self.assertEqual(build_contract(name)["name"], name)

    def test_unknown_contract_is_a_key_error(self):
        with self.assertRaises(KeyError):
            build_contract("bulletin_finder.unknown")

    def test_run_summary(self):
        summary = build_run_summary(
            command="search",
            input_path=Path("boletin.xlsx"),
            metrics={"results": 2},
            warnings=["Sheet 'Vacia' is empty"],
        )
        self.assertEqual(summary["tool"], "bulletin-finder")
        self.assertEqual(summary["status"], "ok")
        self.assertEqual(summary["input_file"], "boletin.xlsx")
        self.assertIsNone(summary["output_file"])
        self.assertEqual(summary["warnings_count"], 1)
        self.assertEqual(summary["metrics"], {"results": 2})

    def test_wrap_payload(self):
        summary = build_run_summary(command="headers", input_path=None)
        payload = wrap_payload("bulletin_finder.headers", {"headers": []}, summary)
        self.assertEqual(payload["schema_version"], payload["contract"]["version"])
        self.assertEqual(payload["tool_version"], __version__)
        self.assertEqual(payload["headers"], [])
        self.assertIs(payload["run_summary"], summary)

    def test_timestamp_is_utc_seconds(self):
        self.assertRegex(utc_now_iso(), re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$"))


if __name__ == "__main__":
    unittest.main()
