"""Tests for the cable shopping list and summary helpers."""

from __future__ import annotations

import unittest

from pedalschema.router import (
    AMP_INPUT, GUITAR, Cable, cable_list, cable_summary,
    format_length, total_cable_length,
)
from pedalschema.router.models import jack_of


def _cable(cable_type: str, length: float, order: int, defect: bool = False) -> Cable:
    source = GUITAR if cable_type == "instrument" else jack_of("a", "output")
    target = jack_of("b", "input") if cable_type != "instrument" else AMP_INPUT
    return Cable(source, target, cable_type, length, length - 0.5,
                 [(0.0, 0.0), (1.0, 0.0)], "direct", order, defect)


class TestFormatLength(unittest.TestCase):

    def test_inches(self):
        self.assertEqual(format_length(6), '6"')

    def test_whole_feet(self):
        self.assertEqual(format_length(24), "2'")
        self.assertEqual(format_length(120), "10'")

    def test_feet_and_inches(self):
        self.assertEqual(format_length(18), "1'6\"")


class TestCableList(unittest.TestCase):

    def setUp(self):
        self.cables = [
            _cable("instrument", 12, 1),
            _cable("patch", 6, 2),
            _cable("patch", 12, 3),
            _cable("patch", 6, 4),
            _cable("instrument", 36, 5, defect=True),
        ]

    def test_grouped_and_sorted(self):
        items = cable_list(self.cables)
        self.assertEqual(
            [(i.cable_type, i.length_inches, i.count) for i in items],
            [("patch", 6, 2), ("patch", 12, 1), ("instrument", 12, 1), ("instrument", 36, 1)],
        )
        self.assertEqual(items[0].length_display, '6"')
        self.assertIn("Patch", items[0].description)

    def test_totals(self):
        totals = total_cable_length(self.cables)
        self.assertEqual(totals["patch"], 24)
        self.assertEqual(totals["instrument"], 48)
        self.assertEqual(totals["total"], 72)

    def test_summary(self):
        s = cable_summary(self.cables)
        self.assertEqual(s.instrument_count, 2)
        self.assertEqual(s.patch_count, 3)
        self.assertEqual(s.long_cable_count, 1)
        self.assertEqual(s.total_count, 5)
        self.assertEqual(s.total_length_inches, 72)
        self.assertEqual(s.defect_count, 1)

    def test_empty(self):
        self.assertEqual(cable_list([]), [])
        self.assertEqual(cable_summary([]).total_count, 0)


if __name__ == "__main__":
    unittest.main()
