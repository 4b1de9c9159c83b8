"""Tests for the pedal catalog: parsing, validation, serialization."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from pedalschema.catalog import (
    PlacedPedal, UnknownPedalError,
    catalog_map, catalog_to_dict, category_order, load_catalog,
    lookup_pedal, parse_catalog, parse_placed_pedal, placement_to_dict,
)

from tests.board_fixture import make_catalog, make_pedals, place


GOOD_PEDAL = {
    "id": "sd1",
    "name": "SD-1",
    "category": "overdrive",
    "width_inches": 2.9,
    "depth_inches": 5.1,
    "jacks": [
        {"type": "input", "side": "right"},
        {"type": "output", "side": "left", "position_percent": 40},
    ],
}

GOOD_BOARD = {
    "id": "nano",
    "width_inches": 18,
    "depth_inches": 5.5,
    "rails": [{"position_from_back_inches": 1.0}],
}


class TestParseCatalog(unittest.TestCase):

    def test_valid_document(self):
        result = parse_catalog({"pedals": [GOOD_PEDAL], "boards": [GOOD_BOARD]})
        self.assertTrue(result.ok, [str(e) for e in result.errors])
        self.assertEqual(len(result.pedals), 1)
        pedal = result.pedals[0]
        self.assertEqual(pedal.jack("output").position_percent, 40.0)
        self.assertEqual(pedal.jack("input").position_percent, 50.0)
        self.assertEqual(result.boards[0].name, "nano")

    def test_unknown_category_is_reported_but_kept(self):
        bad = dict(GOOD_PEDAL, id="x", category="kazoo")
        result = parse_catalog({"pedals": [bad]})
        self.assertFalse(result.ok)
        self.assertEqual(len(result.pedals), 1)
        self.assertTrue(any(e.field == "category" for e in result.errors))

    def test_missing_required_field_skips_entry(self):
        bad = {"id": "broken", "category": "fuzz"}
        result = parse_catalog({"pedals": [bad, GOOD_PEDAL]})
        self.assertEqual([p.id for p in result.pedals], ["sd1"])
        self.assertEqual(result.errors[0].entity_id, "broken")
        self.assertEqual(result.errors[0].field, "parse")

    def test_duplicate_ids(self):
        result = parse_catalog({"pedals": [GOOD_PEDAL, GOOD_PEDAL]})
        self.assertEqual(len(result.pedals), 1)
        self.assertTrue(any("Duplicate" in e.message for e in result.errors))

    def test_jack_checks(self):
        bad = dict(GOOD_PEDAL, id="j", jacks=[
            {"type": "input", "side": "middle"},
            {"type": "input", "side": "left", "position_percent": 140},
        ])
        result = parse_catalog({"pedals": [bad]})
        fields = {e.field for e in result.errors}
        self.assertIn("jacks[0].side", fields)
        self.assertIn("jacks[1].position_percent", fields)
        self.assertIn("jacks[1].type", fields)          # duplicate input
        self.assertIn("jacks", fields)                  # no output

    def test_non_positive_dimensions(self):
        bad = dict(GOOD_PEDAL, id="flat", width_inches=0)
        result = parse_catalog({"pedals": [bad]})
        self.assertTrue(any(e.field == "width_inches" for e in result.errors))

    def test_rail_outside_board(self):
        bad = dict(GOOD_BOARD, rails=[{"position_from_back_inches": 9}])
        result = parse_catalog({"boards": [bad]})
        self.assertEqual(len(result.boards), 1)
        self.assertFalse(result.ok)


class TestLoadCatalog(unittest.TestCase):

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "catalog.json"
            path.write_text(json.dumps({"pedals": [GOOD_PEDAL]}), encoding="utf-8")
            result = load_catalog(path)
        self.assertTrue(result.ok)
        self.assertEqual(result.pedals[0].id, "sd1")

    def test_bad_json_is_an_error_not_an_exception(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.json"
            path.write_text("{not json", encoding="utf-8")
            result = load_catalog(path)
        self.assertFalse(result.ok)
        self.assertEqual(result.errors[0].field, "json")

    def test_missing_file(self):
        result = load_catalog("/nonexistent/catalog.json")
        self.assertFalse(result.ok)
        self.assertEqual(result.errors[0].field, "file")


class TestCatalogHelpers(unittest.TestCase):

    def test_catalog_map_accepts_all_forms(self):
        pedals = make_pedals()
        by_result = catalog_map(make_catalog())
        by_list = catalog_map(pedals)
        by_dict = catalog_map({p.id: p for p in pedals})
        self.assertEqual(set(by_result), set(by_list))
        self.assertEqual(set(by_list), set(by_dict))

    def test_lookup_unknown(self):
        with self.assertRaises(UnknownPedalError) as ctx:
            lookup_pedal(place("p1", "nope"), catalog_map(make_catalog()))
        self.assertEqual(ctx.exception.placed_id, "p1")
        self.assertIsInstance(ctx.exception, KeyError)

    def test_chain_order(self):
        pedals = catalog_map(make_catalog())
        self.assertLess(pedals["tuner"].chain_order, pedals["od"].chain_order)
        self.assertLess(pedals["fuzz"].chain_order, pedals["gate"].chain_order)
        self.assertEqual(category_order("theremin"), 100)


class TestSerialization(unittest.TestCase):

    def test_catalog_to_dict_is_json_safe(self):
        d = catalog_to_dict(make_catalog())
        text = json.dumps(d)
        self.assertIn('"fuzz"', text)
        self.assertTrue(d["ok"])
        self.assertEqual(d["pedal_count"], len(make_pedals()))

    def test_placement_round_trip(self):
        p = PlacedPedal("p1", "od", 3.5, 1.0, 90, 2, "effects_loop", False, True)
        self.assertEqual(parse_placed_pedal(placement_to_dict(p)), p)

    def test_placement_defaults(self):
        p = parse_placed_pedal({"id": "p", "pedal_id": "od"})
        self.assertTrue(p.is_active)
        self.assertEqual(p.location, "front_of_amp")


if __name__ == "__main__":
    unittest.main()
