"""Tests for the signal chain engine.

Covers the default category ordering, each built-in rule, zoning under
the effects-loop and 4-cable contexts, chain contiguity, idempotence
and the warning / suggestion diagnostics.
"""

from __future__ import annotations

import unittest
from collections import defaultdict

from pedalschema.catalog.models import Pedal, UnknownPedalError, catalog_map
from pedalschema.chain import (
    ChainContext, compute_signal_chain, detect_warnings,
    provisional_chain_position, applicable_rules,
)

from tests.board_fixture import make_catalog, make_pedals, place


LOOP = ChainContext(amp_has_effects_loop=True, use_effects_loop=True)
FOUR_CABLE = ChainContext(amp_has_effects_loop=True, use_effects_loop=True,
                          use_4_cable_method=True)


def _ids(pedals) -> list[str]:
    return [p.id for p in pedals]


def _assert_contiguous(test: unittest.TestCase, ordered) -> None:
    by_zone: dict[str, list[int]] = defaultdict(list)
    for p in ordered:
        by_zone[p.location].append(p.chain_position)
    for zone, positions in by_zone.items():
        test.assertEqual(positions, list(range(1, len(positions) + 1)), zone)


class TestOrdering(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_gate_lands_after_later_distortion(self):
        placed = [place("g", "gate"), place("d1", "dist"), place("d2", "dist")]
        result = compute_signal_chain(placed, self.catalog, ChainContext())
        order = _ids(result.ordered_pedals)
        self.assertEqual(order.index("g"), order.index("d2") + 1)
        by_id = {p.id: p for p in result.ordered_pedals}
        self.assertEqual(by_id["g"].chain_position, by_id["d2"].chain_position + 1)

    def test_gate_moves_behind_overridden_drive(self):
        late_boost = Pedal("late_boost", "Late Boost", "boost", 2.9, 5.1,
                           default_chain_position=95)
        catalog = make_pedals() + [late_boost]
        placed = [place("g", "gate"), place("b", "late_boost"), place("t", "tuner")]
        result = compute_signal_chain(placed, catalog, ChainContext())
        self.assertEqual(_ids(result.ordered_pedals), ["t", "b", "g"])

    def test_full_board(self):
        placed = [
            place("g", "gate"), place("d1", "dist"), place("d2", "dist"),
            place("t", "tuner"), place("o", "od"), place("dl", "delay"),
            place("lp", "looper"), place("v", "volume"),
        ]
        result = compute_signal_chain(placed, self.catalog, ChainContext())
        self.assertEqual(_ids(result.ordered_pedals),
                         ["t", "o", "d1", "d2", "g", "dl", "v", "lp"])
        self.assertTrue(all(p.location == "front_of_amp" for p in result.ordered_pedals))
        _assert_contiguous(self, result.ordered_pedals)

    def test_direct_pickup_fuzz_goes_first(self):
        placed = [place("o", "od"), place("t", "tuner"), place("f", "fuzz")]
        result = compute_signal_chain(placed, self.catalog, ChainContext())
        self.assertEqual(_ids(result.ordered_pedals), ["f", "t", "o"])
        self.assertFalse(any(w.type == "tone" for w in result.warnings))

    def test_volume_before_looper(self):
        placed = [place("lp", "looper"), place("v", "volume"), place("r", "reverb")]
        result = compute_signal_chain(placed, self.catalog, ChainContext())
        self.assertEqual(_ids(result.ordered_pedals), ["r", "v", "lp"])

    def test_inputs_not_modified(self):
        placed = [place("d", "dist", chain_position=7), place("t", "tuner", chain_position=9)]
        compute_signal_chain(placed, self.catalog, ChainContext())
        self.assertEqual([p.chain_position for p in placed], [7, 9])

    def test_inactive_pedals_still_ordered(self):
        placed = [place("o", "od"), place("t", "tuner", is_active=False)]
        result = compute_signal_chain(placed, self.catalog, ChainContext())
        self.assertEqual(_ids(result.ordered_pedals), ["t", "o"])
        self.assertFalse(result.ordered_pedals[0].is_active)

    def test_unknown_pedal(self):
        with self.assertRaises(UnknownPedalError):
            compute_signal_chain([place("x", "mystery")], self.catalog, ChainContext())

    def test_empty(self):
        result = compute_signal_chain([], self.catalog, ChainContext())
        self.assertEqual(result.ordered_pedals, [])


class TestZones(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_time_effects_move_to_loop(self):
        placed = [place("dl", "delay"), place("c", "chorus"),
                  place("r", "reverb"), place("o", "od")]
        result = compute_signal_chain(placed, self.catalog, LOOP)
        self.assertEqual(_ids(result.zone("front_of_amp")), ["o", "c"])
        self.assertEqual(_ids(result.zone("effects_loop")), ["dl", "r"])
        _assert_contiguous(self, result.ordered_pedals)

    def test_modulation_in_loop_when_asked(self):
        ctx = ChainContext(amp_has_effects_loop=True, use_effects_loop=True,
                           modulation_in_loop=True)
        placed = [place("c", "chorus"), place("o", "od")]
        result = compute_signal_chain(placed, self.catalog, ctx)
        self.assertEqual(_ids(result.zone("effects_loop")), ["c"])

    def test_loop_disabled_keeps_everything_in_front(self):
        ctx = ChainContext(amp_has_effects_loop=True, use_effects_loop=False)
        placed = [place("dl", "delay"), place("o", "od")]
        result = compute_signal_chain(placed, self.catalog, ctx)
        self.assertTrue(all(p.location == "front_of_amp" for p in result.ordered_pedals))
        self.assertTrue(any("effects loop" in s.message for s in result.suggestions))

    def test_four_cable_hub(self):
        placed = [place("dl", "delay"), place("g", "gate"), place("o", "od")]
        result = compute_signal_chain(placed, self.catalog, FOUR_CABLE)
        self.assertEqual(_ids(result.ordered_pedals), ["o", "g", "dl"])
        self.assertEqual([p.location for p in result.ordered_pedals],
                         ["front_of_amp", "four_cable_hub", "effects_loop"])
        self.assertTrue(all(p.chain_position == 1 for p in result.ordered_pedals))

    def test_idempotent(self):
        placed = [
            place("g", "gate"), place("f", "fuzz"), place("t", "tuner"),
            place("dl", "delay"), place("lp", "looper"), place("v", "volume"),
            place("c", "chorus"), place("o", "od"), place("r", "reverb"),
        ]
        for ctx in (ChainContext(), LOOP, FOUR_CABLE):
            first = compute_signal_chain(placed, self.catalog, ctx)
            second = compute_signal_chain(first.ordered_pedals, self.catalog, ctx)
            self.assertEqual(first.ordered_pedals, second.ordered_pedals)
            _assert_contiguous(self, first.ordered_pedals)


class TestDiagnostics(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()
        self.pedals = catalog_map(self.catalog)

    def test_noise_warning_without_gate(self):
        placed = [place("d", "dist"), place("dl", "delay")]
        result = compute_signal_chain(placed, self.catalog, ChainContext())
        noise = [w for w in result.warnings if w.type == "noise"]
        self.assertEqual(len(noise), 1)
        self.assertEqual(noise[0].pedal_ids, ["d"])
        self.assertTrue(any(s.type == "optimization" for s in result.suggestions))

    def test_no_noise_warning_with_gate(self):
        placed = [place("d", "dist"), place("dl", "delay"), place("g", "gate")]
        result = compute_signal_chain(placed, self.catalog, ChainContext())
        self.assertFalse(any(w.type == "noise" for w in result.warnings))

    def test_fuzz_after_buffered_tuner(self):
        ordered = [place("t", "tuner"), place("f", "fuzz")]
        warnings = detect_warnings(ordered, self.pedals)
        tone = [w for w in warnings if w.type == "tone"]
        self.assertEqual(tone[0].pedal_ids, ["f"])
        self.assertEqual(tone[0].severity, "warning")

    def test_compressor_after_distortion(self):
        warnings = detect_warnings([place("d", "dist"), place("c", "comp")], self.pedals)
        self.assertTrue(any("Compressor" in w.message for w in warnings))

    def test_four_cable_suggestion(self):
        ctx = ChainContext(amp_has_effects_loop=True)
        result = compute_signal_chain([place("g", "gate")], self.catalog, ctx)
        self.assertTrue(any("4-cable" in s.message for s in result.suggestions))

    def test_buffer_suggestion(self):
        needy = Pedal("needy", "Needy", "filter", 3, 5, needs_buffer_before=True)
        result = compute_signal_chain([place("n", "needy")], make_pedals() + [needy],
                                      ChainContext())
        self.assertTrue(any(s.type == "buffer" for s in result.suggestions))


class TestHostHelpers(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()
        self.pedals = catalog_map(self.catalog)

    def test_provisional_position(self):
        existing = [
            place("t", "tuner", chain_position=1),
            place("c", "comp", chain_position=2),
            place("dl", "delay", chain_position=3),
        ]
        self.assertEqual(
            provisional_chain_position(self.pedals["od"], existing, self.catalog), 3)
        self.assertEqual(
            provisional_chain_position(self.pedals["tuner"], [], self.catalog), 1)

    def test_applicable_rules(self):
        gate = self.pedals["gate"]
        self.assertEqual(applicable_rules(gate, ChainContext()), ["noise-gate-after-drive"])
        self.assertEqual(applicable_rules(gate, FOUR_CABLE),
                         ["four-cable-hub", "noise-gate-after-drive"])
        self.assertEqual(applicable_rules(self.pedals["volume"], ChainContext()), ["volume-end"])
        self.assertEqual(applicable_rules(self.pedals["delay"], LOOP), ["time-effects-in-loop"])


if __name__ == "__main__":
    unittest.main()
