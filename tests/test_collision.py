"""Tests for the collision & bounds engine."""

from __future__ import annotations

import unittest

from pedalschema.catalog.models import Board, Pedal, Rail
from pedalschema.collision import (
    detect_collisions, find_empty_spot, find_out_of_bounds,
    is_valid_placement, snap_to_rail,
)

from tests.board_fixture import make_board, make_catalog, make_pedals, place


BLOCK = Pedal("block", "Block", "overdrive", 4.0, 3.0)
WIDE = Pedal("wide", "Wide", "utility", 8.0, 3.0)
SQUARE = Pedal("square", "Square", "utility", 5.0, 5.0)


def _catalog():
    return make_pedals() + [BLOCK, WIDE, SQUARE]


class TestDetectCollisions(unittest.TestCase):

    def setUp(self):
        self.board = Board("b", "Twelve", 12.0, 12.0)
        self.catalog = _catalog()

    def test_stacked_pedals_overlap(self):
        placed = [place("a", "block", 0, 0), place("b", "block", 0, 0)]
        collisions = detect_collisions(placed, self.catalog, self.board)
        self.assertEqual(len(collisions), 1)
        self.assertEqual(collisions[0].pedal_ids, ("a", "b"))
        self.assertEqual(collisions[0].severity, "overlap")
        self.assertAlmostEqual(collisions[0].overlap_area, 12.0)

    def test_separated_pedals(self):
        placed = [place("a", "block", 0, 0), place("b", "block", 5, 0)]
        self.assertEqual(detect_collisions(placed, self.catalog, self.board), [])

    def test_touching_is_not_a_collision(self):
        placed = [place("a", "block", 0, 0), place("b", "block", 4, 0)]
        self.assertEqual(detect_collisions(placed, self.catalog, self.board), [])

    def test_sliver_is_clearance(self):
        placed = [place("a", "block", 0, 0), place("b", "block", 3.9, 0)]
        collisions = detect_collisions(placed, self.catalog, self.board)
        self.assertEqual(len(collisions), 1)
        self.assertEqual(collisions[0].severity, "clearance")

    def test_threshold_is_configurable(self):
        placed = [place("a", "block", 0, 0), place("b", "block", 3.9, 0)]
        collisions = detect_collisions(placed, self.catalog, self.board,
                                       overlap_threshold=0.1)
        self.assertEqual(collisions[0].severity, "overlap")

    def test_rotation_changes_footprint(self):
        # Rotated, block is 3 wide × 4 deep and clears the neighbour at x=3.5.
        placed = [place("a", "block", 0, 0, rotation_degrees=90),
                  place("b", "block", 3.5, 0)]
        self.assertEqual(detect_collisions(placed, self.catalog, self.board), [])

    def test_inactive_ignored(self):
        placed = [place("a", "block", 0, 0), place("b", "block", 0, 0, is_active=False)]
        self.assertEqual(detect_collisions(placed, self.catalog, self.board), [])

    def test_out_of_bounds(self):
        placed = [place("a", "block", 9, 0), place("b", "block", 0, 0)]
        self.assertEqual(find_out_of_bounds(placed, self.catalog, self.board), ["a"])


class TestIsValidPlacement(unittest.TestCase):

    def setUp(self):
        self.board = Board("b", "Twelve", 12.0, 12.0)
        self.catalog = _catalog()
        self.placed = [place("a", "block", 0, 0)]

    def test_clear_spot(self):
        valid, reason = is_valid_placement(5, 0, BLOCK, 0, self.placed, self.catalog, self.board)
        self.assertTrue(valid)
        self.assertIsNone(reason)

    def test_overlap_reason(self):
        check = is_valid_placement(2, 1, BLOCK, 0, self.placed, self.catalog, self.board)
        self.assertFalse(check)
        self.assertEqual(check.reason, "Overlaps with Block")

    def test_bounds_reason(self):
        check = is_valid_placement(10, 0, BLOCK, 0, self.placed, self.catalog, self.board)
        self.assertEqual(check.reason, "Pedal extends outside board bounds")

    def test_rotated_bounds(self):
        # Rotated 90°, the block is 4 deep and overhangs the front edge.
        self.assertFalse(is_valid_placement(5, 8.5, BLOCK, 90, [], self.catalog, self.board))
        self.assertTrue(is_valid_placement(5, 8.5, BLOCK, 0, [], self.catalog, self.board))

    def test_exclude_self(self):
        self.assertTrue(is_valid_placement(
            1, 0, BLOCK, 0, self.placed, self.catalog, self.board, exclude_id="a"))

    def test_spacing(self):
        self.assertTrue(is_valid_placement(4.2, 0, BLOCK, 0, self.placed, self.catalog, self.board))
        self.assertFalse(is_valid_placement(
            4.2, 0, BLOCK, 0, self.placed, self.catalog, self.board, spacing=0.5))


class TestSnapToRail(unittest.TestCase):

    def setUp(self):
        self.board = make_board()

    def test_snaps_nearby(self):
        self.assertEqual(snap_to_rail(6.8, 5.1, self.board), (6.5, True))
        self.assertEqual(snap_to_rail(0.7, 5.1, self.board), (1.0, True))

    def test_too_far(self):
        self.assertEqual(snap_to_rail(3.0, 5.1, self.board), (3.0, False))

    def test_rail_without_room(self):
        self.assertEqual(snap_to_rail(6.4, 10.0, self.board), (6.4, False))


class TestFindEmptySpot(unittest.TestCase):

    def test_early_chain_position_aims_right(self):
        catalog = make_catalog()
        od = next(p for p in catalog.pedals if p.id == "od")
        placed = [place(f"p{i}", "od", 4.0 * i, 6.5) for i in range(3)]
        spot = find_empty_spot(od, placed, catalog, make_board(), desired_chain_position=1)
        self.assertEqual(spot, (18.0, 1.0))

    def test_inactive_pedals_do_not_shift_target(self):
        catalog = make_catalog()
        od = next(p for p in catalog.pedals if p.id == "od")
        placed = [place("off", "od", 18.0, 6.5, is_active=False)]
        spot = find_empty_spot(od, placed, catalog, make_board(), desired_chain_position=1)
        # Counted alone, position 1 of 1 maps to x = 0.
        self.assertEqual(spot, (0.0, 1.0))

    def test_falls_back_to_full_scan(self):
        board = Board("b", "Ten", 10.0, 10.0, rails=[Rail(0.0)])
        placed = [place("w", "wide", 0, 0)]
        spot = find_empty_spot(BLOCK, placed, _catalog(), board)
        self.assertEqual(spot, (0.0, 3.0))

    def test_full_board(self):
        board = Board("b", "Five", 5.0, 5.0)
        placed = [place("s", "square", 0, 0)]
        self.assertIsNone(find_empty_spot(BLOCK, placed, _catalog(), board))


if __name__ == "__main__":
    unittest.main()
