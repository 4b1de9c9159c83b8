"""Tests for the box and segment primitives."""

from __future__ import annotations

import unittest

from pedalschema.catalog.models import Pedal
from pedalschema.geometry import (
    Box, box_inside, envelope, expand_exclusion_set, footprint_dims,
    line_intersects_box, normalize_rotation, path_length, pedal_box,
    segment_intersection, segments_cross,
)

from tests.board_fixture import place


class TestBox(unittest.TestCase):

    def test_touching_boxes_do_not_overlap(self):
        a = Box(0, 0, 4, 3)
        b = Box(4, 0, 4, 3)
        self.assertFalse(a.overlaps(b))
        self.assertEqual(a.gap(b), 0)
        self.assertTrue(a.overlaps(b, spacing=0.5))

    def test_gap_is_chebyshev(self):
        a = Box(0, 0, 2, 2)
        b = Box(5, 3, 2, 2)
        self.assertAlmostEqual(a.gap(b), 3.0)
        self.assertLess(a.gap(Box(1, 1, 2, 2)), 0)

    def test_intersection_area(self):
        a = Box(0, 0, 4, 3)
        self.assertAlmostEqual(a.intersection_area(Box(2, 1, 4, 3)), 4.0)
        self.assertEqual(a.intersection_area(Box(10, 10, 1, 1)), 0.0)

    def test_box_inside(self):
        board = Box(0, 0, 10, 10)
        self.assertTrue(box_inside(Box(0, 0, 10, 10), board))
        self.assertFalse(box_inside(Box(8, 0, 3, 1), board))

    def test_envelope(self):
        env = envelope([Box(1, 1, 1, 1), Box(5, 2, 2, 3)])
        self.assertEqual((env.x, env.y, env.right, env.bottom), (1, 1, 7, 5))
        self.assertIsNone(envelope([]))


class TestFootprint(unittest.TestCase):

    def setUp(self):
        self.pedal = Pedal("p", "P", "overdrive", 3.0, 5.0)

    def test_rotation_swaps_dims(self):
        self.assertEqual(footprint_dims(self.pedal, 0), (3.0, 5.0))
        self.assertEqual(footprint_dims(self.pedal, 90), (5.0, 3.0))
        self.assertEqual(footprint_dims(self.pedal, 270), (5.0, 3.0))
        self.assertEqual(footprint_dims(self.pedal, 180), (3.0, 5.0))

    def test_bad_rotation(self):
        with self.assertRaises(ValueError):
            footprint_dims(self.pedal, 45)
        with self.assertRaises(ValueError):
            normalize_rotation(30)
        self.assertEqual(normalize_rotation(-90), 270)

    def test_pedal_box(self):
        b = pedal_box(place("a", "p", 2, 1, rotation_degrees=90), self.pedal)
        self.assertEqual((b.x, b.y, b.width, b.height), (2, 1, 5.0, 3.0))


class TestSegments(unittest.TestCase):

    def test_cross(self):
        self.assertTrue(segments_cross((0, 0), (2, 2), (0, 2), (2, 0)))
        self.assertFalse(segments_cross((0, 0), (1, 0), (0, 1), (1, 1)))

    def test_shared_endpoint_is_not_a_crossing(self):
        self.assertFalse(segments_cross((0, 0), (1, 1), (1, 1), (2, 0)))

    def test_intersection_point(self):
        pt = segment_intersection((0, 0), (2, 2), (0, 2), (2, 0))
        self.assertAlmostEqual(pt[0], 1.0)
        self.assertAlmostEqual(pt[1], 1.0)
        self.assertIsNone(segment_intersection((0, 0), (1, 0), (0, 1), (1, 1)))

    def test_line_through_box(self):
        box = Box(2, 2, 2, 2)
        self.assertTrue(line_intersects_box((0, 3), (6, 3), box))
        self.assertFalse(line_intersects_box((0, 0), (6, 0), box))

    def test_edge_and_corner_contact_is_clear(self):
        box = Box(2, 2, 2, 2)
        self.assertFalse(line_intersects_box((0, 2), (6, 2), box))
        self.assertFalse(line_intersects_box((0, 6), (6, 0), Box(2, 2, 1, 1)))
        self.assertFalse(line_intersects_box((1, 4), (5, 0), Box(3, 2, 2, 2)))

    def test_margin_inflates(self):
        box = Box(2, 2, 2, 2)
        self.assertFalse(line_intersects_box((0, 1.5), (6, 1.5), box))
        self.assertTrue(line_intersects_box((0, 1.5), (6, 1.5), box, margin=1.0))

    def test_path_length(self):
        self.assertAlmostEqual(path_length([(0, 0), (3, 0), (3, 4)]), 7.0)
        self.assertEqual(path_length([(1, 1)]), 0)


class TestExclusionSet(unittest.TestCase):

    def test_transitive_overlap(self):
        boxes = [
            Box(0, 0, 2, 2),
            Box(1.5, 0, 2, 2),     # overlaps 0
            Box(3.5, 0, 2, 2),     # touches 1
            Box(10, 0, 2, 2),      # separate
        ]
        self.assertEqual(expand_exclusion_set(boxes, [0]), {0, 1, 2})
        self.assertEqual(expand_exclusion_set(boxes, [3]), {3})

    def test_invalid_seed_ignored(self):
        self.assertEqual(expand_exclusion_set([Box(0, 0, 1, 1)], [-1, 5]), set())


if __name__ == "__main__":
    unittest.main()
