"""Geometry library — box and segment primitives shared by every stage."""

from .boxes import (
    Point, Box,
    footprint_dims, pedal_box, normalize_rotation,
    board_box, box_inside, envelope, point_in_any_box,
    expand_exclusion_set,
)
from .segments import (
    segments_cross, segment_intersection, line_intersects_box,
    distance, path_length, point_line_distance, same_point,
)

__all__ = [
    "Point", "Box",
    "footprint_dims", "pedal_box", "normalize_rotation",
    "board_box", "box_inside", "envelope", "point_in_any_box",
    "expand_exclusion_set",
    "segments_cross", "segment_intersection", "line_intersects_box",
    "distance", "path_length", "point_line_distance", "same_point",
]
