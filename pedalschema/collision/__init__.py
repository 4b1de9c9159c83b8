"""Collision & bounds — overlap detection, validity gate, drop-spot search."""

from .models import Collision, PlacementCheck
from .engine import (
    detect_collisions, find_out_of_bounds, is_within_bounds,
    is_valid_placement, snap_to_rail, find_empty_spot,
)

__all__ = [
    "Collision", "PlacementCheck",
    "detect_collisions", "find_out_of_bounds", "is_within_bounds",
    "is_valid_placement", "snap_to_rail", "find_empty_spot",
]
