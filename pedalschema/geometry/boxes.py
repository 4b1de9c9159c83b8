"""
Axis-aligned box primitives.

All coordinates in inches, origin at the board's back-left corner,
X to the right, Y toward the player.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from shapely.geometry import box as shapely_box
from shapely.ops import unary_union

from pedalschema.catalog.models import Pedal, PlacedPedal, VALID_ROTATIONS

Point = tuple[float, float]


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def inflate(self, margin: float) -> Box:
        return Box(self.x - margin, self.y - margin,
                   self.width + 2 * margin, self.height + 2 * margin)

    def overlaps(self, other: Box, spacing: float = 0.0) -> bool:
        """Strict interval overlap, optionally requiring *spacing* between edges."""
        return (
            self.x < other.right + spacing
            and self.right + spacing > other.x
            and self.y < other.bottom + spacing
            and self.bottom + spacing > other.y
        )

    def gap(self, other: Box) -> float:
        """Chebyshev gap between the two boxes' edges.

        Negative values mean overlap, zero means touching.
        """
        gap_x = max(other.x - self.right, self.x - other.right)
        gap_y = max(other.y - self.bottom, self.y - other.bottom)
        return max(gap_x, gap_y)

    def contains_point(self, p: Point, *, strict: bool = True) -> bool:
        if strict:
            return self.x < p[0] < self.right and self.y < p[1] < self.bottom
        return self.x <= p[0] <= self.right and self.y <= p[1] <= self.bottom

    def to_shapely(self):
        return shapely_box(self.x, self.y, self.right, self.bottom)

    def intersection_area(self, other: Box) -> float:
        if not self.overlaps(other):
            return 0.0
        return self.to_shapely().intersection(other.to_shapely()).area


# ── Pedal footprints ───────────────────────────────────────────────


def footprint_dims(pedal: Pedal, rotation_deg: int) -> tuple[float, float]:
    """Effective (width, depth) of a pedal at a 90°-step rotation."""
    if rotation_deg % 90 != 0:
        raise ValueError(f"Rotation must be a multiple of 90°, got {rotation_deg}")
    if rotation_deg % 360 in (90, 270):
        return (pedal.depth_inches, pedal.width_inches)
    return (pedal.width_inches, pedal.depth_inches)


def pedal_box(placed: PlacedPedal, pedal: Pedal) -> Box:
    """Rotation-adjusted bounding box of a placed pedal."""
    w, d = footprint_dims(pedal, placed.rotation_degrees)
    return Box(placed.x_inches, placed.y_inches, w, d)


def normalize_rotation(rotation_deg: int) -> int:
    rot = rotation_deg % 360
    if rot not in VALID_ROTATIONS:
        raise ValueError(f"Rotation must be a multiple of 90°, got {rotation_deg}")
    return rot


# ── Board containment ──────────────────────────────────────────────


def board_box(width: float, depth: float) -> Box:
    return Box(0.0, 0.0, width, depth)


def box_inside(inner: Box, outer: Box, eps: float = 1e-9) -> bool:
    """True when *inner* lies within *outer* (edges may coincide)."""
    return outer.inflate(eps).to_shapely().covers(inner.to_shapely())


def envelope(boxes: Iterable[Box]) -> Box | None:
    """Bounding box of a set of boxes, or None when empty."""
    shapes = [b.to_shapely() for b in boxes]
    if not shapes:
        return None
    xmin, ymin, xmax, ymax = unary_union(shapes).bounds
    return Box(xmin, ymin, xmax - xmin, ymax - ymin)


def point_in_any_box(p: Point, boxes: Sequence[Box], margin: float = 0.0,
                     exclude: Iterable[int] = ()) -> bool:
    skip = set(exclude)
    for i, b in enumerate(boxes):
        if i in skip:
            continue
        if b.inflate(margin).contains_point(p):
            return True
    return False


# ── Exclusion sets ─────────────────────────────────────────────────


def expand_exclusion_set(boxes: Sequence[Box], seeds: Iterable[int]) -> set[int]:
    """Close a set of box indices under overlap.

    Starting from *seeds*, any box that overlaps or touches a box already
    in the set joins it, transitively.  Cables terminating on a seed box
    may pass through the whole resulting cluster.
    """
    excluded = {i for i in seeds if 0 <= i < len(boxes)}
    frontier = list(excluded)
    while frontier:
        cur = boxes[frontier.pop()]
        for j, other in enumerate(boxes):
            if j in excluded:
                continue
            if cur.gap(other) <= 0:
                excluded.add(j)
                frontier.append(j)
    return excluded
