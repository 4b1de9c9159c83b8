"""Obstacle bookkeeping for one cable: which boxes it may touch, and how closely."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from pedalschema.geometry import Box, Point, line_intersects_box


@dataclass
class Obstacles:
    """Pedal boxes as seen by a single cable.

    *terminals* are the boxes the cable starts or ends on.  *excluded*
    holds those plus every box transitively overlapping them.  Excluded
    boxes are never obstacles, except that the terminal boxes themselves
    must not be cut through (without margin) by the interior of a route.
    """

    boxes: Sequence[Box]
    excluded: set[int] = field(default_factory=set)
    terminals: set[int] = field(default_factory=set)
    margin: float = 0.0

    def blockers(self) -> list[Box]:
        return [b for i, b in enumerate(self.boxes) if i not in self.excluded]

    def segment_clear(self, p1: Point, p2: Point, margin: float | None = None) -> bool:
        m = self.margin if margin is None else margin
        for i, b in enumerate(self.boxes):
            if i in self.excluded:
                if i in self.terminals and line_intersects_box(p1, p2, b):
                    return False
            elif line_intersects_box(p1, p2, b, m):
                return False
        return True

    def path_clear(self, points: Sequence[Point], margin: float | None = None) -> bool:
        return all(self.segment_clear(points[i], points[i + 1], margin)
                   for i in range(len(points) - 1))


def find_path_defects(
    points: Sequence[Point],
    boxes: Sequence[Box],
    excluded: set[int],
    terminals: set[int],
) -> list[tuple[int, int]]:
    """Re-walk a finished path; return ``(segment, box)`` index pairs that cross.

    Every segment is checked against every non-excluded box.  Interior
    segments (all but the first and last) are also checked against the
    terminal boxes.
    """
    defects: list[tuple[int, int]] = []
    n_seg = len(points) - 1
    for k in range(n_seg):
        p1, p2 = points[k], points[k + 1]
        interior = 0 < k < n_seg - 1
        for i, b in enumerate(boxes):
            if i in excluded and not (interior and i in terminals):
                continue
            if line_intersects_box(p1, p2, b):
                defects.append((k, i))
    return defects
