"""Segment and polyline primitives used by the cable router."""

from __future__ import annotations

import math
from typing import Sequence

from .boxes import Box, Point


_EPS = 1e-9


def _cross2d(o: Point, a: Point, b: Point) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _on_segment(p: Point, q: Point, r: Point) -> bool:
    """Check if point *q* lies on segment *p*–*r* (assuming collinear)."""
    return (
        min(p[0], r[0]) <= q[0] + _EPS
        and q[0] <= max(p[0], r[0]) + _EPS
        and min(p[1], r[1]) <= q[1] + _EPS
        and q[1] <= max(p[1], r[1]) + _EPS
    )


def segments_cross(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """Return True if segments p1–p2 and p3–p4 intersect.

    Segments that share an endpoint are NOT considered crossing; two
    cables meeting at the same jack are not tangled.
    """
    for a in (p1, p2):
        for b in (p3, p4):
            if abs(a[0] - b[0]) < _EPS and abs(a[1] - b[1]) < _EPS:
                return False

    d1 = _cross2d(p3, p4, p1)
    d2 = _cross2d(p3, p4, p2)
    d3 = _cross2d(p1, p2, p3)
    d4 = _cross2d(p1, p2, p4)

    if ((d1 > _EPS and d2 < -_EPS) or (d1 < -_EPS and d2 > _EPS)) and \
       ((d3 > _EPS and d4 < -_EPS) or (d3 < -_EPS and d4 > _EPS)):
        return True

    # Collinear overlaps
    if abs(d1) <= _EPS and _on_segment(p3, p1, p4):
        return True
    if abs(d2) <= _EPS and _on_segment(p3, p2, p4):
        return True
    if abs(d3) <= _EPS and _on_segment(p1, p3, p2):
        return True
    if abs(d4) <= _EPS and _on_segment(p1, p4, p2):
        return True
    return False


def segment_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Point | None:
    """Proper crossing point of two segments, or None.

    Only crossings strictly inside both segments count; touching at an
    endpoint and parallel overlaps return None.
    """
    dx1, dy1 = p2[0] - p1[0], p2[1] - p1[1]
    dx2, dy2 = p4[0] - p3[0], p4[1] - p3[1]
    denom = dx1 * dy2 - dy1 * dx2
    if abs(denom) < _EPS:
        return None
    t = ((p3[0] - p1[0]) * dy2 - (p3[1] - p1[1]) * dx2) / denom
    u = ((p3[0] - p1[0]) * dy1 - (p3[1] - p1[1]) * dx1) / denom
    if _EPS < t < 1 - _EPS and _EPS < u < 1 - _EPS:
        return (p1[0] + t * dx1, p1[1] + t * dy1)
    return None


def line_intersects_box(p1: Point, p2: Point, box: Box, margin: float = 0.0) -> bool:
    """True when segment p1–p2 passes through the interior of *box*.

    The box is first inflated by *margin*.  Running along an edge or
    touching a corner does not count (Liang–Barsky clip on the open box).
    """
    xmin, ymin = box.x - margin, box.y - margin
    xmax, ymax = box.right + margin, box.bottom + margin
    t0, t1 = 0.0, 1.0
    for start, delta, lo, hi in (
        (p1[0], p2[0] - p1[0], xmin, xmax),
        (p1[1], p2[1] - p1[1], ymin, ymax),
    ):
        if abs(delta) < _EPS:
            if not (lo + _EPS < start < hi - _EPS):
                return False
            continue
        ta = (lo - start) / delta
        tb = (hi - start) / delta
        if ta > tb:
            ta, tb = tb, ta
        t0 = max(t0, ta)
        t1 = min(t1, tb)
        if t0 >= t1 - _EPS:
            return False
    return t1 - t0 > _EPS


# ── Polylines ──────────────────────────────────────────────────────


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def path_length(points: Sequence[Point]) -> float:
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))


def point_line_distance(p: Point, a: Point, b: Point) -> float:
    """Perpendicular distance from *p* to the infinite line through a–b."""
    length = distance(a, b)
    if length < _EPS:
        return distance(p, a)
    return abs(_cross2d(a, b, p)) / length


def same_point(a: Point, b: Point, eps: float = 1e-6) -> bool:
    return abs(a[0] - b[0]) < eps and abs(a[1] - b[1]) < eps
