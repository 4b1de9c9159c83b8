"""Path clean-up — collinear collapse and validated zigzag removal."""

from __future__ import annotations

from typing import Callable, Sequence

from pedalschema.geometry import Point, point_line_distance, same_point


def collapse_collinear(points: Sequence[Point]) -> list[Point]:
    """Drop duplicate points and points lying on a straight run.

    The first and last points are always kept exactly.
    """
    out: list[Point] = []
    for p in points:
        if out and same_point(out[-1], p):
            continue
        out.append(p)
    if len(out) <= 2:
        if len(out) == 1 and len(points) >= 2:
            return [points[0], points[-1]]
        return out

    kept = [out[0]]
    for i in range(1, len(out) - 1):
        a, b, c = kept[-1], out[i], out[i + 1]
        cross = (b[0] - a[0]) * (c[1] - b[1]) - (b[1] - a[1]) * (c[0] - b[0])
        dot = (b[0] - a[0]) * (c[0] - b[0]) + (b[1] - a[1]) * (c[1] - b[1])
        if abs(cross) < 1e-9 and dot >= 0:
            continue
        kept.append(b)
    kept.append(out[-1])
    return kept


def smooth_zigzags(
    points: Sequence[Point],
    threshold: float,
    segment_ok: Callable[[Point, Point], bool],
) -> list[Point]:
    """Remove waypoints that barely deviate from their neighbours' line.

    A waypoint is dropped only if it lies within *threshold* of the line
    through its neighbours and the shortcut segment passes *segment_ok*.
    """
    pts = list(points)
    changed = True
    while changed and len(pts) > 2:
        changed = False
        for i in range(1, len(pts) - 1):
            if point_line_distance(pts[i], pts[i - 1], pts[i + 1]) > threshold:
                continue
            if not segment_ok(pts[i - 1], pts[i + 1]):
                continue
            del pts[i]
            changed = True
            break
    return pts
