"""The strategy ladder — cheap shapes first, grid search, then fallbacks.

Each strategy takes the two standoff points and the cable's obstacle
view and returns a candidate polyline or None.  Candidates are
validated against the obstacles before they are returned.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pedalschema.geometry import Box, Point, distance, envelope, path_length

from .grid import RoutingGrid
from .obstacles import Obstacles
from .pathfinder import find_path
from .postprocess import collapse_collinear
from .models import RouterConfig


log = logging.getLogger(__name__)


def _first_clear(
    candidates: Iterable[list[Point]],
    obstacles: Obstacles,
    margin: float | None = None,
) -> list[Point] | None:
    for cand in candidates:
        if obstacles.path_clear(cand, margin):
            return cand
    return None


def _shortest_clear(
    candidates: Iterable[list[Point]],
    obstacles: Obstacles,
    margin: float | None = None,
) -> list[Point] | None:
    valid = [c for c in candidates if obstacles.path_clear(c, margin)]
    if not valid:
        return None
    return min(valid, key=path_length)


# ── 1. Direct ──────────────────────────────────────────────────────


def try_direct(start: Point, end: Point, obstacles: Obstacles, cfg: RouterConfig) -> list[Point] | None:
    """A straight segment, only when short or nearly axis-aligned."""
    dx = abs(end[0] - start[0])
    dy = abs(end[1] - start[1])
    if distance(start, end) >= cfg.direct_max_in and dx >= cfg.axis_tolerance_in \
            and dy >= cfg.axis_tolerance_in:
        return None
    return _first_clear([[start, end]], obstacles)


# ── 2. L-path ──────────────────────────────────────────────────────


def l_candidates(start: Point, end: Point) -> list[list[Point]]:
    return [
        [start, (end[0], start[1]), end],       # horizontal first
        [start, (start[0], end[1]), end],       # vertical first
    ]


def try_l_path(start: Point, end: Point, obstacles: Obstacles, margin: float | None = None) -> list[Point] | None:
    return _first_clear(l_candidates(start, end), obstacles, margin)


# ── 3. Channels ────────────────────────────────────────────────────


def channel_rows(boxes: list[Box], margin: float) -> list[float]:
    """Y values of free horizontal channels between and around obstacle rows.

    Inflated y-intervals are merged; the midpoint of each gap between
    merged intervals is a channel, as are lines just above and below
    the whole envelope.
    """
    if not boxes:
        return []
    intervals = sorted((b.y - margin, b.bottom + margin) for b in boxes)
    merged: list[list[float]] = [list(intervals[0])]
    for lo, hi in intervals[1:]:
        if lo <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], hi)
        else:
            merged.append([lo, hi])

    rows = [(merged[i][1] + merged[i + 1][0]) / 2 for i in range(len(merged) - 1)]
    rows.append(merged[0][0] - margin)       # above everything
    rows.append(merged[-1][1] + margin)      # below everything
    return rows


def channel_candidates(start: Point, end: Point, rows: list[float]) -> list[list[Point]]:
    mid_y = (start[1] + end[1]) / 2
    return [
        [start, (start[0], y), (end[0], y), end]
        for y in sorted(rows, key=lambda y: abs(y - mid_y))
    ]


def try_channel(start: Point, end: Point, obstacles: Obstacles, cfg: RouterConfig,
                margin: float | None = None) -> list[Point] | None:
    rows = channel_rows(list(obstacles.boxes), obstacles.margin)
    return _first_clear(channel_candidates(start, end, rows), obstacles, margin)


# ── 4. Grid A* ─────────────────────────────────────────────────────


def try_astar(start: Point, end: Point, obstacles: Obstacles, cfg: RouterConfig) -> list[Point] | None:
    """Full grid search over a padded region.

    Non-excluded boxes are blocked with the obstacle margin, terminal
    boxes without it.  The result is accepted only if it clears every
    box without margin, since grid cells approximate the inflated edges.
    """
    xs = [start[0], end[0]]
    ys = [start[1], end[1]]
    env = envelope(obstacles.boxes)
    if env is not None:
        xs += [env.x, env.right]
        ys += [env.y, env.bottom]
    region = Box(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
    region = region.inflate(cfg.search_padding_in)

    grid = RoutingGrid(region, cfg.grid_cell_in)
    for i, b in enumerate(obstacles.boxes):
        if i not in obstacles.excluded:
            grid.block_box(b, obstacles.margin)
        elif i in obstacles.terminals:
            grid.block_box(b)

    src = grid.nearest_free(*grid.world_to_grid(*start), cfg.max_snap_radius)
    dst = grid.nearest_free(*grid.world_to_grid(*end), cfg.max_snap_radius)
    if src is None or dst is None:
        return None

    cells = find_path(grid, src, dst, turn_penalty=cfg.turn_penalty,
                      max_iterations=cfg.max_iterations)
    if cells is None:
        return None

    points = collapse_collinear([start] + [grid.grid_to_world(gx, gy) for gx, gy in cells] + [end])
    if not obstacles.path_clear(points, 0.0):
        return None
    return points


# ── 5. Perimeter ───────────────────────────────────────────────────


def perimeter_candidates(start: Point, end: Point, env: Box, margin: float) -> list[list[Point]]:
    top = env.y - margin
    bottom = env.bottom + margin
    left = env.x - margin
    right = env.right + margin
    return [
        [start, (start[0], top), (end[0], top), end],
        [start, (start[0], bottom), (end[0], bottom), end],
        [start, (left, start[1]), (left, end[1]), end],
        [start, (right, start[1]), (right, end[1]), end],
        [start, (start[0], top), (left, top), (left, end[1]), end],
        [start, (start[0], top), (right, top), (right, end[1]), end],
        [start, (start[0], bottom), (left, bottom), (left, end[1]), end],
        [start, (start[0], bottom), (right, bottom), (right, end[1]), end],
    ]


def try_perimeter(start: Point, end: Point, obstacles: Obstacles, cfg: RouterConfig,
                  margin: float | None = None) -> list[Point] | None:
    env = envelope(obstacles.boxes)
    if env is None:
        return None
    return _shortest_clear(
        perimeter_candidates(start, end, env, cfg.perimeter_margin_in), obstacles, margin)


# ── 6. Emergency ───────────────────────────────────────────────────


def emergency_route(start: Point, end: Point, obstacles: Obstacles, cfg: RouterConfig) -> list[Point]:
    """Far outside everything.  Always returns a path; the caller flags it."""
    env = envelope(obstacles.boxes)
    top = min(start[1], end[1]) if env is None else env.y
    y = top - cfg.perimeter_margin_in - cfg.emergency_offset_in
    return [start, (start[0], y), (end[0], y), end]


# ── Ladder ─────────────────────────────────────────────────────────


def route_between(
    start: Point,
    end: Point,
    obstacles: Obstacles,
    cfg: RouterConfig,
) -> tuple[list[Point], str, float]:
    """Run the ladder between two standoff points.

    Returns ``(points, strategy, margin)`` where *margin* is the
    clearance the accepted path was validated at; later simplification
    must hold to the same margin.
    """
    m = obstacles.margin

    path = try_direct(start, end, obstacles, cfg)
    if path is not None:
        return path, "direct", m
    path = try_l_path(start, end, obstacles)
    if path is not None:
        return path, "l_path", m
    path = try_channel(start, end, obstacles, cfg)
    if path is not None:
        return path, "channel", m
    path = try_astar(start, end, obstacles, cfg)
    if path is not None:
        return path, "astar", 0.0
    path = try_perimeter(start, end, obstacles, cfg)
    if path is not None:
        return path, "perimeter", m

    # Tight pass: standoffs squeezed between close pedals can sit inside
    # a neighbour's margin, so retry the shaped routes against bare boxes.
    path = try_l_path(start, end, obstacles, 0.0)
    if path is not None:
        return path, "l_path", 0.0
    path = try_channel(start, end, obstacles, cfg, 0.0)
    if path is not None:
        return path, "channel", 0.0
    path = try_perimeter(start, end, obstacles, cfg, 0.0)
    if path is not None:
        return path, "perimeter", 0.0

    log.warning("Router: every strategy failed between (%.2f, %.2f) and (%.2f, %.2f); "
                "using emergency route", start[0], start[1], end[0], end[1])
    return emergency_route(start, end, obstacles, cfg), "emergency", 0.0
