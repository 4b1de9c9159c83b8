"""Collision & bounds engine — overlap detection and free-spot search."""

from __future__ import annotations

import logging
from typing import Sequence

from pedalschema.catalog.models import (
    Board, Pedal, PlacedPedal, CatalogLike, catalog_map, lookup_pedal,
)
from pedalschema.config import BOARD_RULES
from pedalschema.geometry import Box, board_box, box_inside, footprint_dims, pedal_box

from .models import Collision, PlacementCheck


log = logging.getLogger(__name__)

SEARCH_STEP_IN = 0.5
OVERLAP_AREA_THRESHOLD = BOARD_RULES.overlap_area_threshold
RAIL_SNAP_IN = BOARD_RULES.rail_snap_in


def _scan(limit: float, step: float) -> list[float]:
    """Positions 0, step, 2·step, … up to *limit* inclusive."""
    if limit < 0:
        return []
    n = int(limit / step + 1e-9)
    return [i * step for i in range(n + 1)]


def detect_collisions(
    placements: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board | None = None,
    *,
    overlap_threshold: float = OVERLAP_AREA_THRESHOLD,
) -> list[Collision]:
    """Report every pair of active placements whose boxes overlap.

    *board* is accepted for symmetry with the other entry points; bounds
    problems are reported separately by :func:`find_out_of_bounds`.
    """
    pedals = catalog_map(catalog)
    active = [p for p in placements if p.is_active]
    boxes = [pedal_box(p, lookup_pedal(p, pedals)) for p in active]

    collisions: list[Collision] = []
    for i in range(len(active)):
        for j in range(i + 1, len(active)):
            if not boxes[i].overlaps(boxes[j]):
                continue
            area = boxes[i].intersection_area(boxes[j])
            severity = "overlap" if area > overlap_threshold else "clearance"
            collisions.append(Collision(
                pedal_ids=(active[i].id, active[j].id),
                severity=severity,
                overlap_area=area,
            ))

    if collisions:
        log.debug("Collisions: %d (%d overlap)", len(collisions),
                  sum(1 for c in collisions if c.severity == "overlap"))
    return collisions


def is_within_bounds(box: Box, board: Board) -> bool:
    return box_inside(box, board_box(board.width_inches, board.depth_inches))


def find_out_of_bounds(
    placements: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board,
) -> list[str]:
    """Ids of active placements that extend past the board edges."""
    pedals = catalog_map(catalog)
    return [
        p.id for p in placements
        if p.is_active and not is_within_bounds(pedal_box(p, lookup_pedal(p, pedals)), board)
    ]


def is_valid_placement(
    x: float,
    y: float,
    pedal: Pedal,
    rotation: int,
    placements: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board,
    exclude_id: str | None = None,
    *,
    spacing: float = 0.0,
) -> PlacementCheck:
    """Fast gate: is *pedal* at (x, y) inside the board and clear of others?

    *spacing* additionally requires that gap between edges.
    """
    pedals = catalog_map(catalog)
    w, d = footprint_dims(pedal, rotation)
    candidate = Box(x, y, w, d)

    if not is_within_bounds(candidate, board):
        return PlacementCheck(False, "Pedal extends outside board bounds")

    for placed in placements:
        if placed.id == exclude_id or not placed.is_active:
            continue
        other = pedals.get(placed.pedal_id)
        if other is None:
            continue
        if candidate.overlaps(pedal_box(placed, other), spacing):
            return PlacementCheck(False, f"Overlaps with {other.name}")

    return PlacementCheck(True)


def snap_to_rail(
    y: float,
    pedal_depth: float,
    board: Board,
    threshold: float = RAIL_SNAP_IN,
) -> tuple[float, bool]:
    """Snap a dropped y to the nearest rail within *threshold*.

    Returns ``(y, snapped)``.  A rail is only used when the pedal still
    fits on the board from there.
    """
    best: float | None = None
    for rail in board.sorted_rails():
        ry = rail.position_from_back_inches
        if abs(y - ry) >= threshold or ry + pedal_depth > board.depth_inches + 1e-9:
            continue
        if best is None or abs(y - ry) < abs(y - best):
            best = ry
    if best is None:
        return (y, False)
    return (best, True)


def find_empty_spot(
    pedal: Pedal,
    placed_pedals: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board,
    desired_chain_position: int | None = None,
    *,
    step: float = SEARCH_STEP_IN,
) -> tuple[float, float] | None:
    """Find a free spot for a newly dropped pedal, or None.

    Signal enters from the right edge (guitar side), so earlier chain
    positions aim further right.  Rail rows are preferred; the whole
    board is scanned only when no rail has room.
    """
    pedals = catalog_map(catalog)
    total = sum(1 for p in placed_pedals if p.is_active) + 1
    chain_pos = desired_chain_position if desired_chain_position is not None else total
    ratio = min(chain_pos / max(total, 1), 1.0)
    target_x = board.width_inches * (1 - ratio)

    xs = _scan(board.width_inches - pedal.width_inches, step)

    def _best(ys: list[float]) -> tuple[float, float] | None:
        best: tuple[float, float] | None = None
        best_dist = float("inf")
        for y in ys:
            for x in xs:
                dist = abs(x - target_x)
                if dist >= best_dist:
                    continue
                if is_valid_placement(x, y, pedal, 0, placed_pedals, pedals, board):
                    best, best_dist = (x, y), dist
        return best

    rail_ys = [r.position_from_back_inches for r in board.sorted_rails()]
    spot = _best(rail_ys)
    if spot is None:
        spot = _best(_scan(board.depth_inches - pedal.depth_inches, step))
    if spot is None:
        log.info("No empty spot for %s on %s", pedal.name, board.name)
    return spot
