"""Deterministic seed layout — zone rows filled in chain order.

Signal enters from the right (guitar side), so each row fills right to
left.  Front-of-amp pedals take the rows nearest the player; effects-loop
pedals take the rows behind them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Mapping, Sequence

from pedalschema.catalog.models import Board, Pedal, PlacedPedal, lookup_pedal
from pedalschema.geometry import Box, footprint_dims

from .models import OptimizerConfig


log = logging.getLogger(__name__)


def _steps(lo: float, hi: float, step: float) -> list[float]:
    """lo, lo+step, … up to hi inclusive (empty when hi < lo)."""
    if hi < lo - 1e-9:
        return []
    n = int((hi - lo) / step + 1e-9)
    return [lo + i * step for i in range(n + 1)]


def row_tops(board: Board, n_pedals: int, cfg: OptimizerConfig) -> list[float]:
    """Row y positions, front of the board first."""
    if board.rails:
        return sorted({r.position_from_back_inches for r in board.rails}, reverse=True)
    n_rows = max(2, math.ceil(n_pedals / cfg.pedals_per_synthetic_row))
    usable = board.depth_inches - 2 * cfg.edge_margin_in
    pitch = usable / n_rows
    return [cfg.edge_margin_in + i * pitch for i in reversed(range(n_rows))]


def _x_range(board: Board, w: float, cfg: OptimizerConfig) -> tuple[float, float]:
    lo = cfg.edge_margin_in
    hi = board.width_inches - cfg.edge_margin_in - w
    if hi < lo:
        lo, hi = 0.0, board.width_inches - w
    return lo, hi


def _clear(box: Box, placed: list[Box], spacing: float) -> bool:
    return not any(box.overlaps(other, spacing) for other in placed)


def _place_in_row(
    w: float, d: float, row_y: float, cursor: float,
    placed: list[Box], board: Board, cfg: OptimizerConfig,
) -> Box | None:
    """Rightmost free slot in a row whose right edge stays left of *cursor*."""
    y = min(max(row_y, 0.0), board.depth_inches - d)
    if y < 0:
        return None
    lo, hi = _x_range(board, w, cfg)
    hi = min(hi, cursor - w)
    for x in reversed(_steps(lo, hi, cfg.seed_step_in)):
        box = Box(x, y, w, d)
        if _clear(box, placed, cfg.min_spacing_in):
            return box
    return None


def _scan_board(w: float, d: float, placed: list[Box], board: Board, cfg: OptimizerConfig) -> Box | None:
    lo, hi = _x_range(board, w, cfg)
    for y in _steps(0.0, board.depth_inches - d, cfg.seed_step_in):
        for x in reversed(_steps(lo, hi, cfg.seed_step_in)):
            box = Box(x, y, w, d)
            if _clear(box, placed, cfg.min_spacing_in):
                return box
    return None


def seed_layout(
    chain: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
    board: Board,
    cfg: OptimizerConfig,
    *,
    use_effects_loop: bool = False,
) -> list[PlacedPedal]:
    """Place *chain* (already in signal order) row by row.

    Returns copies with new ``x_inches``/``y_inches``; rotation, zone
    and chain position are untouched.
    """
    rows = row_tops(board, len(chain), cfg)
    front = [p for p in chain if not (use_effects_loop and p.location == "effects_loop")]
    loop = [p for p in chain if use_effects_loop and p.location == "effects_loop"]

    if loop and len(rows) >= 2:
        split = math.ceil(len(rows) / 2)
        group_rows = [(front, rows[:split]), (loop, rows[split:])]
    else:
        group_rows = [(front + loop, rows)]

    placed_boxes: list[Box] = []
    positions: dict[str, tuple[float, float]] = {}
    right_edge = board.width_inches + 1.0

    for group, preferred in group_rows:
        # Overflow into the other group's rows before scanning the whole board.
        row_order = preferred + [r for r in rows if r not in preferred]
        cursors = {r: right_edge for r in row_order}
        row_i = 0
        for p in group:
            w, d = footprint_dims(lookup_pedal(p, pedals), p.rotation_degrees)
            box = None
            for k in range(row_i, len(row_order)):
                r = row_order[k]
                box = _place_in_row(w, d, r, cursors[r], placed_boxes, board, cfg)
                if box is not None:
                    cursors[r] = box.x - cfg.min_spacing_in
                    row_i = k
                    break
            if box is None:
                box = _scan_board(w, d, placed_boxes, board, cfg)
            if box is None:
                log.warning("Seed layout: no room for %s on %s; placing at the origin",
                            p.id, board.name)
                box = Box(0.0, 0.0, w, d)
            placed_boxes.append(box)
            positions[p.id] = (box.x, box.y)

    return [replace(p, x_inches=positions[p.id][0], y_inches=positions[p.id][1]) for p in chain]
