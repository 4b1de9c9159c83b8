"""Jack resolution — where on the board each cable end actually is.

Jacks are described by a side and a percentage along it.  Rotation
turns the pedal clockwise in 90° steps, which carries each side one
step around ``top → right → bottom → left``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from pedalschema.catalog.models import (
    Board, Jack, Pedal, PlacedPedal, JACK_SIDES, lookup_pedal,
)
from pedalschema.geometry import Box, Point, footprint_dims, normalize_rotation

from .models import Endpoint, RouterConfig


# Outward unit normal per side.
SIDE_NORMALS: dict[str, tuple[int, int]] = {
    "top": (0, -1),
    "right": (1, 0),
    "bottom": (0, 1),
    "left": (-1, 0),
}

# Signal enters a pedal from the guitar side (right) and leaves toward the amp (left).
_DEFAULT_SIDES = {
    "input": "right",
    "send": "right",
    "output": "left",
    "return": "left",
}


def rotated_side(side: str, rotation_deg: int) -> str:
    steps = normalize_rotation(rotation_deg) // 90
    return JACK_SIDES[(JACK_SIDES.index(side) + steps) % 4]


def resolve_jack(pedal: Pedal, jack_type: str) -> Jack:
    """The pedal's jack of that type, or a centred default if it has none."""
    jack = pedal.jack(jack_type)
    if jack is not None:
        return jack
    return Jack(type=jack_type, side=_DEFAULT_SIDES.get(jack_type, "top"),
                position_percent=50.0, label="synthesized")


def jack_position(placed: PlacedPedal, pedal: Pedal, jack: Jack) -> tuple[Point, str]:
    """World position of a jack and the side it faces after rotation."""
    w, d = footprint_dims(pedal, placed.rotation_degrees)
    side = rotated_side(jack.side, placed.rotation_degrees)
    t = jack.position_percent / 100.0
    x, y = placed.x_inches, placed.y_inches
    if side == "top":
        return (x + w * t, y), side
    if side == "bottom":
        return (x + w * t, y + d), side
    if side == "left":
        return (x, y + d * t), side
    return (x + w, y + d * t), side


def external_position(kind: str, board: Board, offset: float) -> Point:
    """Fixed off-board positions: guitar on the right, amp on the left."""
    w, d = board.width_inches, board.depth_inches
    if kind == "guitar":
        return (w + offset, d * 0.5)
    if kind == "amp_input":
        return (-offset, d * 0.5)
    if kind == "amp_send":
        return (-offset, d * 0.3)
    if kind == "amp_return":
        return (-offset, d * 0.7)
    raise ValueError(f"Not an external endpoint: {kind!r}")


@dataclass
class ResolvedEnd:
    point: Point
    side: str | None = None             # None for external endpoints
    box_index: int | None = None        # index into the router's box list


def resolve_endpoint(
    end: Endpoint,
    placed_map: Mapping[str, PlacedPedal],
    pedals: Mapping[str, Pedal],
    box_index: Mapping[str, int],
    board: Board,
    cfg: RouterConfig,
) -> ResolvedEnd:
    if end.is_external:
        return ResolvedEnd(external_position(end.kind, board, cfg.external_offset_in))
    placed = placed_map[end.pedal_id]
    pedal = lookup_pedal(placed, pedals)
    point, side = jack_position(placed, pedal, resolve_jack(pedal, end.jack))
    return ResolvedEnd(point, side, box_index.get(placed.id))


# ── Standoffs ──────────────────────────────────────────────────────


def _free_run(p: Point, normal: tuple[int, int], boxes: Sequence[Box], skip: int | None) -> float:
    """Distance from *p* along *normal* to the first box it would enter."""
    nx, ny = normal
    best = float("inf")
    for i, b in enumerate(boxes):
        if i == skip:
            continue
        if nx:
            if not (b.y < p[1] < b.bottom):
                continue
            dist = (b.x - p[0]) if nx > 0 else (p[0] - b.right)
        else:
            if not (b.x < p[0] < b.right):
                continue
            dist = (b.y - p[1]) if ny > 0 else (p[1] - b.bottom)
        if dist < -1e-9:
            # Starts inside an overlapping box
            if (b.x <= p[0] <= b.right) and (b.y <= p[1] <= b.bottom):
                return 0.0
            continue
        best = min(best, max(dist, 0.0))
    return best


def standoff_point(end: ResolvedEnd, boxes: Sequence[Box], distance: float) -> Point:
    """Offset a jack outward along its edge normal.

    The offset is shortened to half the free gap when a neighbouring
    pedal is closer than twice *distance*.  External endpoints are
    returned unchanged.
    """
    if end.side is None:
        return end.point
    normal = SIDE_NORMALS[end.side]
    run = _free_run(end.point, normal, boxes, end.box_index)
    if run < 2 * distance:
        distance = run / 2
    return (end.point[0] + normal[0] * distance, end.point[1] + normal[1] * distance)
