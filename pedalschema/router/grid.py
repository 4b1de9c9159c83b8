"""Discretized routing grid — marks cells as free or blocked.

The grid covers a rectangular search region around the two cable ends
and every pedal.  Pedal bodies, inflated by the obstacle margin, are
blocked; the pedals a cable terminates on are blocked without
inflation so the cable can still approach them.
"""

from __future__ import annotations

import math
from collections import deque

from pedalschema.geometry import Box, Point

from .models import GRID_CELL_IN


# Cell states
FREE = 0
BLOCKED = 1


class RoutingGrid:
    """A 2-D grid for Manhattan routing over a rectangular region.

    World coordinates (inches) are mapped to grid cells.  The grid
    origin is at (origin_x, origin_y) in world space — the back-left
    corner of the region.
    """

    def __init__(self, region: Box, resolution: float = GRID_CELL_IN) -> None:
        self.resolution = resolution
        self.origin_x = region.x
        self.origin_y = region.y
        self.width = int(math.ceil(region.width / resolution)) + 1
        self.height = int(math.ceil(region.height / resolution)) + 1
        self._cells = bytearray(self.width * self.height)

    # ── Coordinate conversion ──────────────────────────────────────

    def world_to_grid(self, wx: float, wy: float) -> tuple[int, int]:
        """Convert world inches to grid cell (clamped to bounds)."""
        gx = int(round((wx - self.origin_x) / self.resolution - 0.5))
        gy = int(round((wy - self.origin_y) / self.resolution - 0.5))
        gx = max(0, min(self.width - 1, gx))
        gy = max(0, min(self.height - 1, gy))
        return (gx, gy)

    def grid_to_world(self, gx: int, gy: int) -> Point:
        """Convert grid cell to world inches (cell centre)."""
        wx = self.origin_x + (gx + 0.5) * self.resolution
        wy = self.origin_y + (gy + 0.5) * self.resolution
        return (wx, wy)

    # ── Cell queries ───────────────────────────────────────────────

    def in_bounds(self, gx: int, gy: int) -> bool:
        return 0 <= gx < self.width and 0 <= gy < self.height

    def is_free(self, gx: int, gy: int) -> bool:
        if not self.in_bounds(gx, gy):
            return False
        return self._cells[gy * self.width + gx] == FREE

    def free_count(self) -> int:
        return self._cells.count(FREE)

    # ── Area blocking ──────────────────────────────────────────────

    def block_box(self, box: Box, margin: float = 0.0) -> None:
        """Block all cells whose centres fall strictly inside the inflated box."""
        left = box.x - margin
        right = box.right + margin
        top = box.y - margin
        bottom = box.bottom + margin
        res = self.resolution

        gx0 = max(0, int(math.floor((left - self.origin_x) / res - 0.5)))
        gx1 = min(self.width - 1, int(math.ceil((right - self.origin_x) / res - 0.5)))
        gy0 = max(0, int(math.floor((top - self.origin_y) / res - 0.5)))
        gy1 = min(self.height - 1, int(math.ceil((bottom - self.origin_y) / res - 0.5)))

        W = self.width
        cells = self._cells
        for gy in range(gy0, gy1 + 1):
            wy = self.origin_y + (gy + 0.5) * res
            if not (top < wy < bottom):
                continue
            row = gy * W
            for gx in range(gx0, gx1 + 1):
                wx = self.origin_x + (gx + 0.5) * res
                if left < wx < right:
                    cells[row + gx] = BLOCKED

    # ── Search helpers ─────────────────────────────────────────────

    def nearest_free(self, gx: int, gy: int, max_radius: int) -> tuple[int, int] | None:
        """Breadth-first search for the closest free cell."""
        if self.is_free(gx, gy):
            return (gx, gy)
        seen = {(gx, gy)}
        queue = deque([(gx, gy, 0)])
        while queue:
            cx, cy, dist = queue.popleft()
            if dist >= max_radius:
                continue
            for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
                nx, ny = cx + dx, cy + dy
                if (nx, ny) in seen or not self.in_bounds(nx, ny):
                    continue
                if self.is_free(nx, ny):
                    return (nx, ny)
                seen.add((nx, ny))
                queue.append((nx, ny, dist + 1))
        return None
