"""A* pathfinder for Manhattan routing on the routing grid.

Open set is a binary heap of ``(f, counter, x, y, direction, parent)``
entries; g-scores, parents and the closed set are keyed by the integer
cell index ``y * width + x``.
"""

from __future__ import annotations

import heapq

from .grid import RoutingGrid, FREE
from .models import TURN_PENALTY, MAX_ITERATIONS


# Manhattan directions: (dx, dy)
DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def find_path(
    grid: RoutingGrid,
    source: tuple[int, int],
    sink: tuple[int, int],
    *,
    turn_penalty: int = TURN_PENALTY,
    max_iterations: int = MAX_ITERATIONS,
) -> list[tuple[int, int]] | None:
    """A* point-to-point Manhattan routing.

    Returns a list of (gx, gy) grid cells from source to sink,
    or None if no path exists within *max_iterations* expansions.
    """
    sx, sy = source
    tx, ty = sink

    W = grid.width
    H = grid.height
    cells = grid._cells

    if not (0 <= sx < W and 0 <= sy < H and 0 <= tx < W and 0 <= ty < H):
        return None
    if source == sink:
        return [source]

    start_key = sy * W + sx
    sink_key = ty * W + tx
    h0 = abs(sx - tx) + abs(sy - ty)
    counter = 0
    heap: list[tuple[int, int, int, int, int, int]] = [(h0, counter, sx, sy, -1, -1)]
    g_scores: dict[int, int] = {start_key: 0}
    parents: dict[int, int] = {}
    closed: set[int] = set()
    iterations = 0

    while heap:
        iterations += 1
        if iterations > max_iterations:
            return None

        _f, _cnt, cx, cy, direction, parent_key = heapq.heappop(heap)
        key = cy * W + cx

        if key in closed:
            continue
        closed.add(key)
        if parent_key >= 0:
            parents[key] = parent_key

        if key == sink_key:
            path = [(cx, cy)]
            k = key
            while k in parents:
                k = parents[k]
                path.append((k % W, k // W))
            path.reverse()
            return path

        cur_g = g_scores[key]

        for d, (dx, dy) in enumerate(DIRS):
            nx, ny = cx + dx, cy + dy
            if not (0 <= nx < W and 0 <= ny < H):
                continue
            nkey = ny * W + nx
            if nkey in closed:
                continue
            # Allow stepping onto the sink even if blocked.
            if cells[nkey] != FREE and nkey != sink_key:
                continue

            is_turn = direction != -1 and direction != d
            tentative_g = cur_g + 1 + (turn_penalty if is_turn else 0)

            if nkey not in g_scores or tentative_g < g_scores[nkey]:
                g_scores[nkey] = tentative_g
                h = abs(nx - tx) + abs(ny - ty)
                counter += 1
                heapq.heappush(heap, (tentative_g + h, counter, nx, ny, d, key))

    return None
