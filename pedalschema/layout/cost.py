"""Routing cost of a candidate layout, in inches of cable."""

from __future__ import annotations

import math
from typing import Mapping, Sequence

from pedalschema.catalog.models import Board, Pedal, PlacedPedal, RoutingConfig
from pedalschema.geometry import Box, segment_intersection
from pedalschema.router.engine import RoutingScene, build_scene, resolve_connection, route_path
from pedalschema.router.jacks import ResolvedEnd
from pedalschema.router.models import RoutedPath, RouterConfig
from pedalschema.router.topology import plan_connections

from .models import CostBreakdown, OptimizerConfig


_SIMPLE_STRATEGIES = ("direct", "l_path")

# Entries kept before the cache starts over
PATH_CACHE_LIMIT = 20_000


class PathCache:
    """Routed paths keyed by both resolved ends and the full box list.

    A route is a pure function of those, so a cable whose jacks and
    surrounding pedals are unchanged between candidates (chain-order
    swaps, revisited layouts) is not routed again.
    """

    def __init__(self, limit: int = PATH_CACHE_LIMIT):
        self.limit = limit
        self.hits = 0
        self.misses = 0
        self._paths: dict[tuple, RoutedPath] = {}

    def __len__(self) -> int:
        return len(self._paths)

    def route(
        self,
        start: ResolvedEnd,
        end: ResolvedEnd,
        boxes: tuple[Box, ...],
        cfg: RouterConfig,
    ) -> RoutedPath:
        key = (start.point, start.side, start.box_index,
               end.point, end.side, end.box_index, boxes)
        path = self._paths.get(key)
        if path is not None:
            self.hits += 1
            return path
        self.misses += 1
        if len(self._paths) >= self.limit:
            self._paths.clear()
        path = self._paths[key] = route_path(start, end, boxes, cfg)
        return path


def count_crossings(paths: Sequence[RoutedPath]) -> int:
    """Proper crossings between segments of different cables."""
    segs = [
        [(p.points[i], p.points[i + 1]) for i in range(len(p.points) - 1)]
        for p in paths
    ]
    total = 0
    for a in range(len(segs)):
        for b in range(a + 1, len(segs)):
            for p1, p2 in segs[a]:
                for p3, p4 in segs[b]:
                    if segment_intersection(p1, p2, p3, p4) is not None:
                        total += 1
    return total


def _spacing_cost(scene: RoutingScene, cfg: OptimizerConfig) -> float:
    clearance = cfg.min_cable_clearance_in
    boxes = scene.boxes
    total = 0.0
    for i in range(len(boxes)):
        for j in range(i + 1, len(boxes)):
            gap = boxes[i].gap(boxes[j])
            if gap < clearance:
                severity = 1 + (clearance - max(gap, 0.0)) / clearance
                total += cfg.spacing_penalty_in * severity
    return total


def _resolved_ends(
    scene: RoutingScene,
    layout: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
    routing: RoutingConfig,
) -> list[tuple[ResolvedEnd, ResolvedEnd]]:
    return [resolve_connection(scene, conn)
            for conn in plan_connections(layout, pedals, routing)]


def cost_lower_bound(
    layout: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
    board: Board,
    routing: RoutingConfig,
    cfg: OptimizerConfig,
    router_cfg: RouterConfig,
) -> float:
    """A floor under :func:`layout_cost` that needs no routing.

    Every routed path runs from jack to jack, so it is at least the
    straight-line distance between them; the spacing penalty is exact
    and the remaining components are never negative.
    """
    scene = build_scene(layout, pedals, board, router_cfg)
    floor = _spacing_cost(scene, cfg)
    for start, end in _resolved_ends(scene, layout, pedals, routing):
        floor += math.dist(start.point, end.point)
    return floor


def layout_cost(
    layout: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
    board: Board,
    routing: RoutingConfig,
    cfg: OptimizerConfig,
    router_cfg: RouterConfig,
    cache: PathCache | None = None,
) -> CostBreakdown:
    """Route every cable on *layout* and price the result.

    Components: routed length, a fixed penalty per cable crossing, a
    heavy penalty per pedal pair too close for orthogonal routing
    (scaled by how close), a heavy penalty per segment crossing a pedal
    it should avoid, and a flat penalty per cable needing more than an
    L-shaped route.  Pass a :class:`PathCache` to reuse routes across
    calls.
    """
    scene = build_scene(layout, pedals, board, router_cfg)
    ends = _resolved_ends(scene, layout, pedals, routing)
    if cache is None:
        paths = [route_path(s, e, scene.boxes, router_cfg) for s, e in ends]
    else:
        boxes = tuple(scene.boxes)
        paths = [cache.route(s, e, boxes, router_cfg) for s, e in ends]

    cost = CostBreakdown()
    cost.cable_length = sum(p.length for p in paths)
    cost.crossings = count_crossings(paths) * cfg.crossing_penalty_in
    cost.collisions = sum(p.box_hits for p in paths) * cfg.collision_penalty_in
    cost.complexity = sum(1 for p in paths if p.strategy not in _SIMPLE_STRATEGIES) \
        * cfg.complex_route_penalty_in
    cost.spacing = _spacing_cost(scene, cfg)
    return cost
