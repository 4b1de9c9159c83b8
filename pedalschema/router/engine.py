"""Main routing algorithm — standoffs, strategy ladder, clean-up, validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from pedalschema.catalog.models import (
    Board, Pedal, PlacedPedal, RoutingConfig, CatalogLike, catalog_map, lookup_pedal,
)
from pedalschema.geometry import Box, expand_exclusion_set, path_length, pedal_box

from .jacks import ResolvedEnd, resolve_endpoint, standoff_point
from .models import Cable, Connection, RoutedPath, RouterConfig, STANDARD_LENGTHS_IN
from .obstacles import Obstacles, find_path_defects
from .postprocess import collapse_collinear, smooth_zigzags
from .strategies import route_between
from .topology import plan_connections, signal_order


log = logging.getLogger(__name__)


# ── Routing context ────────────────────────────────────────────────


@dataclass
class RoutingScene:
    """Everything fixed while the cables of one layout are routed."""

    board: Board
    pedals: Mapping[str, Pedal]
    placed: dict[str, PlacedPedal]
    boxes: list[Box]
    box_index: dict[str, int]
    cfg: RouterConfig


def build_scene(
    placed: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
    board: Board,
    cfg: RouterConfig,
) -> RoutingScene:
    active = [p for p in placed if p.is_active]
    return RoutingScene(
        board=board,
        pedals=pedals,
        placed={p.id: p for p in active},
        boxes=[pedal_box(p, lookup_pedal(p, pedals)) for p in active],
        box_index={p.id: i for i, p in enumerate(active)},
        cfg=cfg,
    )


def route_path(
    start: ResolvedEnd,
    end: ResolvedEnd,
    boxes: Sequence[Box],
    cfg: RouterConfig,
) -> RoutedPath:
    """Route one cable between two resolved ends.

    The path leaves each jack along its edge normal (standoff), runs
    the strategy ladder between the standoffs, is simplified under the
    same clearance it was accepted at, and is re-validated at the end.
    The first and last points are the exact jack coordinates.
    """
    terminals = {i for i in (start.box_index, end.box_index) if i is not None}
    excluded = expand_exclusion_set(boxes, terminals)
    obstacles = Obstacles(boxes, excluded, terminals, cfg.obstacle_margin_in)

    s0 = standoff_point(start, boxes, cfg.standoff_in)
    e0 = standoff_point(end, boxes, cfg.standoff_in)

    inner, strategy, margin = route_between(s0, e0, obstacles, cfg)
    inner = collapse_collinear(inner)
    inner = smooth_zigzags(inner, cfg.smooth_threshold_in,
                           lambda a, b: obstacles.segment_clear(a, b, margin))

    points = collapse_collinear([start.point] + inner + [end.point])
    defects = find_path_defects(points, boxes, excluded, terminals)
    if defects:
        log.debug("Router: %s path has %d box crossings", strategy, len(defects))
    return RoutedPath(
        points=points,
        strategy=strategy,
        defect=strategy == "emergency" or bool(defects),
        length=path_length(points),
        box_hits=len(defects),
    )


def resolve_connection(scene: RoutingScene, conn: Connection) -> tuple[ResolvedEnd, ResolvedEnd]:
    start = resolve_endpoint(conn.source, scene.placed, scene.pedals,
                             scene.box_index, scene.board, scene.cfg)
    end = resolve_endpoint(conn.target, scene.placed, scene.pedals,
                           scene.box_index, scene.board, scene.cfg)
    return start, end


def route_connection(scene: RoutingScene, conn: Connection) -> RoutedPath:
    start, end = resolve_connection(scene, conn)
    return route_path(start, end, scene.boxes, scene.cfg)


# ── Cable lengths ──────────────────────────────────────────────────


def round_to_standard_length(length_in: float) -> int:
    """Smallest stock length that covers *length_in*, else the next foot."""
    for stock in STANDARD_LENGTHS_IN:
        if length_in <= stock:
            return stock
    return int(-(-length_in // 12) * 12)


# ── Public API ─────────────────────────────────────────────────────


def route_cables(
    ordered_pedals: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board,
    routing_config: RoutingConfig | None = None,
    *,
    config: RouterConfig | None = None,
) -> list[Cable]:
    """Wire and route every cable on the board.

    Parameters
    ----------
    ordered_pedals : sequence of PlacedPedal
        Output of the signal chain engine (zones and chain positions
        set).  Inactive pedals are skipped.
    catalog : CatalogResult, mapping or iterable of Pedal
        Catalog the placements refer to.
    board : Board
        The board; external guitar/amp positions hang off its edges.
    routing_config : RoutingConfig | None
        Effects loop / 4-cable / loop-pedal choices.  Defaults when *None*.
    config : RouterConfig | None
        Tuneable parameters.  Uses defaults when *None*.

    Returns
    -------
    list of Cable
        In signal order, each with a routed path whose ends are the
        exact jack points and a stock length.  ``routing_defect`` marks
        cables that needed the emergency route or still cross a box.
    """
    if routing_config is None:
        routing_config = RoutingConfig()
    if config is None:
        config = RouterConfig()

    pedals = catalog_map(catalog)
    chain = signal_order(ordered_pedals)
    scene = build_scene(chain, pedals, board, config)
    connections = plan_connections(chain, pedals, routing_config)

    log.info("Router: %d pedals, %d cables on %s (%.1f × %.1f in)",
             len(chain), len(connections), board.name,
             board.width_inches, board.depth_inches)

    cables: list[Cable] = []
    for order, conn in enumerate(connections, start=1):
        routed = route_connection(scene, conn)
        cables.append(Cable(
            source=conn.source,
            target=conn.target,
            cable_type=conn.cable_type,
            calculated_length_inches=round_to_standard_length(routed.length),
            routed_length_inches=routed.length,
            path=routed.points,
            strategy=routed.strategy,
            sort_order=order,
            routing_defect=routed.defect,
        ))

    defects = sum(1 for c in cables if c.routing_defect)
    if defects:
        log.warning("Router: %d of %d cables have routing defects", defects, len(cables))
    return cables
