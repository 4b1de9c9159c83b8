"""Layout optimizer — seed, then deterministic hill climbing on routing cost."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Mapping, Sequence

from pedalschema.catalog.models import (
    Board, Pedal, PlacedPedal, RoutingConfig, CatalogLike, catalog_map, lookup_pedal,
)
from pedalschema.geometry import Box, board_box, box_inside, pedal_box
from pedalschema.router.models import RouterConfig
from pedalschema.router.topology import signal_order

from .cost import PathCache, cost_lower_bound, layout_cost
from .models import (
    PedalPlacement, SwappableGroup, JointOptimizationResult, OptimizerConfig,
)
from .seeding import seed_layout


log = logging.getLogger(__name__)

# Axial nudges: (dx, dy) in units of OptimizerConfig.nudge_in
NUDGES = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _moves_valid(
    layout: Sequence[PlacedPedal],
    moved: Sequence[int],
    pedals: Mapping[str, Pedal],
    bounds: Box,
    spacing: float,
) -> bool:
    """Moved pedals stay on the board and keep *spacing* from every other pedal."""
    boxes = [pedal_box(p, lookup_pedal(p, pedals)) for p in layout]
    for i in moved:
        if not box_inside(boxes[i], bounds):
            return False
        for k, other in enumerate(boxes):
            if k != i and boxes[i].overlaps(other, spacing):
                return False
    return True


def swappable_groups(
    chain: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
) -> list[SwappableGroup]:
    """Maximal runs of two or more consecutive same-category pedals in one zone."""
    groups: list[SwappableGroup] = []
    start = 0
    while start < len(chain):
        cat = lookup_pedal(chain[start], pedals).category
        end = start + 1
        while (end < len(chain)
               and lookup_pedal(chain[end], pedals).category == cat
               and chain[end].location == chain[start].location):
            end += 1
        if end - start >= 2:
            groups.append(SwappableGroup(
                category=cat,
                pedal_ids=[p.id for p in chain[start:end]],
                chain_start_index=start,
            ))
        start = end
    return groups


def _hill_climb(
    layout: list[PlacedPedal],
    evaluate: Callable[[list[PlacedPedal]], float],
    is_valid: Callable[[list[PlacedPedal], Sequence[int]], bool],
    cfg: OptimizerConfig,
    groups: Sequence[SwappableGroup] = (),
    lower_bound: Callable[[list[PlacedPedal]], float] | None = None,
) -> tuple[list[PlacedPedal], float]:
    current = evaluate(layout)
    log.debug("Optimizer: seed cost %.2f", current)
    n = len(layout)
    index = {p.id: i for i, p in enumerate(layout)}

    def _try(candidate: list[PlacedPedal], moved: Sequence[int]) -> bool:
        nonlocal layout, current
        if moved and not is_valid(candidate, moved):
            return False
        # Cannot beat the current cost even with straight cables.
        if lower_bound is not None and lower_bound(candidate) >= current - cfg.epsilon:
            return False
        cost = evaluate(candidate)
        if cost < current - cfg.epsilon:
            layout, current = candidate, cost
            return True
        return False

    for pass_no in range(cfg.max_passes):
        improved = False

        # (i) pairwise position swaps
        for i in range(n):
            for j in range(i + 1, n):
                a, b = layout[i], layout[j]
                cand = list(layout)
                cand[i] = replace(a, x_inches=b.x_inches, y_inches=b.y_inches)
                cand[j] = replace(b, x_inches=a.x_inches, y_inches=a.y_inches)
                improved |= _try(cand, (i, j))

        # (ii) axial nudges
        for i in range(n):
            for dx, dy in NUDGES:
                p = layout[i]
                cand = list(layout)
                cand[i] = replace(p, x_inches=p.x_inches + dx * cfg.nudge_in,
                                  y_inches=p.y_inches + dy * cfg.nudge_in)
                improved |= _try(cand, (i,))

        # (iii) chain-order swaps inside interchangeable runs
        for group in groups:
            members = [index[pid] for pid in group.pedal_ids]
            for ai in range(len(members)):
                for bi in range(ai + 1, len(members)):
                    i, j = members[ai], members[bi]
                    a, b = layout[i], layout[j]
                    cand = list(layout)
                    cand[i] = replace(a, chain_position=b.chain_position)
                    cand[j] = replace(b, chain_position=a.chain_position)
                    improved |= _try(cand, ())

        log.debug("Optimizer: pass %d cost %.2f", pass_no + 1, current)
        if not improved:
            break

    return layout, current


def _prepare(
    placed_pedals: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board,
    routing_config: RoutingConfig | None,
    config: OptimizerConfig | None,
    router_config: RouterConfig | None,
    seed: bool,
):
    routing = routing_config or RoutingConfig()
    cfg = config or OptimizerConfig()
    rcfg = router_config or RouterConfig()
    pedals = catalog_map(catalog)
    chain = signal_order(placed_pedals)
    if seed:
        chain = seed_layout(chain, pedals, board, cfg,
                            use_effects_loop=routing.effects_loop_enabled)

    bounds = board_box(board.width_inches, board.depth_inches)
    cache = PathCache()

    def evaluate(layout: list[PlacedPedal]) -> float:
        return layout_cost(layout, pedals, board, routing, cfg, rcfg, cache).total

    def lower_bound(layout: list[PlacedPedal]) -> float:
        return cost_lower_bound(layout, pedals, board, routing, cfg, rcfg)

    def is_valid(layout: list[PlacedPedal], moved: Sequence[int]) -> bool:
        return _moves_valid(layout, moved, pedals, bounds, cfg.min_spacing_in)

    return chain, pedals, cfg, evaluate, is_valid, lower_bound


def _placements(
    placed_pedals: Sequence[PlacedPedal],
    layout: Sequence[PlacedPedal],
) -> list[PedalPlacement]:
    """Optimized positions for active pedals; inactive ones keep theirs."""
    moved = {p.id: p for p in layout}
    out = []
    for p in placed_pedals:
        src = moved.get(p.id, p)
        out.append(PedalPlacement(id=p.id, x_inches=src.x_inches, y_inches=src.y_inches))
    return out


def optimize_layout(
    placed_pedals: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board,
    routing_config: RoutingConfig | None = None,
    *,
    config: OptimizerConfig | None = None,
    router_config: RouterConfig | None = None,
    seed: bool = True,
) -> list[PedalPlacement]:
    """Compute positions for every placed pedal.

    Parameters
    ----------
    placed_pedals : sequence of PlacedPedal
        Output of the signal chain engine.  Rotations are kept.
    catalog : CatalogResult, mapping or iterable of Pedal
        Catalog the placements refer to.
    board : Board
        Target board.
    routing_config : RoutingConfig | None
        Wiring choices, so the cost matches what the router will draw.
    config : OptimizerConfig | None
        Search and cost parameters.  Uses defaults when *None*.
    router_config : RouterConfig | None
        Router parameters for the cost function.
    seed : bool
        Start from the zone-row seed layout (default) or from the
        current positions.

    Returns
    -------
    list of PedalPlacement
        One entry per input placement, in input order.
    """
    chain, pedals, cfg, evaluate, is_valid, lower_bound = _prepare(
        placed_pedals, catalog, board, routing_config, config, router_config, seed)

    log.info("Optimizer: %d active pedals on %s, up to %d passes",
             len(chain), board.name, cfg.max_passes)
    layout, cost = _hill_climb(chain, evaluate, is_valid, cfg, lower_bound=lower_bound)
    log.info("Optimizer: final cost %.2f", cost)
    return _placements(placed_pedals, layout)


def optimize_jointly(
    placed_pedals: Sequence[PlacedPedal],
    catalog: CatalogLike,
    board: Board,
    routing_config: RoutingConfig | None = None,
    *,
    config: OptimizerConfig | None = None,
    router_config: RouterConfig | None = None,
    seed: bool = True,
) -> JointOptimizationResult:
    """Like :func:`optimize_layout`, also reordering interchangeable pedals.

    Consecutive same-category pedals in one zone (two overdrives, say)
    can trade chain positions when that shortens the wiring.
    """
    chain, pedals, cfg, evaluate, is_valid, lower_bound = _prepare(
        placed_pedals, catalog, board, routing_config, config, router_config, seed)
    groups = swappable_groups(chain, pedals)

    log.info("Joint optimizer: %d active pedals, %d swappable groups",
             len(chain), len(groups))
    layout, cost = _hill_climb(chain, evaluate, is_valid, cfg, groups, lower_bound)

    return JointOptimizationResult(
        placements=_placements(placed_pedals, layout),
        chain_order=[p.id for p in signal_order(layout)],
        swappable_groups=groups,
        cost=cost,
    )
