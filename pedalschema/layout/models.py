"""Layout optimizer dataclasses and configuration constants."""

from __future__ import annotations

from dataclasses import dataclass, field

from pedalschema.config import BOARD_RULES


# ── Output dataclasses ─────────────────────────────────────────────


@dataclass
class PedalPlacement:
    """Where the optimizer put one placed pedal."""

    id: str
    x_inches: float
    y_inches: float


@dataclass
class SwappableGroup:
    """A run of consecutive same-category pedals whose order is interchangeable."""

    category: str
    pedal_ids: list[str]
    chain_start_index: int              # index of the first member in signal order


@dataclass
class JointOptimizationResult:
    placements: list[PedalPlacement]
    chain_order: list[str]              # PlacedPedal ids in final signal order
    swappable_groups: list[SwappableGroup] = field(default_factory=list)
    cost: float = 0.0


@dataclass
class CostBreakdown:
    cable_length: float = 0.0
    crossings: float = 0.0
    spacing: float = 0.0
    collisions: float = 0.0
    complexity: float = 0.0

    @property
    def total(self) -> float:
        return self.cable_length + self.crossings + self.spacing + self.collisions + self.complexity


# ── Optimizer configuration ───────────────────────────────────────


@dataclass
class OptimizerConfig:
    """All tuneable optimizer parameters, in inches."""

    # ── Seeding ────────────────────────────────────────────────
    min_spacing_in: float = BOARD_RULES.min_spacing_in
    edge_margin_in: float = BOARD_RULES.edge_margin_in
    seed_step_in: float = 0.25
    pedals_per_synthetic_row: int = 5

    # ── Local search ───────────────────────────────────────────
    max_passes: int = 30
    nudge_in: float = 0.5
    epsilon: float = 1e-6

    # ── Cost weights ───────────────────────────────────────────
    crossing_penalty_in: float = 6.0
    spacing_penalty_in: float = 200.0
    min_cable_clearance_in: float = BOARD_RULES.min_cable_clearance_in
    collision_penalty_in: float = 100.0
    complex_route_penalty_in: float = 30.0


# Module-level defaults (used when no OptimizerConfig is passed)
_DEFAULT_CFG = OptimizerConfig()

MIN_SPACING_IN = _DEFAULT_CFG.min_spacing_in
EDGE_MARGIN_IN = _DEFAULT_CFG.edge_margin_in
MAX_PASSES = _DEFAULT_CFG.max_passes
NUDGE_IN = _DEFAULT_CFG.nudge_in
