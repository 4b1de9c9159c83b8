"""Layout optimizer — physical positions that keep the wiring short.

Submodules:
  models     Output dataclasses, cost breakdown and OptimizerConfig.
  seeding    Deterministic zone-row seed layout.
  cost       Routing cost of a candidate layout, its floor and a route cache.
  optimizer  Hill climbing (optimize_layout) and the joint variant.
"""

from .models import (
    PedalPlacement, SwappableGroup, JointOptimizationResult, CostBreakdown, OptimizerConfig,
)
from .seeding import seed_layout, row_tops
from .cost import layout_cost, cost_lower_bound, count_crossings, PathCache
from .optimizer import optimize_layout, optimize_jointly, swappable_groups

__all__ = [
    # Models
    "PedalPlacement", "SwappableGroup", "JointOptimizationResult",
    "CostBreakdown", "OptimizerConfig",
    # Seeding
    "seed_layout", "row_tops",
    # Cost
    "layout_cost", "cost_lower_bound", "count_crossings", "PathCache",
    # Optimizer
    "optimize_layout", "optimize_jointly", "swappable_groups",
]
