"""Pedalboard layout & wiring engine.

Pure functions from (board, pedal catalog, placed pedals, routing
configuration) to (ordered chain, positions, cable paths, warnings).
The stages in order:

  chain      order pedals and assign routing zones
  layout     position pedals to keep cables short (calls the router's cost)
  collision  validate placements: overlaps, bounds, free spots
  router     obstacle-avoiding cable paths and stock lengths

``geometry`` and ``catalog`` are shared by every stage.
"""

from .catalog import (
    Jack, Rail, Board, Pedal, PlacedPedal, PedalRoutingConfig, RoutingConfig,
    CatalogResult, UnknownPedalError, load_catalog, parse_catalog,
)
from .chain import ChainContext, SignalChainResult, compute_signal_chain
from .collision import Collision, detect_collisions, find_empty_spot
from .layout import PedalPlacement, JointOptimizationResult, optimize_layout, optimize_jointly
from .router import Cable, Endpoint, route_cables

__all__ = [
    # Catalog
    "Jack", "Rail", "Board", "Pedal", "PlacedPedal", "PedalRoutingConfig",
    "RoutingConfig", "CatalogResult", "UnknownPedalError", "load_catalog", "parse_catalog",
    # Entry points
    "ChainContext", "SignalChainResult", "compute_signal_chain",
    "Collision", "detect_collisions", "find_empty_spot",
    "PedalPlacement", "JointOptimizationResult", "optimize_layout", "optimize_jointly",
    "Cable", "Endpoint", "route_cables",
]
