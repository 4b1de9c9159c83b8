"""Router — obstacle-avoiding cable paths between jacks.

Submodules:
  models        Endpoint, Connection, Cable dataclasses and RouterConfig.
  jacks         Jack coordinates under rotation, default jacks, standoffs.
  grid          Discretized routing grid (free/blocked cells).
  pathfinder    A* pathfinding on the grid.
  obstacles     Per-cable obstacle view and final path validation.
  strategies    Direct → L → channel → A* → perimeter → emergency ladder.
  postprocess   Collinear collapse and validated zigzag removal.
  topology      Which jacks connect (standard, loop pedal, 4-cable).
  engine        route_path / route_cables.
  cables        Shopping list, totals and summary.
  options       Routing modes a pedal supports, loop candidates.
  serialization JSON conversion (cables_to_dict, parse_cables).
"""

from .models import (
    Endpoint, Connection, RoutedPath, Cable, CableListItem, CableSummary,
    RouterConfig, GUITAR, AMP_INPUT, AMP_SEND, AMP_RETURN, STANDARD_LENGTHS_IN,
)
from .jacks import rotated_side, resolve_jack, jack_position, external_position
from .obstacles import Obstacles, find_path_defects
from .topology import plan_connections, signal_order
from .engine import (
    RoutingScene, build_scene, route_path, resolve_connection, route_connection,
    route_cables, round_to_standard_length,
)
from .cables import cable_list, cable_summary, total_cable_length, format_length
from .options import PedalRoutingInfo, analyze_pedal_routing, loop_candidates
from .serialization import cables_to_dict, parse_cables

__all__ = [
    # Models
    "Endpoint", "Connection", "RoutedPath", "Cable", "CableListItem", "CableSummary",
    "RouterConfig", "GUITAR", "AMP_INPUT", "AMP_SEND", "AMP_RETURN", "STANDARD_LENGTHS_IN",
    # Jacks
    "rotated_side", "resolve_jack", "jack_position", "external_position",
    # Validation
    "Obstacles", "find_path_defects",
    # Topology
    "plan_connections", "signal_order",
    # Engine
    "RoutingScene", "build_scene", "route_path", "resolve_connection", "route_connection",
    "route_cables", "round_to_standard_length",
    # Bill of materials
    "cable_list", "cable_summary", "total_cable_length", "format_length",
    # Options
    "PedalRoutingInfo", "analyze_pedal_routing", "loop_candidates",
    # Serialization
    "cables_to_dict", "parse_cables",
]
