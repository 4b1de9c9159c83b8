"""Router dataclasses and configuration constants."""

from __future__ import annotations

from dataclasses import dataclass

from pedalschema.config import BOARD_RULES
from pedalschema.geometry import Point


# ── Endpoints and connections ──────────────────────────────────────

EXTERNAL_KINDS = ("guitar", "amp_input", "amp_send", "amp_return")
ENDPOINT_KINDS = EXTERNAL_KINDS + ("pedal",)

EXTERNAL_LABELS = {
    "guitar": "Guitar",
    "amp_input": "Amp input",
    "amp_send": "Amp FX send",
    "amp_return": "Amp FX return",
}


@dataclass(frozen=True)
class Endpoint:
    """One end of a cable: an external socket or a jack on a placed pedal."""

    kind: str                           # one of ENDPOINT_KINDS
    pedal_id: str | None = None         # PlacedPedal.id when kind == "pedal"
    jack: str | None = None             # jack type when kind == "pedal"

    @property
    def is_external(self) -> bool:
        return self.kind != "pedal"

    def __str__(self) -> str:
        if self.is_external:
            return EXTERNAL_LABELS[self.kind]
        return f"{self.pedal_id}:{self.jack}"


GUITAR = Endpoint("guitar")
AMP_INPUT = Endpoint("amp_input")
AMP_SEND = Endpoint("amp_send")
AMP_RETURN = Endpoint("amp_return")


def jack_of(placed_id: str, jack: str) -> Endpoint:
    return Endpoint("pedal", placed_id, jack)


@dataclass(frozen=True)
class Connection:
    """A logical cable before routing."""

    source: Endpoint
    target: Endpoint

    @property
    def cable_type(self) -> str:
        if self.source.is_external or self.target.is_external:
            return "instrument"
        return "patch"


# ── Routing output ─────────────────────────────────────────────────

STRATEGIES = ("direct", "l_path", "channel", "astar", "perimeter", "emergency")


@dataclass
class RoutedPath:
    points: list[Point]                 # inches; first/last are the exact jack points
    strategy: str                       # one of STRATEGIES
    defect: bool = False                # crosses a box it should avoid, or emergency route
    length: float = 0.0
    box_hits: int = 0                   # segment × box crossings found by validation


@dataclass
class Cable:
    """A routed cable, ready for the host to render and persist."""

    source: Endpoint
    target: Endpoint
    cable_type: str                     # "patch" | "instrument" | "power"
    calculated_length_inches: float     # stock length
    routed_length_inches: float
    path: list[Point]
    strategy: str
    sort_order: int
    routing_defect: bool = False


@dataclass
class CableListItem:
    cable_type: str
    length_inches: float
    length_display: str
    count: int
    description: str


@dataclass
class CableSummary:
    instrument_count: int
    patch_count: int
    long_cable_count: int
    total_count: int
    total_length_inches: float
    defect_count: int = 0


# ── Router configuration ──────────────────────────────────────────
#
# Physical rules come from the shared config (pedalschema.config.BOARD_RULES).
# Router-only knobs live here, converted from the renderer's pixel scale.


@dataclass
class RouterConfig:
    """All tuneable router parameters in one place."""

    # ── Physical rules (from shared config) ─────────────────────
    obstacle_margin_in: float = BOARD_RULES.obstacle_margin_in
    standoff_in: float = BOARD_RULES.standoff_in
    grid_cell_in: float = BOARD_RULES.grid_cell_in
    external_offset_in: float = BOARD_RULES.external_offset_in

    # ── Strategy ladder knobs ──────────────────────────────────
    direct_max_in: float = BOARD_RULES.px_to_in(50)        # straight line when this short
    axis_tolerance_in: float = BOARD_RULES.px_to_in(20)    # "nearly horizontal/vertical"
    search_padding_in: float = BOARD_RULES.px_to_in(100)   # A* region beyond the obstacles
    perimeter_margin_in: float = BOARD_RULES.px_to_in(50)
    emergency_offset_in: float = BOARD_RULES.px_to_in(100)
    smooth_threshold_in: float = BOARD_RULES.px_to_in(20)  # zigzag removal tolerance

    turn_penalty: int = 2               # A* cost for changing direction
    max_iterations: int = 10_000        # A* node expansions before giving up
    max_snap_radius: int = 20           # cells searched for a free start/goal cell


# Module-level defaults (used when no RouterConfig is passed)
_DEFAULT_CFG = RouterConfig()

GRID_CELL_IN = _DEFAULT_CFG.grid_cell_in
OBSTACLE_MARGIN_IN = _DEFAULT_CFG.obstacle_margin_in
STANDOFF_IN = _DEFAULT_CFG.standoff_in
TURN_PENALTY = _DEFAULT_CFG.turn_penalty
MAX_ITERATIONS = _DEFAULT_CFG.max_iterations

STANDARD_LENGTHS_IN = (6, 12, 18, 24, 36, 48, 72, 120)
LONG_CABLE_IN = 24
