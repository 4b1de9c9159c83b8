"""Catalog dataclasses — typed representations of boards, pedals and placements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Union


# ── Closed vocabularies ────────────────────────────────────────────

PEDAL_CATEGORIES = (
    "tuner", "filter", "compressor", "pitch", "boost", "overdrive",
    "distortion", "fuzz", "noise_gate", "eq", "modulation", "tremolo",
    "delay", "reverb", "looper", "volume", "utility", "multi_fx",
)

JACK_TYPES = (
    "input", "output", "send", "return", "power",
    "expression", "midi_in", "midi_out",
)

JACK_SIDES = ("top", "right", "bottom", "left")     # clockwise

CHAIN_LOCATIONS = ("front_of_amp", "effects_loop", "four_cable_hub")
PREFERRED_LOCATIONS = CHAIN_LOCATIONS + ("flexible",)

ROUTING_MODES = ("standard", "loop", "4cable")

VALID_ROTATIONS = (0, 90, 180, 270)

# Where a category sits in a conventional chain when nothing else applies.
CATEGORY_DEFAULT_ORDER: dict[str, int] = {
    "tuner": 10,
    "filter": 20,
    "compressor": 30,
    "pitch": 40,
    "boost": 50,
    "overdrive": 60,
    "distortion": 70,
    "fuzz": 80,
    "noise_gate": 90,
    "eq": 100,
    "multi_fx": 100,
    "modulation": 110,
    "tremolo": 120,
    "delay": 130,
    "reverb": 140,
    "volume": 150,
    "looper": 160,
    "utility": 200,
}
UNKNOWN_CATEGORY_ORDER = 100

CATEGORY_LABELS: dict[str, str] = {
    "tuner": "Tuner",
    "filter": "Filter / Wah",
    "compressor": "Compressor",
    "pitch": "Pitch / Octave",
    "boost": "Boost",
    "overdrive": "Overdrive",
    "distortion": "Distortion",
    "fuzz": "Fuzz",
    "noise_gate": "Noise Gate",
    "eq": "EQ",
    "modulation": "Modulation",
    "tremolo": "Tremolo",
    "delay": "Delay",
    "reverb": "Reverb",
    "looper": "Looper",
    "volume": "Volume",
    "utility": "Utility",
    "multi_fx": "Multi-FX",
}


def category_order(category: str) -> int:
    return CATEGORY_DEFAULT_ORDER.get(category, UNKNOWN_CATEGORY_ORDER)


# ── Catalog entities ───────────────────────────────────────────────


@dataclass
class Jack:
    type: str                           # one of JACK_TYPES
    side: str                           # "top" | "right" | "bottom" | "left"
    position_percent: float = 50.0      # along the side, from left / from top
    label: str = ""


@dataclass
class Rail:
    position_from_back_inches: float
    sort_order: int = 0


@dataclass
class Board:
    id: str
    name: str
    width_inches: float
    depth_inches: float
    rails: list[Rail] = field(default_factory=list)

    def sorted_rails(self) -> list[Rail]:
        return sorted(self.rails, key=lambda r: r.sort_order)


@dataclass
class Pedal:
    id: str
    name: str
    category: str                       # one of PEDAL_CATEGORIES
    width_inches: float
    depth_inches: float
    jacks: list[Jack] = field(default_factory=list)
    default_chain_position: int | None = None    # overrides the category order
    preferred_location: str = "flexible"
    supports_4_cable: bool = False
    needs_buffer_before: bool = False
    needs_direct_pickup: bool = False
    manufacturer: str = ""

    def jack(self, jack_type: str) -> Jack | None:
        for j in self.jacks:
            if j.type == jack_type:
                return j
        return None

    def has_jack(self, jack_type: str) -> bool:
        return self.jack(jack_type) is not None

    @property
    def chain_order(self) -> int:
        if self.default_chain_position is not None:
            return self.default_chain_position
        return category_order(self.category)


# ── Placement ──────────────────────────────────────────────────────


@dataclass
class PlacedPedal:
    """One instance of a catalog pedal sitting on a board."""

    id: str
    pedal_id: str
    x_inches: float = 0.0               # top-left corner, from the board's left edge
    y_inches: float = 0.0               # top-left corner, from the board's back edge
    rotation_degrees: int = 0           # 0, 90, 180, 270
    chain_position: int = 0             # 1-based within its location
    location: str = "front_of_amp"      # one of CHAIN_LOCATIONS
    is_active: bool = True
    use_loop: bool = False              # route drive pedals through this pedal's send/return


@dataclass
class PedalRoutingConfig:
    pedal_id: str                       # PlacedPedal.id
    mode: str = "standard"              # one of ROUTING_MODES
    loop_pedal_ids: list[str] = field(default_factory=list)


@dataclass
class RoutingConfig:
    use_effects_loop: bool = False
    use_4_cable_method: bool = False
    amp_has_effects_loop: bool = True
    pedal_configs: list[PedalRoutingConfig] = field(default_factory=list)

    @property
    def effects_loop_enabled(self) -> bool:
        return self.use_effects_loop and self.amp_has_effects_loop

    def config_for(self, placed_id: str) -> PedalRoutingConfig | None:
        for cfg in self.pedal_configs:
            if cfg.pedal_id == placed_id:
                return cfg
        return None


# ── Loading results and errors ─────────────────────────────────────


@dataclass
class ValidationError:
    entity_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.entity_id}] {self.field}: {self.message}"


@dataclass
class CatalogResult:
    """Result of loading a catalog — pedals, boards + any validation errors."""
    pedals: list[Pedal]
    boards: list[Board] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


class UnknownPedalError(KeyError):
    """Raised when a placement references a pedal missing from the catalog."""

    def __init__(self, placed_id: str, pedal_id: str) -> None:
        self.placed_id = placed_id
        self.pedal_id = pedal_id
        super().__init__(f"Placement '{placed_id}' references unknown pedal '{pedal_id}'")


CatalogLike = Union[CatalogResult, Mapping[str, Pedal], Iterable[Pedal]]


def catalog_map(catalog: CatalogLike) -> dict[str, Pedal]:
    """Normalise any accepted catalog form into ``{pedal_id: Pedal}``."""
    if isinstance(catalog, CatalogResult):
        return {p.id: p for p in catalog.pedals}
    if isinstance(catalog, dict):
        return catalog
    if isinstance(catalog, Mapping):
        return dict(catalog)
    return {p.id: p for p in catalog}


def lookup_pedal(placed: PlacedPedal, pedals: Mapping[str, Pedal]) -> Pedal:
    try:
        return pedals[placed.pedal_id]
    except KeyError:
        raise UnknownPedalError(placed.id, placed.pedal_id) from None
