"""Pedal catalog — data model, load, validate, and serialize pedals and boards."""

from .models import (
    Jack, Rail, Board, Pedal, PlacedPedal, PedalRoutingConfig, RoutingConfig,
    ValidationError, CatalogResult, UnknownPedalError,
    PEDAL_CATEGORIES, JACK_TYPES, JACK_SIDES, CHAIN_LOCATIONS, ROUTING_MODES,
    VALID_ROTATIONS, CATEGORY_DEFAULT_ORDER, CATEGORY_LABELS,
    category_order, catalog_map, lookup_pedal,
)
from .loader import load_catalog, parse_catalog, parse_pedal, parse_board
from .serialization import (
    catalog_to_dict, pedal_to_dict, board_to_dict,
    placement_to_dict, parse_placed_pedal,
)

__all__ = [
    # Models
    "Jack", "Rail", "Board", "Pedal", "PlacedPedal",
    "PedalRoutingConfig", "RoutingConfig",
    "ValidationError", "CatalogResult", "UnknownPedalError",
    "PEDAL_CATEGORIES", "JACK_TYPES", "JACK_SIDES", "CHAIN_LOCATIONS",
    "ROUTING_MODES", "VALID_ROTATIONS", "CATEGORY_DEFAULT_ORDER", "CATEGORY_LABELS",
    "category_order", "catalog_map", "lookup_pedal",
    # Loader
    "load_catalog", "parse_catalog", "parse_pedal", "parse_board",
    # Serialization
    "catalog_to_dict", "pedal_to_dict", "board_to_dict",
    "placement_to_dict", "parse_placed_pedal",
]
