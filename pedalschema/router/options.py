"""Per-pedal routing options offered to the host."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from pedalschema.catalog.models import Pedal, PlacedPedal, CatalogLike, catalog_map

from .topology import LOOP_CATEGORIES


@dataclass
class PedalRoutingInfo:
    has_input: bool
    has_output: bool
    has_send: bool
    has_return: bool
    supports_4_cable: bool
    modes: list[str] = field(default_factory=list)      # subset of ROUTING_MODES


def analyze_pedal_routing(pedal: Pedal) -> PedalRoutingInfo:
    """Which routing modes a pedal's jacks make possible."""
    info = PedalRoutingInfo(
        has_input=pedal.has_jack("input"),
        has_output=pedal.has_jack("output"),
        has_send=pedal.has_jack("send"),
        has_return=pedal.has_jack("return"),
        supports_4_cable=pedal.supports_4_cable,
    )
    if info.has_input and info.has_output:
        info.modes.append("standard")
    if info.has_send and info.has_return:
        info.modes.append("loop")
        if pedal.supports_4_cable:
            info.modes.append("4cable")
    return info


def loop_candidates(
    loop_pedal_id: str,
    placed: Sequence[PlacedPedal],
    catalog: CatalogLike,
) -> list[PlacedPedal]:
    """Placed drive pedals that could sit in another pedal's send/return loop."""
    pedals = catalog_map(catalog)
    out = []
    for p in placed:
        if p.id == loop_pedal_id:
            continue
        pedal = pedals.get(p.pedal_id)
        if pedal is not None and pedal.category in LOOP_CATEGORIES:
            out.append(p)
    return out
