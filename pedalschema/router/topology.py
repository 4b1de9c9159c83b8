"""Which jack connects to which — the wiring plan before any routing.

Shared by ``route_cables`` and the layout cost function, so the
optimizer scores exactly the cables the router will draw.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from pedalschema.catalog.models import Pedal, PlacedPedal, RoutingConfig, lookup_pedal

from .models import Connection, Endpoint, GUITAR, AMP_INPUT, AMP_SEND, AMP_RETURN, jack_of


log = logging.getLogger(__name__)

ZONE_RANK = {"front_of_amp": 0, "four_cable_hub": 1, "effects_loop": 2}

LOOP_CATEGORIES = frozenset({"overdrive", "distortion", "fuzz", "boost"})

# 4-cable method: which leg of the hub a category belongs on.
BEFORE_HUB = frozenset({"tuner", "filter", "pitch"})
AMP_LOOP = frozenset({"modulation", "tremolo", "delay", "reverb"})
AFTER_HUB = frozenset({"looper", "volume"})


def signal_order(placed: Sequence[PlacedPedal]) -> list[PlacedPedal]:
    """Active pedals sorted by zone, then chain position (stable)."""
    active = [p for p in placed if p.is_active]
    return sorted(active, key=lambda p: (ZONE_RANK.get(p.location, 0), p.chain_position))


def _daisy_chain(
    source: Endpoint,
    pedals: Sequence[PlacedPedal],
    target: Endpoint,
) -> list[Connection]:
    """source → p1.input, p1.output → p2.input, …, pn.output → target."""
    out: list[Connection] = []
    prev = source
    for p in pedals:
        out.append(Connection(prev, jack_of(p.id, "input")))
        prev = jack_of(p.id, "output")
    out.append(Connection(prev, target))
    return out


def _find_hub(
    chain: Sequence[PlacedPedal],
    routing: RoutingConfig,
) -> PlacedPedal | None:
    for p in chain:
        cfg = routing.config_for(p.id)
        if p.location == "four_cable_hub" or (cfg is not None and cfg.mode == "4cable"):
            return p
    return None


def _find_loop_host(
    chain: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
    routing: RoutingConfig,
) -> tuple[PlacedPedal, list[str]] | None:
    """The pedal whose send/return hosts other pedals, with the hosted ids.

    Missing send/return jacks are synthesized when the cables are routed,
    so only the routing config and ``supports_4_cable`` gate hosting.
    """
    for p in chain:
        cfg = routing.config_for(p.id)
        if cfg is not None and cfg.mode == "loop" and cfg.loop_pedal_ids:
            return p, list(cfg.loop_pedal_ids)

    for p in chain:
        if not p.use_loop:
            continue
        pedal = lookup_pedal(p, pedals)
        if pedal.supports_4_cable:
            hosted = [q.id for q in chain
                      if q.id != p.id and lookup_pedal(q, pedals).category in LOOP_CATEGORIES]
            if hosted:
                return p, hosted
    return None


def plan_connections(
    placed: Sequence[PlacedPedal],
    pedals: Mapping[str, Pedal],
    routing: RoutingConfig,
) -> list[Connection]:
    """Build the ordered list of logical cables for a board.

    Three wiring modes, tried in order:

      4-cable    a hub pedal sits both before and inside the amp
      loop pedal one pedal's send/return hosts a set of others
      standard   guitar → front chain → amp, plus the amp's loop
    """
    chain = signal_order(placed)
    if not chain:
        return []
    loop_on = routing.effects_loop_enabled

    hub = _find_hub(chain, routing) if routing.use_4_cable_method and loop_on else None
    if hub is not None:
        before, hub_loop, amp_loop, after = [], [], [], []
        for p in chain:
            if p.id == hub.id:
                continue
            cat = lookup_pedal(p, pedals).category
            if cat in BEFORE_HUB:
                before.append(p)
            elif cat in AMP_LOOP:
                amp_loop.append(p)
            elif cat in AFTER_HUB:
                after.append(p)
            else:
                hub_loop.append(p)
        log.debug("4-cable wiring via %s: %d before, %d hub loop, %d amp loop, %d after",
                  hub.id, len(before), len(hub_loop), len(amp_loop), len(after))
        return (
            _daisy_chain(GUITAR, before, jack_of(hub.id, "input"))
            + _daisy_chain(jack_of(hub.id, "send"), hub_loop, AMP_INPUT)
            + _daisy_chain(AMP_SEND, amp_loop, jack_of(hub.id, "return"))
            + _daisy_chain(jack_of(hub.id, "output"), after, AMP_RETURN)
        )

    if loop_on:
        front = [p for p in chain if p.location != "effects_loop"]
        fx_loop = [p for p in chain if p.location == "effects_loop"]
    else:
        front, fx_loop = list(chain), []

    connections: list[Connection] = []
    host = _find_loop_host(front, pedals, routing)
    if host is not None:
        loop_pedal, hosted_ids = host
        hosted = [p for p in front if p.id in hosted_ids and p.id != loop_pedal.id]
        host_idx = front.index(loop_pedal)
        hosted_set = {p.id for p in hosted}
        rest = [(i, p) for i, p in enumerate(front)
                if p.id != loop_pedal.id and p.id not in hosted_set]
        before = [p for i, p in rest if i < host_idx]
        after = [p for i, p in rest if i > host_idx]
        log.debug("Loop wiring via %s: %d hosted", loop_pedal.id, len(hosted))
        connections += _daisy_chain(GUITAR, before, jack_of(loop_pedal.id, "input"))
        connections += _daisy_chain(jack_of(loop_pedal.id, "send"), hosted,
                                    jack_of(loop_pedal.id, "return"))
        connections += _daisy_chain(jack_of(loop_pedal.id, "output"), after, AMP_INPUT)
    else:
        connections += _daisy_chain(GUITAR, front, AMP_INPUT)

    if fx_loop:
        connections += _daisy_chain(AMP_SEND, fx_loop, AMP_RETURN)
    return connections
