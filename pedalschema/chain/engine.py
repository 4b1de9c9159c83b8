"""Signal chain engine — default ordering, rule pass, zoning, diagnostics."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Sequence

from pedalschema.catalog.models import (
    Pedal, PlacedPedal, CatalogLike, catalog_map, lookup_pedal,
)

from .models import ChainContext, ChainWarning, ChainSuggestion, SignalChainResult
from .rules import (
    ChainRule, SIGNAL_CHAIN_RULES, apply_rule,
    HIGH_GAIN_CATEGORIES, TIME_CATEGORIES,
)


log = logging.getLogger(__name__)

# Zones in signal order: guitar → front → hub → amp loop.
ZONE_ORDER = ("front_of_amp", "four_cable_hub", "effects_loop")


def _base_location(pedal: Pedal, context: ChainContext) -> str:
    if pedal.preferred_location == "effects_loop" and context.loop_active:
        return "effects_loop"
    return "front_of_amp"


def compute_signal_chain(
    placed_pedals: Sequence[PlacedPedal],
    catalog: CatalogLike,
    context: ChainContext,
    *,
    rules: Iterable[ChainRule] = SIGNAL_CHAIN_RULES,
) -> SignalChainResult:
    """Order pedals into a chain and assign each to a routing zone.

    Parameters
    ----------
    placed_pedals : sequence of PlacedPedal
        Current placements, in any order.  Not modified.
    catalog : CatalogResult, mapping or iterable of Pedal
        Catalog the placements refer to.
    context : ChainContext
        Amp capabilities and routing choices.
    rules : iterable of ChainRule
        Rule set; applied in descending priority.

    Returns
    -------
    SignalChainResult
        Fresh PlacedPedal copies in signal order with dense per-zone
        ``chain_position`` values, plus warnings and suggestions.
    """
    pedals = catalog_map(catalog)

    chain = [
        replace(p, location=_base_location(lookup_pedal(p, pedals), context))
        for p in placed_pedals
    ]
    chain.sort(key=lambda p: pedals[p.pedal_id].chain_order)

    for rule in sorted(rules, key=lambda r: -r.priority):
        chain = apply_rule(rule, chain, pedals, context)

    if not context.use_effects_loop:
        chain = [replace(p, location="front_of_amp") if p.location != "front_of_amp" else p
                 for p in chain]

    ordered: list[PlacedPedal] = []
    for zone in ZONE_ORDER:
        members = [p for p in chain if p.location == zone]
        for i, p in enumerate(members, start=1):
            ordered.append(replace(p, chain_position=i))

    log.debug("Signal chain: %s", " → ".join(
        f"{pedals[p.pedal_id].name}[{p.location}:{p.chain_position}]" for p in ordered))

    return SignalChainResult(
        ordered_pedals=ordered,
        warnings=detect_warnings(ordered, pedals),
        suggestions=generate_suggestions(ordered, pedals, context),
    )


# ── Diagnostics ────────────────────────────────────────────────────


def detect_warnings(
    ordered: Sequence[PlacedPedal],
    pedals: dict[str, Pedal],
) -> list[ChainWarning]:
    """Flag orderings that tend to sound bad."""
    warnings: list[ChainWarning] = []
    cats = [pedals[p.pedal_id].category for p in ordered]

    high_gain = [p.id for p, c in zip(ordered, cats) if c in HIGH_GAIN_CATEGORIES]
    if high_gain and "delay" in cats and "noise_gate" not in cats:
        warnings.append(ChainWarning(
            type="noise",
            message="High-gain pedals before delay may cause noise in delay trails",
            suggestion="Consider adding a noise gate after your drive section",
            severity="info",
            pedal_ids=high_gain,
        ))

    buffered = False
    for p in ordered:
        pedal = pedals[p.pedal_id]
        if pedal.category == "fuzz" and pedal.needs_direct_pickup and buffered:
            warnings.append(ChainWarning(
                type="tone",
                message=f"{pedal.name} may not respond well after buffered pedals",
                suggestion="Move this fuzz to the beginning of your chain for best tone",
                severity="warning",
                pedal_ids=[p.id],
            ))
        # Tuners buffer unless they are true-bypass designs.
        if pedal.category == "tuner" and not pedal.needs_direct_pickup:
            buffered = True

    seen_high_gain = False
    for p, cat in zip(ordered, cats):
        if cat in HIGH_GAIN_CATEGORIES:
            seen_high_gain = True
        elif cat == "compressor" and seen_high_gain:
            warnings.append(ChainWarning(
                type="tone",
                message="Compressor after distortion is unusual",
                suggestion="Compressors typically go before drive for sustain, "
                           "but after can work for limiting",
                severity="info",
                pedal_ids=[p.id],
            ))
            break

    return warnings


def generate_suggestions(
    ordered: Sequence[PlacedPedal],
    pedals: dict[str, Pedal],
    context: ChainContext,
) -> list[ChainSuggestion]:
    suggestions: list[ChainSuggestion] = []
    in_chain = [pedals[p.pedal_id] for p in ordered]
    cats = {pedal.category for pedal in in_chain}

    if context.amp_has_effects_loop and not context.use_effects_loop and cats & TIME_CATEGORIES:
        suggestions.append(ChainSuggestion(
            type="routing",
            message="Your amp has an effects loop",
            suggestion="Consider enabling the effects loop for cleaner delay and reverb",
        ))

    if cats & HIGH_GAIN_CATEGORIES and "noise_gate" not in cats:
        suggestions.append(ChainSuggestion(
            type="optimization",
            message="High-gain setup detected",
            suggestion="A noise gate could help control noise from your drive pedals",
        ))

    if (context.amp_has_effects_loop and not context.use_4_cable_method
            and any(pedal.supports_4_cable for pedal in in_chain)):
        suggestions.append(ChainSuggestion(
            type="routing",
            message="4-cable method available",
            suggestion="One of your pedals supports the 4-cable method, letting it "
                       "sit both before and after your amp's preamp",
        ))

    has_buffer = False
    for pedal in in_chain:
        if pedal.needs_buffer_before and not has_buffer:
            suggestions.append(ChainSuggestion(
                type="buffer",
                message=f"{pedal.name} works best with a buffered signal",
                suggestion="Place a buffered pedal (such as a tuner) before it",
            ))
            break
        if pedal.category == "tuner" and not pedal.needs_direct_pickup:
            has_buffer = True

    return suggestions


# ── Helpers for the host ───────────────────────────────────────────


def provisional_chain_position(
    new_pedal: Pedal,
    existing: Sequence[PlacedPedal],
    catalog: CatalogLike,
) -> int:
    """Chain position to give a pedal as it is dropped onto the board.

    One past the highest position held by a pedal that conventionally
    comes earlier, or 1 when none does.
    """
    pedals = catalog_map(catalog)
    position = 1
    for p in existing:
        other = lookup_pedal(p, pedals)
        if other.chain_order < new_pedal.chain_order:
            position = max(position, p.chain_position + 1)
    return position


def applicable_rules(
    pedal: Pedal,
    context: ChainContext,
    rules: Iterable[ChainRule] = SIGNAL_CHAIN_RULES,
) -> list[str]:
    """Ids of the rules that would act on *pedal* under *context*."""
    return [r.id for r in sorted(rules, key=lambda r: -r.priority)
            if r.applies_to(pedal, context)]
