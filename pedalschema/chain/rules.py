"""Ordering rules expressed as data, plus the interpreter that applies them.

Each rule names an action, a selector for the pedals it moves, an
optional anchor selector, and the context flags that must all be set
for it to fire.  ``apply_rule`` is the only place that knows what the
actions mean.  Every action is idempotent: applying a rule to its own
output changes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Mapping

from pedalschema.catalog.models import Pedal, PlacedPedal

from .models import ChainContext


class RuleAction(Enum):
    MOVE_TO_FRONT = auto()      # anchors first, then targets, then the rest
    INSERT_AFTER_LAST = auto()  # targets ahead of the last anchor move just behind it
    MOVE_TO_END = auto()        # targets last, but ahead of any anchors
    RELOCATE = auto()           # targets change routing zone


@dataclass(frozen=True)
class PedalMatch:
    """Selects catalog pedals by category and capability flags."""

    categories: frozenset[str] = frozenset()
    direct_pickup: bool | None = None
    supports_4_cable: bool | None = None

    def matches(self, pedal: Pedal) -> bool:
        if self.categories and pedal.category not in self.categories:
            return False
        if self.direct_pickup is not None and pedal.needs_direct_pickup != self.direct_pickup:
            return False
        if self.supports_4_cable is not None and pedal.supports_4_cable != self.supports_4_cable:
            return False
        return True


@dataclass(frozen=True)
class ChainRule:
    id: str
    name: str
    description: str
    priority: int
    action: RuleAction
    target: PedalMatch
    anchor: PedalMatch | None = None
    location: str | None = None         # RELOCATE only
    requires: tuple[str, ...] = ()      # ChainContext flags that must all be true
    first_only: bool = False            # RELOCATE only the first match

    def enabled(self, context: ChainContext) -> bool:
        return all(getattr(context, flag) for flag in self.requires)

    def applies_to(self, pedal: Pedal, context: ChainContext) -> bool:
        return self.enabled(context) and self.target.matches(pedal)


def _match(sel: PedalMatch | None, p: PlacedPedal, pedals: Mapping[str, Pedal]) -> bool:
    return sel is not None and sel.matches(pedals[p.pedal_id])


def apply_rule(
    rule: ChainRule,
    chain: list[PlacedPedal],
    pedals: Mapping[str, Pedal],
    context: ChainContext,
) -> list[PlacedPedal]:
    """Return *chain* re-permuted or re-zoned by one rule."""
    if not rule.enabled(context):
        return list(chain)

    if rule.action is RuleAction.MOVE_TO_FRONT:
        anchors = [p for p in chain if _match(rule.anchor, p, pedals)]
        targets = [p for p in chain
                   if _match(rule.target, p, pedals) and not _match(rule.anchor, p, pedals)]
        moved = {id(p) for p in anchors + targets}
        return anchors + targets + [p for p in chain if id(p) not in moved]

    if rule.action is RuleAction.INSERT_AFTER_LAST:
        last = -1
        for i, p in enumerate(chain):
            if _match(rule.anchor, p, pedals):
                last = i
        if last < 0:
            return list(chain)
        head = chain[:last + 1]
        moved = [p for p in head if _match(rule.target, p, pedals)]
        kept = [p for p in head if not _match(rule.target, p, pedals)]
        return kept + moved + chain[last + 1:]

    if rule.action is RuleAction.MOVE_TO_END:
        tail = [p for p in chain if _match(rule.anchor, p, pedals)]
        targets = [p for p in chain
                   if _match(rule.target, p, pedals) and not _match(rule.anchor, p, pedals)]
        moved = {id(p) for p in tail + targets}
        return [p for p in chain if id(p) not in moved] + targets + tail

    if rule.action is RuleAction.RELOCATE:
        out: list[PlacedPedal] = []
        done = False
        for p in chain:
            if not done and _match(rule.target, p, pedals) and rule.location is not None:
                p = replace(p, location=rule.location)
                done = rule.first_only
            out.append(p)
        return out

    raise ValueError(f"Unknown rule action {rule.action!r}")


# ── Default rule set ───────────────────────────────────────────────

DRIVE_CATEGORIES = frozenset({"boost", "overdrive", "distortion", "fuzz"})
HIGH_GAIN_CATEGORIES = frozenset({"distortion", "fuzz"})
TIME_CATEGORIES = frozenset({"delay", "reverb"})
MODULATION_CATEGORIES = frozenset({"modulation", "tremolo"})

_DIRECT_FUZZ = PedalMatch(categories=frozenset({"fuzz"}), direct_pickup=True)

SIGNAL_CHAIN_RULES: tuple[ChainRule, ...] = (
    ChainRule(
        id="fuzz-first",
        name="Fuzz first",
        description="Classic fuzz circuits need an unbuffered signal straight from the pickups",
        priority=100,
        action=RuleAction.MOVE_TO_FRONT,
        target=_DIRECT_FUZZ,
    ),
    ChainRule(
        id="tuner-early",
        name="Tuner early",
        description="Tuners go at the start of the chain for a clean signal to read",
        priority=90,
        action=RuleAction.MOVE_TO_FRONT,
        target=PedalMatch(categories=frozenset({"tuner"})),
        anchor=_DIRECT_FUZZ,
    ),
    ChainRule(
        id="four-cable-hub",
        name="4-cable hub",
        description="With the 4-cable method the first capable pedal becomes the hub",
        priority=80,
        action=RuleAction.RELOCATE,
        target=PedalMatch(supports_4_cable=True),
        location="four_cable_hub",
        requires=("use_4_cable_method", "amp_has_effects_loop", "use_effects_loop"),
        first_only=True,
    ),
    ChainRule(
        id="noise-gate-after-drive",
        name="Noise gate after drive",
        description="A gate placed after the drive section catches the noise the drives add",
        priority=70,
        action=RuleAction.INSERT_AFTER_LAST,
        target=PedalMatch(categories=frozenset({"noise_gate"})),
        anchor=PedalMatch(categories=DRIVE_CATEGORIES),
    ),
    ChainRule(
        id="time-effects-in-loop",
        name="Time effects in loop",
        description="Delay and reverb sound cleaner after the preamp distortion",
        priority=60,
        action=RuleAction.RELOCATE,
        target=PedalMatch(categories=TIME_CATEGORIES),
        location="effects_loop",
        requires=("amp_has_effects_loop", "use_effects_loop"),
    ),
    ChainRule(
        id="modulation-flexible",
        name="Modulation placement",
        description="Modulation can go in front of the amp or in the loop",
        priority=50,
        action=RuleAction.RELOCATE,
        target=PedalMatch(categories=MODULATION_CATEGORIES),
        location="effects_loop",
        requires=("modulation_in_loop", "amp_has_effects_loop", "use_effects_loop"),
    ),
    ChainRule(
        id="looper-last",
        name="Looper last",
        description="A looper at the end records the complete sound",
        priority=40,
        action=RuleAction.MOVE_TO_END,
        target=PedalMatch(categories=frozenset({"looper"})),
    ),
    ChainRule(
        id="volume-end",
        name="Volume near end",
        description="A volume pedal late in the chain controls overall level without changing drive",
        priority=30,
        action=RuleAction.MOVE_TO_END,
        target=PedalMatch(categories=frozenset({"volume"})),
        anchor=PedalMatch(categories=frozenset({"looper"})),
    ),
)
