"""Signal-chain inputs and outputs."""

from __future__ import annotations

from dataclasses import dataclass, field

from pedalschema.catalog.models import PlacedPedal


@dataclass
class ChainContext:
    """What the amp and the user's routing choices allow."""

    amp_has_effects_loop: bool = False
    use_effects_loop: bool = False
    use_4_cable_method: bool = False
    modulation_in_loop: bool = False

    @property
    def loop_active(self) -> bool:
        return self.amp_has_effects_loop and self.use_effects_loop


@dataclass
class ChainWarning:
    type: str                           # "noise" | "tone" | "routing" | "power"
    message: str
    suggestion: str
    severity: str = "info"              # "info" | "warning" | "error"
    pedal_ids: list[str] = field(default_factory=list)


@dataclass
class ChainSuggestion:
    type: str                           # "routing" | "optimization" | "buffer"
    message: str
    suggestion: str


@dataclass
class SignalChainResult:
    """Ordered chain, ready for the layout optimizer and router."""

    ordered_pedals: list[PlacedPedal]
    warnings: list[ChainWarning] = field(default_factory=list)
    suggestions: list[ChainSuggestion] = field(default_factory=list)

    def zone(self, location: str) -> list[PlacedPedal]:
        return [p for p in self.ordered_pedals if p.location == location]
