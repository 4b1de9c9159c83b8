"""Collision output dataclasses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Collision:
    """Two placed pedals whose footprints intersect."""

    pedal_ids: tuple[str, str]          # PlacedPedal ids, in input order
    severity: str                       # "overlap" | "clearance"
    overlap_area: float = 0.0


@dataclass
class PlacementCheck:
    valid: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.valid

    def __iter__(self):
        # Allows ``valid, reason = is_valid_placement(...)``
        yield self.valid
        yield self.reason
