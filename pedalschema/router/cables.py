"""Cable bill of materials — shopping list, totals and display helpers."""

from __future__ import annotations

from typing import Sequence

from .models import Cable, CableListItem, CableSummary, LONG_CABLE_IN


_TYPE_ORDER = {"patch": 0, "instrument": 1, "power": 2}

_DESCRIPTIONS = {
    "patch": "Patch cable (pedal to pedal)",
    "instrument": "Instrument cable (guitar/amp connections)",
    "power": "Power cable",
}


def format_length(inches: float) -> str:
    """6 → 6", 24 → 2', 18 → 1'6"."""
    n = int(round(inches))
    if n < 12:
        return f'{n}"'
    feet, rest = divmod(n, 12)
    if rest == 0:
        return f"{feet}'"
    return f"{feet}'{rest}\""


def cable_list(cables: Sequence[Cable]) -> list[CableListItem]:
    """Group cables by type and stock length into a shopping list."""
    grouped: dict[tuple[str, float], CableListItem] = {}
    for c in cables:
        key = (c.cable_type, c.calculated_length_inches)
        item = grouped.get(key)
        if item is None:
            grouped[key] = CableListItem(
                cable_type=c.cable_type,
                length_inches=c.calculated_length_inches,
                length_display=format_length(c.calculated_length_inches),
                count=1,
                description=_DESCRIPTIONS.get(c.cable_type, c.cable_type),
            )
        else:
            item.count += 1
    return sorted(grouped.values(),
                  key=lambda i: (_TYPE_ORDER.get(i.cable_type, 99), i.length_inches))


def total_cable_length(cables: Sequence[Cable]) -> dict[str, float]:
    """Stock length totals per cable type, plus ``total``."""
    totals = {"patch": 0.0, "instrument": 0.0, "power": 0.0, "total": 0.0}
    for c in cables:
        totals[c.cable_type] = totals.get(c.cable_type, 0.0) + c.calculated_length_inches
        totals["total"] += c.calculated_length_inches
    return totals


def cable_summary(cables: Sequence[Cable]) -> CableSummary:
    return CableSummary(
        instrument_count=sum(1 for c in cables if c.cable_type == "instrument"),
        patch_count=sum(1 for c in cables if c.cable_type == "patch"),
        long_cable_count=sum(1 for c in cables if c.calculated_length_inches > LONG_CABLE_IN),
        total_count=len(cables),
        total_length_inches=sum(c.calculated_length_inches for c in cables),
        defect_count=sum(1 for c in cables if c.routing_defect),
    )
