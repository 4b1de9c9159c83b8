"""Shared physical constants for the layout and wiring engine.

These values describe how close pedals may sit, how far a cable must
stay from a pedal body, and how the routing grid is discretized.  Both
the **layout optimizer** (which reserves routing room between pedals)
and the **cable router** (which lays down actual cable paths) derive
their clearance parameters from this single source of truth.

All distances are in inches.  The renderer draws at
``pixels_per_inch``; the pixel-tuned routing constants are stored here
already converted.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BoardRules:
    """Physical design rules for pedal placement and cable routing."""

    pixels_per_inch: float = 40.0
    """Rendering scale the routing constants were tuned at."""

    min_spacing_in: float = 0.5
    """Minimum edge-to-edge gap between two placed pedals."""

    edge_margin_in: float = 0.5
    """Preferred gap between a seeded pedal and the board edge."""

    obstacle_margin_in: float = 0.625
    """Inflation applied to a pedal box when a cable is tested against it
    (25 px)."""

    standoff_in: float = 1.0
    """Distance a cable leaves a jack along the edge normal before it
    turns (40 px)."""

    grid_cell_in: float = 0.2
    """A* routing-grid cell size (8 px)."""

    external_offset_in: float = 3.0
    """How far outside the board the guitar and amp endpoints sit."""

    rail_snap_in: float = 0.5
    """A dropped pedal within this distance of a rail snaps onto it."""

    overlap_area_threshold: float = 0.5
    """Intersection area (sq in) above which a collision is an overlap
    rather than a clearance problem."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def min_cable_clearance_in(self) -> float:
        """Gap between pedals below which orthogonal routing gets cramped.

        Three obstacle margins: one per pedal plus one channel for the
        cable itself (75 px).
        """
        return self.obstacle_margin_in * 3

    def px_to_in(self, px: float) -> float:
        """Convert a rendering-scale distance to inches."""
        return px / self.pixels_per_inch


# Module-level singleton, importable everywhere.
BOARD_RULES = BoardRules()
