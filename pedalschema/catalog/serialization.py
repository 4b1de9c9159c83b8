"""Catalog serialization — convert dataclasses to JSON-safe dicts and back."""

from __future__ import annotations

from typing import Any

from .models import Pedal, Board, PlacedPedal, CatalogResult


def catalog_to_dict(result: CatalogResult) -> dict:
    """Serialize a CatalogResult to a JSON-safe dict for the host."""
    return {
        "ok": result.ok,
        "pedal_count": len(result.pedals),
        "pedals": [pedal_to_dict(p) for p in result.pedals],
        "boards": [board_to_dict(b) for b in result.boards],
        "errors": [{"entity_id": e.entity_id, "field": e.field, "message": e.message}
                   for e in result.errors],
    }


def pedal_to_dict(p: Pedal) -> dict:
    d: dict[str, Any] = {
        "id": p.id,
        "name": p.name,
        "category": p.category,
        "width_inches": p.width_inches,
        "depth_inches": p.depth_inches,
        "jacks": [
            {
                "type": j.type,
                "side": j.side,
                "position_percent": j.position_percent,
                "label": j.label,
            }
            for j in p.jacks
        ],
        "preferred_location": p.preferred_location,
        "supports_4_cable": p.supports_4_cable,
        "needs_buffer_before": p.needs_buffer_before,
        "needs_direct_pickup": p.needs_direct_pickup,
    }
    if p.default_chain_position is not None:
        d["default_chain_position"] = p.default_chain_position
    if p.manufacturer:
        d["manufacturer"] = p.manufacturer
    return d


def board_to_dict(b: Board) -> dict:
    return {
        "id": b.id,
        "name": b.name,
        "width_inches": b.width_inches,
        "depth_inches": b.depth_inches,
        "rails": [
            {"position_from_back_inches": r.position_from_back_inches,
             "sort_order": r.sort_order}
            for r in b.rails
        ],
    }


def placement_to_dict(p: PlacedPedal) -> dict:
    """Serialize a PlacedPedal for host persistence."""
    return {
        "id": p.id,
        "pedal_id": p.pedal_id,
        "x_inches": p.x_inches,
        "y_inches": p.y_inches,
        "rotation_degrees": p.rotation_degrees,
        "chain_position": p.chain_position,
        "location": p.location,
        "is_active": p.is_active,
        "use_loop": p.use_loop,
    }


def parse_placed_pedal(data: dict) -> PlacedPedal:
    """Parse a host placement record back into a PlacedPedal."""
    return PlacedPedal(
        id=data["id"],
        pedal_id=data["pedal_id"],
        x_inches=float(data.get("x_inches", 0.0)),
        y_inches=float(data.get("y_inches", 0.0)),
        rotation_degrees=int(data.get("rotation_degrees", 0)),
        chain_position=int(data.get("chain_position", 0)),
        location=data.get("location", "front_of_amp"),
        is_active=data.get("is_active", True),
        use_loop=data.get("use_loop", False),
    )
