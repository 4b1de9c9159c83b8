"""Routing serialization — JSON conversion."""

from __future__ import annotations

from .models import Cable, Endpoint


def _endpoint_to_dict(e: Endpoint) -> dict:
    return {"kind": e.kind, "pedal_id": e.pedal_id, "jack": e.jack}


def _parse_endpoint(data: dict) -> Endpoint:
    return Endpoint(kind=data["kind"], pedal_id=data.get("pedal_id"), jack=data.get("jack"))


def cables_to_dict(cables: list[Cable]) -> dict:
    """Serialize routed cables to a JSON-safe dict."""
    return {
        "cables": [
            {
                "from": _endpoint_to_dict(c.source),
                "to": _endpoint_to_dict(c.target),
                "cable_type": c.cable_type,
                "calculated_length_inches": c.calculated_length_inches,
                "routed_length_inches": round(c.routed_length_inches, 3),
                "path": [list(p) for p in c.path],
                "strategy": c.strategy,
                "sort_order": c.sort_order,
                "routing_defect": c.routing_defect,
            }
            for c in cables
        ],
        "defect_count": sum(1 for c in cables if c.routing_defect),
    }


def parse_cables(data: dict) -> list[Cable]:
    """Parse a cables dict back into Cable objects."""
    return [
        Cable(
            source=_parse_endpoint(c["from"]),
            target=_parse_endpoint(c["to"]),
            cable_type=c["cable_type"],
            calculated_length_inches=c["calculated_length_inches"],
            routed_length_inches=c.get("routed_length_inches", 0.0),
            path=[tuple(p) for p in c.get("path", [])],
            strategy=c.get("strategy", ""),
            sort_order=c.get("sort_order", 0),
            routing_defect=c.get("routing_defect", False),
        )
        for c in data.get("cables", [])
    ]
