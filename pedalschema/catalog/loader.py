"""Catalog loader — reads a pedal/board JSON document, parses and validates it."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .models import (
    Jack, Rail, Board, Pedal,
    ValidationError, CatalogResult,
    PEDAL_CATEGORIES, JACK_TYPES, JACK_SIDES, PREFERRED_LOCATIONS,
)


log = logging.getLogger(__name__)


# ── Validation ─────────────────────────────────────────────────────

def _validate_pedal(pedal: Pedal) -> list[ValidationError]:
    """Run all validation checks on a single pedal."""
    errs: list[ValidationError] = []
    pid = pedal.id

    if pedal.width_inches <= 0:
        errs.append(ValidationError(pid, "width_inches", "Must be > 0"))
    if pedal.depth_inches <= 0:
        errs.append(ValidationError(pid, "depth_inches", "Must be > 0"))

    if pedal.category not in PEDAL_CATEGORIES:
        errs.append(ValidationError(pid, "category", f"Unknown category '{pedal.category}'"))
    if pedal.preferred_location not in PREFERRED_LOCATIONS:
        errs.append(ValidationError(pid, "preferred_location",
                                    f"Unknown location '{pedal.preferred_location}'"))

    seen: set[str] = set()
    for i, jack in enumerate(pedal.jacks):
        where = f"jacks[{i}]"
        if jack.type not in JACK_TYPES:
            errs.append(ValidationError(pid, f"{where}.type", f"Unknown jack type '{jack.type}'"))
        if jack.side not in JACK_SIDES:
            errs.append(ValidationError(pid, f"{where}.side", f"Unknown side '{jack.side}'"))
        if not 0 <= jack.position_percent <= 100:
            errs.append(ValidationError(pid, f"{where}.position_percent",
                                        f"{jack.position_percent} outside [0, 100]"))
        if jack.type in seen:
            errs.append(ValidationError(pid, f"{where}.type", f"Duplicate '{jack.type}' jack"))
        seen.add(jack.type)

    # Missing signal jacks are tolerated (the router synthesizes them),
    # but worth reporting for user-entered pedals.
    for needed in ("input", "output"):
        if needed not in seen:
            errs.append(ValidationError(pid, "jacks", f"No '{needed}' jack; a default will be used"))

    return errs


def _validate_board(board: Board) -> list[ValidationError]:
    errs: list[ValidationError] = []
    bid = board.id
    if board.width_inches <= 0:
        errs.append(ValidationError(bid, "width_inches", "Must be > 0"))
    if board.depth_inches <= 0:
        errs.append(ValidationError(bid, "depth_inches", "Must be > 0"))
    for i, rail in enumerate(board.rails):
        if not 0 <= rail.position_from_back_inches <= board.depth_inches:
            errs.append(ValidationError(bid, f"rails[{i}].position_from_back_inches",
                                        f"{rail.position_from_back_inches} outside [0, {board.depth_inches}]"))
    return errs


# ── Parsing ────────────────────────────────────────────────────────

def _parse_jack(data: dict) -> Jack:
    return Jack(
        type=data["type"],
        side=data["side"],
        position_percent=float(data.get("position_percent", 50.0)),
        label=data.get("label", ""),
    )


def _parse_rail(data: dict) -> Rail:
    return Rail(
        position_from_back_inches=float(data["position_from_back_inches"]),
        sort_order=int(data.get("sort_order", 0)),
    )


def parse_pedal(data: dict) -> Pedal:
    return Pedal(
        id=data["id"],
        name=data.get("name", data["id"]),
        category=data["category"],
        width_inches=float(data["width_inches"]),
        depth_inches=float(data["depth_inches"]),
        jacks=[_parse_jack(j) for j in data.get("jacks", [])],
        default_chain_position=data.get("default_chain_position"),
        preferred_location=data.get("preferred_location", "flexible"),
        supports_4_cable=data.get("supports_4_cable", False),
        needs_buffer_before=data.get("needs_buffer_before", False),
        needs_direct_pickup=data.get("needs_direct_pickup", False),
        manufacturer=data.get("manufacturer", ""),
    )


def parse_board(data: dict) -> Board:
    return Board(
        id=data["id"],
        name=data.get("name", data["id"]),
        width_inches=float(data["width_inches"]),
        depth_inches=float(data["depth_inches"]),
        rails=[_parse_rail(r) for r in data.get("rails", [])],
    )


def parse_catalog(raw: dict) -> CatalogResult:
    """Parse and validate an in-memory catalog document.

    Entries that fail to parse are skipped (error recorded).
    Entries that parse but have validation issues are still included.
    """
    pedals: list[Pedal] = []
    boards: list[Board] = []
    errors: list[ValidationError] = []

    seen_ids: set[str] = set()
    for i, entry in enumerate(raw.get("pedals", [])):
        try:
            pedal = parse_pedal(entry)
        except (KeyError, TypeError, ValueError) as exc:
            errors.append(ValidationError(
                entry.get("id", f"pedals[{i}]") if isinstance(entry, dict) else f"pedals[{i}]",
                "parse", f"Parse error: {exc!r}"))
            continue
        if pedal.id in seen_ids:
            errors.append(ValidationError(pedal.id, "id", "Duplicate pedal ID"))
            continue
        seen_ids.add(pedal.id)
        errors.extend(_validate_pedal(pedal))
        pedals.append(pedal)

    for i, entry in enumerate(raw.get("boards", [])):
        try:
            board = parse_board(entry)
        except (KeyError, TypeError, ValueError) as exc:
            errors.append(ValidationError(
                entry.get("id", f"boards[{i}]") if isinstance(entry, dict) else f"boards[{i}]",
                "parse", f"Parse error: {exc!r}"))
            continue
        errors.extend(_validate_board(board))
        boards.append(board)

    return CatalogResult(pedals=pedals, boards=boards, errors=errors)


# ── Public API ─────────────────────────────────────────────────────

def load_catalog(path: Path | str) -> CatalogResult:
    """Load a catalog JSON file ``{"pedals": [...], "boards": [...]}``."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        return CatalogResult(pedals=[], errors=[
            ValidationError(path.stem, "json", f"Parse error: {exc}")])
    except OSError as exc:
        return CatalogResult(pedals=[], errors=[
            ValidationError(path.stem, "file", f"Read error: {exc}")])

    result = parse_catalog(raw)
    log.info("Catalog %s: %d pedals, %d boards, %d issues",
             path.name, len(result.pedals), len(result.boards), len(result.errors))
    return result
