"""
Boatyard — entry point.

Usage:
    python -m boatyard check DATA_DIR [--precise]
    python -m boatyard suggest DATA_DIR --boat ID --unit ID [--top N] [--rotate]
    python -m boatyard reconcile DATA_DIR [--keep-in-service] [--dry-run]
    python -m boatyard rotate-docks DATA_DIR [--delta DEG] [--dry-run]
    python -m boatyard distribute-docks DATA_DIR [--unit ID] [--dry-run]
    python -m boatyard fill DATA_DIR [--unit ID] [--status reserved|placed] [--dry-run]
    python -m boatyard clamp DATA_DIR [--unit ID] [--include-margin] [--dry-run]
    python -m boatyard prune-zones DATA_DIR NAME [NAME ...] [--dry-run]

Every command accepts ``--rules FILE.json`` (partial YardRules override)
and ``-v`` for debug logging.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from boatyard.config import YARD_RULES, YardRules, rules_from_dict
from boatyard.data import (
    YardData, candidate_to_dict, collision_to_dict, load_yard,
    save_boats, save_placements, save_restriction_zones,
)
from boatyard.maintenance import (
    apply_boat_status, prune_restriction_zones, reconcile_placements, rotate_placements,
)
from boatyard.models import StorageUnit
from boatyard.placer import (
    BoatShape, CollisionEngine, ZoneShape, clamp_placements, distribute_dock,
    fill_dock, pack_warehouse, severity, suggest_placements,
)
from boatyard.storage import classify_storage


log = logging.getLogger("boatyard")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="boatyard",
        description="Boat storage-yard placement and collision tools",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("data_dir", type=Path, help="Directory holding the yard JSON files")
    common.add_argument("--rules", type=Path, default=None,
                        help="JSON file overriding yard rules")
    common.add_argument("--dry-run", action="store_true",
                        help="Report changes without writing any file")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="cmd", required=True)

    ck = sub.add_parser("check", parents=[common], help="Report collisions in every unit")
    ck.add_argument("--precise", action="store_true",
                    help="Use rotated-rectangle tests instead of bounding boxes")

    sg = sub.add_parser("suggest", parents=[common], help="Suggest positions for a boat")
    sg.add_argument("--boat", type=int, required=True, help="Boat id")
    sg.add_argument("--unit", type=int, required=True, help="Storage unit id")
    sg.add_argument("--top", type=int, default=None, help="Number of candidates")
    sg.add_argument("--rotate", action="store_true", help="Also try 90° orientation")

    rc = sub.add_parser("reconcile", parents=[common],
                        help="Keep one placement per boat and storage category")
    rc.add_argument("--keep-in-service", action="store_true",
                    help="Leave boats marked in_service untouched")

    rd = sub.add_parser("rotate-docks", parents=[common], help="Rotate every dock placement")
    rd.add_argument("--delta", type=float, default=180.0, help="Degrees to add")

    dd = sub.add_parser("distribute-docks", parents=[common],
                        help="Re-lay out dock placements in alternating columns")
    dd.add_argument("--unit", type=int, default=None, help="Only this dock")

    fl = sub.add_parser("fill", parents=[common], help="Auto-place unplaced boats")
    fl.add_argument("--unit", type=int, default=None, help="Only this unit")
    fl.add_argument("--status", choices=("reserved", "placed"), default="placed",
                    help="Status of the new placements")

    cl = sub.add_parser("clamp", parents=[common],
                        help="Pull out-of-bounds boats back inside their unit")
    cl.add_argument("--unit", type=int, default=None, help="Only this unit")
    cl.add_argument("--include-margin", action="store_true",
                    help="Keep the safety margin inside the bounds too")

    pz = sub.add_parser("prune-zones", parents=[common],
                        help="Delete restriction zones by name")
    pz.add_argument("names", nargs="+", help="Zone names to remove")

    return p


# ── Helpers ────────────────────────────────────────────────────────


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _load_rules(path: Path | None) -> YardRules:
    if path is None:
        return YARD_RULES
    return rules_from_dict(json.loads(path.read_text(encoding="utf-8")))


def _units(data: YardData, unit_id: int | None, kind: str | None = None) -> list[StorageUnit]:
    units = [
        u for u in data.storage_units
        if (unit_id is None or u.id == unit_id)
        and (kind is None or classify_storage(u) == kind)
    ]
    if unit_id is not None and not units:
        raise SystemExit(f"No matching storage unit {unit_id}")
    return units


def _engine_for(data: YardData, unit: StorageUnit, precise: bool = False) -> CollisionEngine:
    engine = CollisionEngine(unit, precise=precise)
    boat_map = {b.id: b for b in data.boats}
    for p in data.placements:
        boat = boat_map.get(p.boat_id)
        if p.storage_unit_id == unit.id and boat is not None:
            engine.register_boat(BoatShape.from_placement(boat, p))
    engine.register_zones(ZoneShape.from_zone(z) for z in data.zones_for(unit.id))
    return engine


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


# ── Commands ───────────────────────────────────────────────────────


def cmd_check(data: YardData, args, rules: YardRules) -> int:
    report = []
    worst = 0
    for unit in data.storage_units:
        engine = _engine_for(data, unit, precise=args.precise)
        for result in engine.detect_all():
            if result.clear:
                continue
            level = severity(result)
            worst = max(worst, 2 if level == "critical" else 1)
            entry = collision_to_dict(result)
            entry.update(storage_unit_id=unit.id, severity=level)
            report.append(entry)
    _print_json(report)
    log.info("%d boat(s) in collision", len(report))
    return 1 if worst == 2 else 0


def cmd_suggest(data: YardData, args, rules: YardRules) -> int:
    boat = next((b for b in data.boats if b.id == args.boat), None)
    if boat is None:
        raise SystemExit(f"Unknown boat {args.boat}")
    unit = _units(data, args.unit)[0]
    rotations = (0.0, 90.0) if args.rotate else (0.0,)
    candidates = suggest_placements(
        boat, unit, _engine_for(data, unit),
        grid_step=rules.grid_step_m,
        top_k=args.top or rules.max_suggestions,
        rotations=rotations,
        side_gap=rules.dock_side_gap_m,
    )
    _print_json([candidate_to_dict(c, rules) for c in candidates])
    return 0 if candidates else 1


def cmd_reconcile(data: YardData, args, rules: YardRules) -> int:
    result = reconcile_placements(
        data.boats, data.storage_units, data.placements,
        keep_in_service=args.keep_in_service,
    )
    log.info("Reconcile: kept %d, removed %d placement(s)",
             len(result.kept), len(result.removed))
    boats = apply_boat_status(data.boats, result.boat_status)
    if args.dry_run:
        return 0
    if result.changed:
        save_placements(args.data_dir, result.kept, rules=rules)
    if boats != data.boats:
        save_boats(args.data_dir, boats)
    return 0


def cmd_rotate_docks(data: YardData, args, rules: YardRules) -> int:
    placements = rotate_placements(
        data.placements, data.storage_units, delta=args.delta, timestamp=_now(),
    )
    if not args.dry_run:
        save_placements(args.data_dir, placements, rules=rules)
    return 0


def cmd_distribute_docks(data: YardData, args, rules: YardRules) -> int:
    placements = data.placements
    stamp = _now()
    for unit in _units(data, args.unit, "dock"):
        placements = distribute_dock(
            data.boats, unit, placements,
            start_offset=rules.dock_start_offset_m,
            step=rules.dock_step_m,
            side_gap=rules.dock_side_gap_m,
            timestamp=stamp,
        )
    if not args.dry_run:
        save_placements(args.data_dir, placements, rules=rules)
    return 0


def cmd_fill(data: YardData, args, rules: YardRules) -> int:
    placements = data.placements
    stamp = _now()
    for unit in _units(data, args.unit):
        kind = classify_storage(unit)
        if kind == "warehouse":
            placements = pack_warehouse(
                data.boats, unit, placements, data.zones_for(unit.id),
                storage_units=data.storage_units,
                wall_margin=rules.warehouse_wall_margin_m,
                gap=rules.warehouse_gap_m,
                status=args.status,
                timestamp=stamp,
            )
        elif kind == "dock":
            placements = fill_dock(
                data.boats, unit, placements,
                storage_units=data.storage_units,
                start_offset=rules.dock_start_offset_m,
                step=rules.dock_step_m,
                side_gap=rules.dock_side_gap_m,
                status=args.status,
                timestamp=stamp,
            )
        else:
            log.info("Skipping %s: unknown storage category %r", unit.name, unit.unit_type)
    added = len(placements) - len(data.placements)
    log.info("Fill: added %d placement(s)", added)
    if args.dry_run or not added:
        return 0
    result = reconcile_placements(data.boats, data.storage_units, placements)
    save_placements(args.data_dir, placements, rules=rules)
    save_boats(args.data_dir, apply_boat_status(data.boats, result.boat_status))
    return 0


def cmd_clamp(data: YardData, args, rules: YardRules) -> int:
    placements = data.placements
    stamp = _now()
    for unit in _units(data, args.unit):
        placements = clamp_placements(
            data.boats, unit, placements,
            include_margin=args.include_margin, timestamp=stamp,
        )
    if not args.dry_run:
        save_placements(args.data_dir, placements, rules=rules)
    return 0


def cmd_prune_zones(data: YardData, args, rules: YardRules) -> int:
    kept, removed = prune_restriction_zones(data.restriction_zones, args.names)
    log.info("Removed %d restriction zone(s)", removed)
    if not args.dry_run and removed:
        save_restriction_zones(args.data_dir, kept)
    return 0


COMMANDS = {
    "check": cmd_check,
    "suggest": cmd_suggest,
    "reconcile": cmd_reconcile,
    "rotate-docks": cmd_rotate_docks,
    "distribute-docks": cmd_distribute_docks,
    "fill": cmd_fill,
    "clamp": cmd_clamp,
    "prune-zones": cmd_prune_zones,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        rules = _load_rules(args.rules)
        data = load_yard(args.data_dir, rules)
    except (FileNotFoundError, ValueError) as exc:
        log.error("%s", exc)
        return 2
    return COMMANDS[args.cmd](data, args, rules)


if __name__ == "__main__":
    sys.exit(main())
