"""Tests for the data directory loader, serialization and the CLI.

Uses the on-disk yard from tests.yard_fixture:
  - a 40×30 m warehouse and a 40 m dock
  - boat 1 placed in the warehouse at (100, 100) canvas units = (10, 10) m
  - boats 2 (warehouse) and 3 (dock) unplaced
  - one "Service ingång" restriction zone
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from boatyard.__main__ import main
from boatyard.data import (
    load_yard, parse_placement, placement_to_dict, save_placements,
)
from boatyard.storage import StorageGeometryError, classify_storage
from tests.yard_fixture import make_placement, write_yard_dir


def _read(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


class _YardDirTest(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = write_yard_dir(Path(self._tmp.name) / "yard")

    def tearDown(self):
        self._tmp.cleanup()


class TestLoadYard(_YardDirTest):

    def test_loads_everything(self):
        data = load_yard(self.dir)
        self.assertTrue(data.ok, [str(e) for e in data.errors])
        self.assertEqual(len(data.boats), 3)
        self.assertEqual(len(data.storage_units), 2)
        self.assertEqual(len(data.placements), 1)
        self.assertEqual(len(data.zones_for(1)), 1)

    def test_aliases_and_defaults(self):
        data = load_yard(self.dir)
        boats = {b.id: b for b in data.boats}
        self.assertEqual(boats[1].status, "placed")
        self.assertEqual(boats[1].location_kind, "warehouse")
        self.assertEqual(boats[3].location_kind, "dock")
        self.assertEqual(boats[2].safety_margin, 0.5)
        self.assertEqual(classify_storage(data.storage(2)), "dock")
        self.assertEqual(data.storage(2).width, 2)

    def test_canvas_units_converted(self):
        p = load_yard(self.dir).placements[0]
        self.assertAlmostEqual(p.x, 10)
        self.assertAlmostEqual(p.y, 10)
        self.assertEqual(p.placed_date, "2024-04-01T10:00:00Z")

    def test_bad_boat_recorded_not_raised(self):
        boats = _read(self.dir / "boats.json")
        del boats[1]["length"]
        boats[2]["width"] = -1
        (self.dir / "boats.json").write_text(json.dumps(boats), encoding="utf-8")
        data = load_yard(self.dir)
        self.assertEqual([b.id for b in data.boats], [1, 3])
        fields = sorted(e.field for e in data.errors)
        self.assertEqual(fields, ["record", "width"])

    def test_dangling_placement_reported(self):
        placements = _read(self.dir / "placements.json")
        placements.append({"id": 1, "boat_id": 77, "storage_unit_id": 1})
        (self.dir / "placements.json").write_text(json.dumps(placements), encoding="utf-8")
        data = load_yard(self.dir)
        self.assertEqual(sorted(e.field for e in data.errors), ["boat_id", "id"])

    def test_bad_geometry_fails_fast(self):
        storage = _read(self.dir / "storage_units.json")
        storage[0]["shape_geometry"] = '{"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]}'
        (self.dir / "storage_units.json").write_text(json.dumps(storage), encoding="utf-8")
        with self.assertRaises(StorageGeometryError):
            load_yard(self.dir)

    def test_zones_optional(self):
        (self.dir / "restriction_zones.json").unlink()
        self.assertEqual(load_yard(self.dir).restriction_zones, [])

    def test_missing_required_file(self):
        (self.dir / "boats.json").unlink()
        with self.assertRaises(FileNotFoundError):
            load_yard(self.dir)


class TestSavePlacements(_YardDirTest):

    def test_round_trip_and_backup(self):
        placements = [make_placement(1, 1, 1, x=12.34, y=5, rotation=90)]
        save_placements(self.dir, placements)
        self.assertTrue((self.dir / "placements.json.bak").exists())
        saved = _read(self.dir / "placements.json")
        self.assertEqual(saved[0]["position"], {"x": 123.4, "y": 50, "rotation": 90})
        p = load_yard(self.dir).placements[0]
        self.assertAlmostEqual(p.x, 12.34)
        self.assertEqual(p.rotation, 90)

    def test_flat_coordinates_accepted(self):
        p = parse_placement({
            "id": 4, "boat_id": 1, "storage_unit_id": 1, "status": "Reserverad",
            "x_coordinate": 55, "y_coordinate": 20, "rotation_angle": 180, "floor_number": 2,
        })
        self.assertEqual((p.x, p.y, p.rotation, p.level), (5.5, 2.0, 180, 2))
        self.assertEqual(p.status, "reserved")
        self.assertEqual(placement_to_dict(p)["position"]["x"], 55)


class TestCli(_YardDirTest):

    def test_check_clean_yard(self):
        self.assertEqual(main(["check", str(self.dir)]), 0)

    def test_fill_places_boats(self):
        self.assertEqual(main(["fill", str(self.dir)]), 0)
        placements = _read(self.dir / "placements.json")
        by_boat = {p["boat_id"]: p for p in placements}
        self.assertEqual(sorted(by_boat), [1, 2, 3])
        self.assertEqual(by_boat[2]["storage_unit_id"], 1)
        self.assertEqual(by_boat[3]["storage_unit_id"], 2)
        statuses = {b["id"]: b["current_status"] for b in _read(self.dir / "boats.json")}
        self.assertEqual(statuses, {1: "placed", 2: "placed", 3: "placed"})

        self.assertEqual(main(["check", str(self.dir)]), 0)

    def test_dry_run_writes_nothing(self):
        before = (self.dir / "placements.json").read_text(encoding="utf-8")
        self.assertEqual(main(["fill", str(self.dir), "--dry-run"]), 0)
        self.assertEqual((self.dir / "placements.json").read_text(encoding="utf-8"), before)

    def test_reconcile_clean_yard_is_noop(self):
        self.assertEqual(main(["reconcile", str(self.dir)]), 0)
        self.assertFalse((self.dir / "placements.json.bak").exists())
        self.assertFalse((self.dir / "boats.json.bak").exists())

    def test_prune_zones(self):
        self.assertEqual(main(["prune-zones", str(self.dir), "SERVICE INGÅNG"]), 0)
        self.assertEqual(_read(self.dir / "restriction_zones.json"), [])

    def test_suggest(self):
        self.assertEqual(main(["suggest", str(self.dir), "--boat", "2", "--unit", "1"]), 0)

    def test_suggest_on_dock(self):
        self.assertEqual(main(["suggest", str(self.dir), "--boat", "3", "--unit", "2"]), 0)

    def _mark_in_service(self, boat_id):
        boats = _read(self.dir / "boats.json")
        for b in boats:
            if b["id"] == boat_id:
                b["current_status"] = "På service"
        (self.dir / "boats.json").write_text(json.dumps(boats), encoding="utf-8")

    def test_reconcile_recomputes_in_service(self):
        self._mark_in_service(2)
        self.assertEqual(main(["reconcile", str(self.dir)]), 0)
        statuses = {b["id"]: b["current_status"] for b in _read(self.dir / "boats.json")}
        self.assertEqual(statuses[2], "unplaced")

    def test_reconcile_keep_in_service(self):
        self._mark_in_service(2)
        self.assertEqual(main(["reconcile", str(self.dir), "--keep-in-service"]), 0)
        self.assertFalse((self.dir / "boats.json.bak").exists())

    def test_bad_rules_file(self):
        rules = self.dir / "rules.json"
        rules.write_text(json.dumps({"no_such_rule": 1}), encoding="utf-8")
        self.assertEqual(main(["check", str(self.dir), "--rules", str(rules)]), 2)


if __name__ == "__main__":
    unittest.main()
