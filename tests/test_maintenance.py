"""Tests for reconciliation, bulk rotation and restriction-zone pruning."""

from __future__ import annotations

import unittest

from boatyard.maintenance import (
    aggregate_status,
    apply_boat_status,
    pick_best,
    placement_recency,
    prune_restriction_zones,
    reconcile_placements,
    rotate_placements,
)
from tests.yard_fixture import (
    make_boat, make_dock, make_placement, make_warehouse, make_zone,
)


class TestPickBest(unittest.TestCase):

    def test_placed_beats_newer_reserved(self):
        placed = make_placement(1, 1, 1, status="placed", placed_date="2024-01-01T00:00:00Z")
        reserved = make_placement(2, 1, 1, status="reserved",
                                  reservation_date="2024-06-01T00:00:00Z")
        self.assertIs(pick_best([reserved, placed]), placed)

    def test_most_recent_within_rank(self):
        old = make_placement(1, 1, 1, placed_date="2023-01-01")
        new = make_placement(2, 1, 1, placed_date="2024-01-01")
        self.assertIs(pick_best([old, new]), new)

    def test_tie_keeps_first(self):
        a = make_placement(1, 1, 1)
        b = make_placement(2, 1, 1)
        self.assertIs(pick_best([a, b]), a)

    def test_empty(self):
        self.assertIsNone(pick_best([]))

    def test_recency_fallback_order(self):
        p = make_placement(1, 1, 1, placed_date="not a date",
                           updated_at="2024-03-01T00:00:00+00:00",
                           created_at="2020-01-01T00:00:00+00:00")
        q = make_placement(2, 1, 1, updated_at="2024-03-01T00:00:00Z")
        self.assertEqual(placement_recency(p), placement_recency(q))
        self.assertEqual(placement_recency(make_placement(3, 1, 1)), 0.0)

    def test_aggregate_status(self):
        self.assertEqual(aggregate_status([]), "unplaced")
        self.assertEqual(aggregate_status([make_placement(1, 1, 1, status="reserved")]),
                         "reserved")
        self.assertEqual(aggregate_status([
            make_placement(1, 1, 1, status="reserved"),
            make_placement(2, 1, 2, status="placed"),
        ]), "placed")


class TestReconcile(unittest.TestCase):

    def setUp(self):
        self.units = [make_warehouse(unit_id=1), make_dock(unit_id=2),
                      make_warehouse(unit_id=3, name="Lager Syd", unit_type="Lager")]

    def test_duplicate_in_category_resolved(self):
        boats = [make_boat(1)]
        placed = make_placement(1, 1, 1, status="placed", placed_date="2024-01-01T00:00:00Z")
        reserved = make_placement(2, 1, 3, status="reserved",
                                  reservation_date="2024-06-01T00:00:00Z")
        result = reconcile_placements(boats, self.units, [reserved, placed])
        self.assertEqual(result.kept, [placed])
        self.assertEqual(result.removed, [reserved])
        self.assertEqual(result.boat_status, {1: "placed"})
        self.assertTrue(result.changed)

    def test_disallowed_category_removed(self):
        boats = [make_boat(1, location="dock")]
        wh = make_placement(1, 1, 1)
        dock = make_placement(2, 1, 2, status="reserved")
        result = reconcile_placements(boats, self.units, [wh, dock])
        self.assertEqual(result.kept, [dock])
        self.assertEqual(result.boat_status[1], "reserved")

    def test_either_keeps_one_per_category(self):
        boats = [make_boat(1, location="either")]
        placements = [
            make_placement(1, 1, 1, placed_date="2024-01-01"),
            make_placement(2, 1, 2, placed_date="2024-01-01"),
            make_placement(3, 1, 2, placed_date="2024-02-01"),
        ]
        result = reconcile_placements(boats, self.units, placements)
        self.assertEqual([p.id for p in result.kept], [1, 3])

    def test_unknown_unit_and_boat_kept(self):
        boats = [make_boat(1)]
        placements = [
            make_placement(1, 1, 1),
            make_placement(2, 1, 99),           # unknown unit
            make_placement(3, 42, 1),           # unknown boat
            make_placement(4, 42, 1),
        ]
        result = reconcile_placements(boats, self.units, placements)
        self.assertEqual([p.id for p in result.kept], [1, 2, 3, 4])
        self.assertFalse(result.changed)

    def test_status_recomputed(self):
        boats = [
            make_boat(1, status="placed"),
            make_boat(2, status="in_service"),
            make_boat(3, status="unplaced"),
        ]
        placements = [make_placement(1, 3, 1, status="reserved")]
        result = reconcile_placements(boats, self.units, placements)
        self.assertEqual(result.boat_status, {1: "unplaced", 2: "unplaced", 3: "reserved"})

        updated = apply_boat_status(boats, result.boat_status)
        self.assertEqual([b.status for b in updated], ["unplaced", "unplaced", "reserved"])

    def test_keep_in_service_opt_in(self):
        boats = [
            make_boat(1, status="in_service"),
            make_boat(2, status="in_service"),
        ]
        placements = [make_placement(1, 2, 1, status="placed")]
        result = reconcile_placements(boats, self.units, placements,
                                      keep_in_service=True)
        self.assertEqual(result.boat_status, {1: "in_service", 2: "in_service"})

        updated = apply_boat_status(boats, result.boat_status)
        self.assertIs(updated[0], boats[0])
        self.assertIs(updated[1], boats[1])

    def test_idempotent(self):
        boats = [make_boat(1), make_boat(2, location="either"), make_boat(3, location="dock")]
        placements = [
            make_placement(1, 1, 1, status="reserved", created_at="2024-01-01"),
            make_placement(2, 1, 3, status="reserved", created_at="2024-02-01"),
            make_placement(3, 2, 1, status="placed"),
            make_placement(4, 2, 2, status="reserved"),
            make_placement(5, 3, 1, status="placed"),
            make_placement(6, 3, 2, status="placed"),
            make_placement(7, 3, 2, status="placed"),
        ]
        first = reconcile_placements(boats, self.units, placements)
        second = reconcile_placements(boats, self.units, first.kept)
        self.assertEqual(second.kept, first.kept)
        self.assertEqual(second.removed, [])
        self.assertEqual(second.boat_status, first.boat_status)
        self.assertEqual([p.id for p in first.kept], [2, 3, 4, 6])

    def test_repeated_ids_handled(self):
        """Drifted data may repeat a placement id; records are told apart."""
        boats = [make_boat(1)]
        a = make_placement(5, 1, 1, status="reserved")
        b = make_placement(5, 1, 3, status="placed")
        result = reconcile_placements(boats, self.units, [a, b])
        self.assertEqual(len(result.kept), 1)
        self.assertIs(result.kept[0], b)


class TestRotatePlacements(unittest.TestCase):

    def setUp(self):
        self.units = [make_warehouse(unit_id=1), make_dock(unit_id=2)]
        self.placements = [
            make_placement(1, 1, 2, x=4, y=-5, rotation=270),
            make_placement(2, 2, 1, x=10, y=10, rotation=0),
            make_placement(3, 3, 99, rotation=90),
        ]

    def test_flips_dock_only(self):
        result = rotate_placements(self.placements, self.units, timestamp="2024-05-01")
        self.assertEqual(result[0].rotation, 90)
        self.assertEqual((result[0].x, result[0].y), (4, -5))
        self.assertEqual(result[0].updated_at, "2024-05-01")
        self.assertIs(result[1], self.placements[1])
        self.assertIs(result[2], self.placements[2])

    def test_double_flip_restores(self):
        once = rotate_placements(self.placements, self.units)
        twice = rotate_placements(once, self.units)
        self.assertEqual([p.rotation for p in twice], [270, 0, 90])

    def test_all_kinds(self):
        result = rotate_placements(self.placements, self.units, delta=90, kind=None)
        self.assertEqual([p.rotation for p in result], [0, 90, 90])


class TestPruneZones(unittest.TestCase):

    def setUp(self):
        self.zones = [
            make_zone(1, 1, 0, 0, name="Service ingång"),
            make_zone(2, 1, 5, 5, name="  service   INGÅNG "),
            make_zone(3, 1, 9, 9, name="Pelare"),
            make_zone(4, 2, 0, 0, name="Service ingång"),
        ]

    def test_case_and_whitespace_insensitive(self):
        kept, removed = prune_restriction_zones(self.zones, ["service ingång"])
        self.assertEqual(removed, 3)
        self.assertEqual([z.id for z in kept], [3])

    def test_scoped_to_unit(self):
        kept, removed = prune_restriction_zones(self.zones, ["Service ingång"],
                                                storage_unit_id=1)
        self.assertEqual(removed, 2)
        self.assertEqual([z.id for z in kept], [3, 4])

    def test_idempotent(self):
        kept, _ = prune_restriction_zones(self.zones, ["Pelare"])
        again, removed = prune_restriction_zones(kept, ["Pelare"])
        self.assertEqual(removed, 0)
        self.assertEqual(again, kept)


if __name__ == "__main__":
    unittest.main()
