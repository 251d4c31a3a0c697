"""Tests for storage geometry parsing and storage metrics."""

from __future__ import annotations

import json
import unittest

from shapely.geometry import LineString, Polygon

from boatyard.config import YardRules
from boatyard.models import StorageUnit
from boatyard.storage import (
    StorageGeometryError,
    classify_storage,
    dock_length,
    nearest_storage_unit,
    parse_geometry,
    storage_area,
    storage_bounds,
    storage_capacity,
)
from tests.yard_fixture import make_dock, make_warehouse


RECT_RING = [[0, 0], [20, 0], [20, 10], [0, 10], [0, 0]]


class TestParseGeometry(unittest.TestCase):

    def test_polygon_from_text(self):
        geom = parse_geometry(json.dumps({"type": "Polygon", "coordinates": [RECT_RING]}))
        self.assertIsInstance(geom, Polygon)
        self.assertAlmostEqual(geom.area, 200)
        self.assertEqual(len(geom.exterior.coords), 5)

    def test_polygon_from_mapping_open_ring(self):
        geom = parse_geometry({"type": "Polygon", "coordinates": [RECT_RING[:-1]]})
        self.assertAlmostEqual(geom.area, 200)

    def test_linestring(self):
        geom = parse_geometry({"type": "LineString", "coordinates": [[0, 0], [30, 0], [30, 10]]})
        self.assertIsInstance(geom, LineString)
        self.assertAlmostEqual(geom.length, 40)

    def test_errors_fail_fast(self):
        bad_inputs = [
            "{not json",
            {"type": "Polygon"},
            {"coordinates": [RECT_RING]},
            {"type": "Polygon", "coordinates": []},
            {"type": "Polygon", "coordinates": [[[0, 0], [1, 1], [0, 0]]]},
            {"type": "Polygon", "coordinates": [[[0, 0], ["a", 0], [1, 1]]]},
            {"type": "Polygon", "coordinates": [[[0, 0], [1], [1, 1]]]},
            {"type": "Polygon", "coordinates": [[[0, 0], [10, 10], [10, 0], [0, 10]]]},
            {"type": "LineString", "coordinates": [[0, 0]]},
            {"type": "LineString", "coordinates": [[1, 1], [1, 1]]},
            {"type": "Point", "coordinates": [1, 1]},
            '{"type": "LineString", "coordinates": [[0, 0], [NaN, 1]]}',
        ]
        for raw in bad_inputs:
            with self.assertRaises(StorageGeometryError, msg=repr(raw)):
                parse_geometry(raw, unit_id=7)

    def test_error_carries_unit_id(self):
        with self.assertRaises(StorageGeometryError) as ctx:
            parse_geometry({"type": "Point", "coordinates": [0, 0]}, unit_id=12)
        self.assertEqual(ctx.exception.unit_id, 12)
        self.assertIn("Point", ctx.exception.reason)
        self.assertIsInstance(ctx.exception, ValueError)


class TestStorageMetrics(unittest.TestCase):

    def test_classify(self):
        self.assertEqual(classify_storage(make_warehouse(unit_type="Lager")), "warehouse")
        self.assertEqual(classify_storage(make_warehouse(unit_type="Hall B")), "warehouse")
        self.assertEqual(classify_storage(make_dock()), "dock")
        self.assertEqual(classify_storage(make_warehouse(unit_type="parking")), "unknown")
        self.assertEqual(classify_storage(make_warehouse(unit_type="")), "unknown")
        self.assertEqual(classify_storage(None), "unknown")

    def test_bounds(self):
        self.assertEqual(storage_bounds(make_warehouse(w=40, h=30)), (0, 0, 40, 30))
        self.assertEqual(storage_bounds(make_dock(length=25, width=3)), (0, 0, 25, 3))

    def test_dock_length_follows_polyline(self):
        dock = StorageUnit(id=9, name="L", unit_type="dock",
                           geometry=LineString([(0, 0), (30, 0), (30, 10)]))
        self.assertAlmostEqual(dock_length(dock), 40)

    def test_area_and_capacity(self):
        unit = make_warehouse(w=20, h=10)
        self.assertAlmostEqual(storage_area(unit), 200)
        self.assertEqual(storage_capacity(unit), 10)        # 200·0.7 / 14
        unit.level_count = 2
        self.assertEqual(storage_capacity(unit), 20)
        self.assertEqual(storage_capacity(make_dock()), 0)

    def test_area_excludes_holes(self):
        # 20 × 10 floor with a 4 × 5 courtyard cut out
        unit = StorageUnit(id=5, name="Ring", unit_type="warehouse", geometry=Polygon(
            [(0, 0), (20, 0), (20, 10), (0, 10)],
            [[(8, 2), (12, 2), (12, 7), (8, 7)]],
        ))
        self.assertAlmostEqual(storage_area(unit), 180)

    def test_capacity_with_custom_rules(self):
        rules = YardRules(usable_area_factor=1.0, average_boat_area_m2=20)
        self.assertEqual(storage_capacity(make_warehouse(w=20, h=10), rules), 10)

    def test_nearest_storage_unit(self):
        a = make_warehouse(unit_id=1, w=10, h=10)
        b = StorageUnit(id=2, name="Far", unit_type="warehouse",
                        geometry=Polygon([(100, 100), (110, 100), (110, 110), (100, 110)]))
        self.assertIs(nearest_storage_unit(95, 95, [a, b]), b)
        self.assertIs(nearest_storage_unit(0, 0, [a, b]), a)
        self.assertIsNone(nearest_storage_unit(0, 0, []))


if __name__ == "__main__":
    unittest.main()
