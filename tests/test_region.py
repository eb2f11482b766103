import json
from unittest import TestCase

from shapely.geometry import Polygon

from geoshift.constructs.bounding_box import BoundingBox
from geoshift.constructs.coordinate import Coordinate
from geoshift.constructs.region import Region
from geoshift.utils.crs import CoordinateSystem
from geoshift.utils.exceptions import InvalidCoordinateError
from tests import get_test_dir

UNIT_SQUARE = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]


class TestBoundingBox(TestCase):
    def test_from_coordinates(self):
        bbox = BoundingBox.from_coordinates(
            [Coordinate(0, 0), Coordinate(2, 1), Coordinate(1, 3)]
        )

        self.assertEqual(tuple(bbox), (0, 0, 2, 3, CoordinateSystem.WGS84))
        self.assertEqual(bbox.south_west, Coordinate(0.0, 0.0))
        self.assertEqual(bbox.north_east, Coordinate(2.0, 3.0))

    def test_contains_is_inclusive(self):
        bbox = BoundingBox.from_coordinates([Coordinate(0, 0), Coordinate(1, 1)])

        self.assertTrue(bbox.contains(Coordinate(0.5, 0.5)))
        self.assertTrue(bbox.contains(Coordinate(1, 0)))
        self.assertFalse(bbox.contains(Coordinate(1.5, 0.5)))

    def test_contains_converts_systems(self):
        bbox = BoundingBox.from_coordinates(
            [
                Coordinate(116.30, 39.90, CoordinateSystem.BD09),
                Coordinate(116.50, 40.00, CoordinateSystem.BD09),
            ]
        )

        self.assertIs(bbox.system, CoordinateSystem.BD09)
        self.assertTrue(bbox.contains(Coordinate(116.495, 39.95, CoordinateSystem.BD09)))
        # the same numbers read as WGS84 land east of the box once converted to BD09
        self.assertFalse(bbox.contains(Coordinate(116.495, 39.95)))

    def test_explicit_system(self):
        bbox = BoundingBox.from_coordinates(
            [Coordinate(116.30, 39.90), Coordinate(116.50, 40.00)],
            CoordinateSystem.GCJ02,
        )

        self.assertIs(bbox.system, CoordinateSystem.GCJ02)
        self.assertEqual(bbox.south_west, Coordinate(116.30, 39.90).to_gcj02())

    def test_empty(self):
        with self.assertRaises(ValueError):
            BoundingBox.from_coordinates([])

    def test_to_polygon(self):
        bbox = BoundingBox.from_coordinates([Coordinate(0, 0), Coordinate(2, 1)])

        self.assertEqual(bbox.to_polygon().bounds, (0.0, 0.0, 2.0, 1.0))


class TestRegion(TestCase):
    def test_from_coordinates(self):
        region = Region.from_coordinates(UNIT_SQUARE)

        self.assertEqual(len(region), 4)
        self.assertIs(region.system, CoordinateSystem.WGS84)
        self.assertEqual(region.boundary[1], Coordinate(0.0, 1.0))

    def test_from_coordinates_validates(self):
        with self.assertRaises(InvalidCoordinateError):
            Region.from_coordinates([(0, 0), (0, 100), (1, 1)])

    def test_contains(self):
        region = Region.from_coordinates(UNIT_SQUARE)

        self.assertTrue(region.contains(Coordinate(0.5, 0.5)))
        self.assertTrue(region.contains(Coordinate(0.5, 0)))
        self.assertTrue(region.contains(Coordinate(0, 0)))
        self.assertFalse(region.contains(Coordinate(2, 2)))

    def test_degenerate_region_contains_nothing(self):
        region = Region.from_coordinates(UNIT_SQUARE[:2])

        self.assertFalse(region.contains(Coordinate(0, 0)))

    def test_mixed_systems_are_converted(self):
        region = Region(
            [
                Coordinate(116.30, 39.90, CoordinateSystem.BD09),
                Coordinate(116.50, 39.90),
                Coordinate(116.50, 40.00),
            ]
        )

        self.assertIs(region.system, CoordinateSystem.BD09)
        self.assertTrue(all(c.system is CoordinateSystem.BD09 for c in region.boundary))

    def test_to_system(self):
        region = Region.from_coordinates(
            [(116.30, 39.90), (116.50, 39.90), (116.50, 40.00)]
        )
        gcj = region.to_system(CoordinateSystem.GCJ02)

        self.assertIs(gcj.system, CoordinateSystem.GCJ02)
        self.assertEqual(gcj.boundary[0], region.boundary[0].to_gcj02())
        self.assertIs(region.to_system(CoordinateSystem.WGS84), region)

    def test_bounds(self):
        region = Region.from_coordinates([(0, 0), (2, 1), (1, 3)])

        self.assertEqual(region.bounds.north_east, Coordinate(2.0, 3.0))

    def test_geometry(self):
        region = Region.from_coordinates(UNIT_SQUARE)

        self.assertIsInstance(region.geometry, Polygon)
        self.assertAlmostEqual(region.geometry.area, 1.0)

    def test_to_geojson(self):
        region = Region.from_coordinates(UNIT_SQUARE)
        geojson = json.loads(region.to_geojson())

        self.assertEqual(geojson["type"], "Polygon")
        # shapely closes the ring
        self.assertEqual(len(geojson["coordinates"][0]), 5)

    def test_equality(self):
        self.assertEqual(
            Region.from_coordinates(UNIT_SQUARE), Region.from_coordinates(UNIT_SQUARE)
        )
        self.assertNotEqual(
            Region.from_coordinates(UNIT_SQUARE),
            Region.from_coordinates(UNIT_SQUARE, CoordinateSystem.GCJ02),
        )

    def test_from_geojson(self):
        gfile = get_test_dir() / "test_assets" / "square.geojson"
        region = Region.from_geojson(gfile)

        # the file repeats the first vertex to close the ring
        self.assertEqual(len(region), 5)
        self.assertAlmostEqual(region.bounds.min_lng, 116.3)
        self.assertAlmostEqual(region.bounds.max_lat, 40.0)
        self.assertTrue(region.contains(Coordinate(116.4, 39.95)))
        self.assertFalse(region.contains(Coordinate(116.6, 39.95)))

    def test_from_geojson_in_bd09(self):
        gfile = get_test_dir() / "test_assets" / "square.geojson"
        region = Region.from_geojson(gfile, CoordinateSystem.BD09)

        self.assertIs(region.system, CoordinateSystem.BD09)
        self.assertAlmostEqual(region.boundary[0].longitude, 116.3)
        self.assertTrue(region.contains(Coordinate(116.495, 39.95, CoordinateSystem.BD09)))
        self.assertFalse(region.contains(Coordinate(116.495, 39.95)))

    def test_from_geojson_multiple_polygons(self):
        gfile = get_test_dir() / "test_assets" / "two_squares.geojson"

        with self.assertRaises(TypeError):
            Region.from_geojson(gfile)
