from unittest import TestCase

import numpy as np

from geoshift.constructs.coordinate import Coordinate
from geoshift.utils.crs import CoordinateSystem
from geoshift.utils.transform import (
    bd09_to_gcj02,
    bd09_to_wgs84,
    gcj02_to_bd09,
    gcj02_to_wgs84,
    normalize,
    out_of_region,
    transform,
    wgs84_to_bd09,
    wgs84_to_gcj02,
)

BEIJING = (116.397128, 39.916527)
SHANGHAI = (121.4737, 31.2304)
OUTSIDE = [
    (2.3522, 48.8566),  # Paris, west of the region
    (-74.0060, 40.7128),  # New York
    (139.6917, 35.6895),  # Tokyo, east of the region
    (116.4, 56.0),  # north of the region
    (116.4, 0.5),  # south of the region
    (151.2093, -33.8688),  # Sydney
]


class TestTransform(TestCase):
    def test_out_of_region(self):
        self.assertFalse(out_of_region(*BEIJING))
        self.assertFalse(out_of_region(*SHANGHAI))
        for lng, lat in OUTSIDE:
            self.assertTrue(out_of_region(lng, lat), f"{lng}, {lat}")

    def test_out_of_region_edges_are_inside(self):
        self.assertFalse(out_of_region(72.004, 0.8293))
        self.assertFalse(out_of_region(137.8347, 55.8271))
        self.assertTrue(out_of_region(72.0039, 30.0))
        self.assertTrue(out_of_region(100.0, 55.8272))

    def test_identity_outside_region(self):
        for lng, lat in OUTSIDE:
            self.assertEqual(wgs84_to_gcj02(lng, lat), (lng, lat))
            self.assertEqual(gcj02_to_wgs84(lng, lat), (lng, lat))

    def test_wgs84_to_gcj02_shifts_inside_region(self):
        lng, lat = wgs84_to_gcj02(*BEIJING)

        # the offset around Beijing is roughly +0.006 longitude, +0.001 latitude
        self.assertGreater(lng - BEIJING[0], 0.004)
        self.assertLess(lng - BEIJING[0], 0.008)
        self.assertGreater(lat - BEIJING[1], 0.0)
        self.assertLess(lat - BEIJING[1], 0.003)

    def test_wgs84_to_gcj02_known_values(self):
        lng, lat = wgs84_to_gcj02(*BEIJING)
        self.assertAlmostEqual(lng, 116.40337249402477, places=12)
        self.assertAlmostEqual(lat, 39.91793074924595, places=12)

        lng, lat = wgs84_to_gcj02(*SHANGHAI)
        self.assertAlmostEqual(lng, 121.47822305927693, places=12)
        self.assertAlmostEqual(lat, 31.22845773757727, places=12)

    def test_gcj02_to_bd09_known_values(self):
        # the exact offsets at the origin
        self.assertEqual(gcj02_to_bd09(0.0, 0.0), (0.0065, 0.006))

        # at latitude 0.03 the sine term peaks and the cosine term is 1, so
        # z = 0.03 + 2e-5 and theta = pi / 2 + 3e-6
        lng, lat = gcj02_to_bd09(0.0, 0.03)
        self.assertAlmostEqual(lng, 0.0065 - 0.03002 * 3e-6, places=12)
        self.assertAlmostEqual(lat, 0.006 + 0.03002, places=12)

    def test_bd09_to_gcj02_known_values(self):
        self.assertEqual(bd09_to_gcj02(0.0065, 0.006), (0.0, 0.0))

        # z = 0.03 - 2e-5 and theta = pi / 2 - 3e-6
        lng, lat = bd09_to_gcj02(0.0065, 0.036)
        self.assertAlmostEqual(lng, 0.02998 * 3e-6, places=12)
        self.assertAlmostEqual(lat, 0.02998, places=12)

    def test_gcj02_to_wgs84_reflects_forward_offset(self):
        lng, lat = SHANGHAI
        forward_lng, forward_lat = wgs84_to_gcj02(lng, lat)
        back_lng, back_lat = gcj02_to_wgs84(lng, lat)

        self.assertEqual(back_lng, lng * 2 - forward_lng)
        self.assertEqual(back_lat, lat * 2 - forward_lat)

    def test_wgs84_gcj02_round_trip_is_approximate(self):
        for lng, lat in (BEIJING, SHANGHAI, (104.0668, 30.5728), (113.2644, 23.1291)):
            start = Coordinate(lng, lat)
            back = start.to_gcj02().to_wgs84()

            self.assertNotEqual(start, back)
            self.assertLess(start.distance_meters(back), 10.0)

    def test_gcj02_bd09_round_trip_is_approximate(self):
        for lng, lat in (BEIJING, SHANGHAI, (2.3522, 48.8566)):
            start = Coordinate(lng, lat, CoordinateSystem.GCJ02)
            back = start.to_bd09().to_gcj02()

            self.assertLess(start.distance_meters(back), 10.0)

    def test_gcj02_to_bd09_offset(self):
        lng, lat = SHANGHAI
        bd_lng, bd_lat = gcj02_to_bd09(lng, lat)

        self.assertAlmostEqual(bd_lng - lng, 0.0065, delta=0.001)
        self.assertAlmostEqual(bd_lat - lat, 0.006, delta=0.001)

    def test_bd09_applies_outside_region(self):
        # BD09 has no region gate
        lng, lat = OUTSIDE[0]
        bd_lng, bd_lat = gcj02_to_bd09(lng, lat)

        self.assertNotEqual((bd_lng, bd_lat), (lng, lat))

    def test_bd09_to_gcj02_reverses_offset(self):
        lng, lat = bd09_to_gcj02(*gcj02_to_bd09(*BEIJING))

        self.assertAlmostEqual(lng, BEIJING[0], delta=1e-5)
        self.assertAlmostEqual(lat, BEIJING[1], delta=1e-5)

    def test_composed_transforms_go_through_gcj02(self):
        self.assertEqual(wgs84_to_bd09(*BEIJING), gcj02_to_bd09(*wgs84_to_gcj02(*BEIJING)))
        self.assertEqual(bd09_to_wgs84(*BEIJING), gcj02_to_wgs84(*bd09_to_gcj02(*BEIJING)))

    def test_scalar_input_gives_floats(self):
        lng, lat = wgs84_to_gcj02(*BEIJING)

        self.assertIsInstance(lng, float)
        self.assertIsInstance(lat, float)

    def test_array_input_matches_scalar_input(self):
        lngs = np.array([BEIJING[0], SHANGHAI[0], OUTSIDE[0][0]])
        lats = np.array([BEIJING[1], SHANGHAI[1], OUTSIDE[0][1]])

        out_lng, out_lat = wgs84_to_bd09(lngs, lats)

        self.assertIsInstance(out_lng, np.ndarray)
        self.assertEqual(out_lng.shape, (3,))
        for i in range(3):
            lng, lat = wgs84_to_bd09(lngs[i], lats[i])
            self.assertAlmostEqual(out_lng[i], lng, places=9)
            self.assertAlmostEqual(out_lat[i], lat, places=9)

    def test_normalize_wraps_and_clamps(self):
        self.assertEqual(normalize(190.0, 95.0), (-170.0, 90.0))
        self.assertEqual(normalize(-190.0, -95.0), (170.0, -90.0))

    def test_normalize_leaves_valid_values_untouched(self):
        self.assertEqual(normalize(-74.006, 40.7128), (-74.006, 40.7128))
        self.assertEqual(normalize(180.0, -90.0), (180.0, -90.0))

    def test_transform_dispatch(self):
        self.assertEqual(
            transform(*BEIJING, CoordinateSystem.WGS84, CoordinateSystem.GCJ02),
            wgs84_to_gcj02(*BEIJING),
        )
        self.assertEqual(
            transform(*BEIJING, CoordinateSystem.BD09, CoordinateSystem.WGS84),
            bd09_to_wgs84(*BEIJING),
        )
        self.assertEqual(
            transform(*BEIJING, CoordinateSystem.GCJ02, CoordinateSystem.BD09),
            gcj02_to_bd09(*BEIJING),
        )

    def test_transform_same_system_is_identity(self):
        for system in CoordinateSystem:
            self.assertEqual(transform(*BEIJING, system, system), BEIJING)

    def test_transform_rejects_unknown_systems(self):
        with self.assertRaises(ValueError):
            transform(*BEIJING, "wgs84", CoordinateSystem.GCJ02)
