"""Coordinate system tags and datum constants used throughout geoshift.

This module defines:
- CoordinateSystem: the three coordinate systems a Coordinate can be tagged with
- LATLON_CRS: the pyproj CRS matching WGS84 geographic coordinates (EPSG:4326)
- the ellipsoid, offset and region constants used by the transform engine
- the Earth radius used for great-circle distances
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pyproj import CRS

# WGS84 latitude/longitude coordinate system (EPSG:4326)
# Standard GPS coordinates in decimal degrees
# Range: latitude [-90, 90], longitude [-180, 180]
LATLON_CRS = CRS(4326)

PI = 3.1415926535897932384626
X_PI = 3.14159265358979324 * 3000.0 / 180.0

# Krasovsky 1940 ellipsoid, used by the GCJ02 offset
KRASOVSKY_A = 6378245.0
KRASOVSKY_EE = 0.00669342162296594323

# Constant shift applied between GCJ02 and BD09
BD09_LNG_OFFSET = 0.0065
BD09_LAT_OFFSET = 0.006

# Rectangle approximating the territory where GCJ02 obfuscation applies.
# Points outside it are never shifted; points inside it are not necessarily
# inside the territory (the real border is not a rectangle).
REGION_MIN_LNG = 72.004
REGION_MAX_LNG = 137.8347
REGION_MIN_LAT = 0.8293
REGION_MAX_LAT = 55.8271

# WGS84 equatorial radius in meters, used by the haversine distance
EARTH_RADIUS_METERS = 6378137.0

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0


class CoordinateSystem(Enum):
    """
    Enumeration of the coordinate systems supported by geoshift.

    Values:
        WGS84: The global geodetic reference used by GPS receivers
        GCJ02: A nationally mandated obfuscation of WGS84 used by most domestic map providers
        BD09: A second obfuscation layered on top of GCJ02 by one specific provider

    Examples:
        >>> from geoshift.utils.crs import CoordinateSystem
        >>> CoordinateSystem("gcj02")
        <CoordinateSystem.GCJ02: 'gcj02'>
        >>> CoordinateSystem.WGS84.crs.to_epsg()
        4326
    """

    WGS84 = "wgs84"
    GCJ02 = "gcj02"
    BD09 = "bd09"

    @property
    def crs(self) -> Optional[CRS]:
        """
        Get the pyproj CRS equivalent of this coordinate system.

        Only WGS84 has a registered equivalent; the obfuscated systems return None.
        """
        if self is CoordinateSystem.WGS84:
            return LATLON_CRS
        return None

    @classmethod
    def parse(cls, value) -> CoordinateSystem:
        """
        Parse a coordinate system from an enum member or its case-insensitive name.

        Raises:
            ValueError: If the value does not name one of the three systems
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValueError(f"unknown coordinate system: {value!r}") from e
