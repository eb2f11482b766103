"""
The functional call surface of geoshift.

Every function here takes and returns immutable Coordinate values and is safe to
call from any thread.
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

from geoshift.constructs.bounding_box import BoundingBox
from geoshift.constructs.coordinate import Coordinate
from geoshift.utils.crs import EARTH_RADIUS_METERS, CoordinateSystem
from geoshift.utils.geometry import DEFAULT_TOLERANCE, point_in_ring

log = logging.getLogger(__name__)


def make_point(
    longitude: Any,
    latitude: Any,
    system: CoordinateSystem = CoordinateSystem.WGS84,
) -> Coordinate:
    """
    Create a coordinate from numbers, numeric strings or Decimals.

    Args:
        longitude: The longitude in decimal degrees
        latitude: The latitude in decimal degrees
        system: The coordinate system of the values. Default is WGS84.

    Returns:
        A new Coordinate

    Raises:
        InvalidCoordinateError: If a value cannot be read as a number or is outside its range

    Examples:
        >>> make_point("116.404", "39.915", CoordinateSystem.BD09)
        Coordinate(longitude=116.404, latitude=39.915, system=BD09)
    """
    return Coordinate.of(longitude, latitude, system)


def convert(point: Coordinate, target: CoordinateSystem) -> Coordinate:
    """Convert a coordinate to the target coordinate system."""
    return point.to_system(target)


def distance_meters(
    a: Coordinate, b: Coordinate, radius: float = EARTH_RADIUS_METERS
) -> float:
    """
    Calculate the great-circle distance between two coordinates in meters.

    Both coordinates are normalized to WGS84 before measuring, so mixing systems is
    allowed. The result is exactly symmetric: distance_meters(a, b) == distance_meters(b, a).

    Args:
        a: The first coordinate
        b: The second coordinate
        radius: The sphere radius in meters. Default is the WGS84 equatorial radius (6378137 m).

    Returns:
        The haversine distance in meters

    Examples:
        >>> shanghai = Coordinate(121.4737, 31.2304)
        >>> beijing = Coordinate(116.4074, 39.9042)
        >>> km = distance_meters(shanghai, beijing) / 1000
    """
    return a.distance_meters(b, radius)


def distance_kilometers(
    a: Coordinate, b: Coordinate, radius: float = EARTH_RADIUS_METERS
) -> float:
    """Calculate the great-circle distance between two coordinates in kilometers."""
    return a.distance_kilometers(b, radius)


def is_in_circle(point: Coordinate, center: Coordinate, radius_meters: float) -> bool:
    """
    Check whether a coordinate lies within radius_meters of a center, boundary included.
    """
    return point.is_in_circle(center, radius_meters)


def _normalize_ring(point: Coordinate, boundary: List[Coordinate]) -> List[Coordinate]:
    """Internal use."""
    ring = [c.to_system(point.system) for c in boundary]

    # a closing vertex repeating the first one would only add a zero-length edge
    if len(ring) > 3 and ring[0] == ring[-1]:
        ring = ring[:-1]

    return ring


def is_in_polygon(
    point: Coordinate,
    boundary: Sequence[Coordinate],
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """
    Check whether a coordinate lies inside a polygon or on its boundary.

    The boundary is treated as a closed ring whether or not its last vertex repeats the
    first. Boundary vertices in another coordinate system are converted to the point's
    system first. Points outside the boundary's bounding box are rejected immediately;
    otherwise each edge is tested for the point lying on it (within the tolerance) and
    the even-odd ray casting rule decides the rest.

    Args:
        point: The coordinate to test
        boundary: The polygon vertices in order
        tolerance: How close, in degrees, a point must be to an edge to count as on it.
            Default is 1e-7 (about 1.1 cm).

    Returns:
        True if the point is inside the polygon or on an edge or vertex.
        A boundary with fewer than three vertices contains nothing and always gives False.

    Examples:
        >>> square = [Coordinate(0, 0), Coordinate(0, 1), Coordinate(1, 1), Coordinate(1, 0)]
        >>> is_in_polygon(Coordinate(0.5, 0.5), square)
        True
        >>> is_in_polygon(Coordinate(0.5, 0), square)
        True
        >>> is_in_polygon(Coordinate(2, 2), square)
        False
    """
    boundary = list(boundary)
    if len(boundary) < 3:
        log.debug(
            "polygon with %d vertices is degenerate and contains nothing", len(boundary)
        )
        return False

    ring = _normalize_ring(point, boundary)

    if not BoundingBox.from_coordinates(ring).contains(point):
        log.debug("%s is outside the polygon bounding box", point)
        return False

    return point_in_ring(
        point.longitude,
        point.latitude,
        [(c.longitude, c.latitude) for c in ring],
        tolerance,
    )
