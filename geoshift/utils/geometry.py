"""
Planar and spherical predicates on raw longitude/latitude values.

These functions know nothing about coordinate systems: callers are expected to
have brought every operand into one system first (see geoshift.utils.geo).
"""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np

from geoshift.utils.crs import EARTH_RADIUS_METERS

# Tolerance, in degrees, for deciding that a point lies on a polygon edge.
# 1e-7 degrees is roughly 1.1 cm at the equator.
DEFAULT_TOLERANCE = 1e-7

LngLat = Tuple[float, float]


def haversine_meters(
    lng1: Union[float, np.ndarray],
    lat1: Union[float, np.ndarray],
    lng2: Union[float, np.ndarray],
    lat2: Union[float, np.ndarray],
    radius: float = EARTH_RADIUS_METERS,
) -> Union[float, np.ndarray]:
    """
    Compute the great-circle distance between two positions with the haversine formula.

    The result is symmetric in its two operands down to the last bit and zero for
    identical positions. Either side may be an array, in which case an array of
    distances is returned.

    Args:
        lng1: Longitude of the first position in decimal degrees
        lat1: Latitude of the first position in decimal degrees
        lng2: Longitude of the second position in decimal degrees
        lat2: Latitude of the second position in decimal degrees
        radius: The sphere radius in meters. Default is the WGS84 equatorial radius.

    Returns:
        The distance in meters (a float for scalar input, an array otherwise)

    Examples:
        >>> # One degree of longitude along the equator
        >>> round(haversine_meters(0.0, 0.0, 1.0, 0.0))
        111319
    """
    rad_lng1 = np.radians(np.asarray(lng1, dtype=float))
    rad_lat1 = np.radians(np.asarray(lat1, dtype=float))
    rad_lng2 = np.radians(np.asarray(lng2, dtype=float))
    rad_lat2 = np.radians(np.asarray(lat2, dtype=float))

    d_lat = np.abs(rad_lat2 - rad_lat1)
    d_lng = np.abs(rad_lng2 - rad_lng1)

    a = np.sin(d_lat / 2) ** 2 + np.cos(rad_lat1) * np.cos(rad_lat2) * np.sin(
        d_lng / 2
    ) ** 2
    # rounding can push `a` a hair past 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)
    distance = 2 * np.arcsin(np.sqrt(a)) * radius

    return distance.item() if distance.ndim == 0 else distance


def in_rectangle(
    lng: float,
    lat: float,
    min_lng: float,
    min_lat: float,
    max_lng: float,
    max_lat: float,
    tolerance: float = 0.0,
) -> bool:
    """Check whether a position lies inside an axis-aligned rectangle, edges included."""
    return (
        min_lng - tolerance <= lng <= max_lng + tolerance
        and min_lat - tolerance <= lat <= max_lat + tolerance
    )


def on_segment(
    lng: float,
    lat: float,
    start: LngLat,
    end: LngLat,
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """
    Check whether a position lies on the segment between two vertices.

    The position must fall inside the segment's bounding box grown by the tolerance,
    and the cross product of (start -> position) and (start -> end) must be smaller
    than the tolerance in magnitude. Endpoints count as on the segment.

    Args:
        lng: Longitude of the position
        lat: Latitude of the position
        start: (longitude, latitude) of the first vertex
        end: (longitude, latitude) of the second vertex
        tolerance: Allowed deviation in degrees. Default is 1e-7 (about 1.1 cm).

    Returns:
        True if the position is on the segment within the tolerance
    """
    lng1, lat1 = start
    lng2, lat2 = end

    if not in_rectangle(
        lng,
        lat,
        min(lng1, lng2),
        min(lat1, lat2),
        max(lng1, lng2),
        max(lat1, lat2),
        tolerance,
    ):
        return False

    cross = (lng - lng1) * (lat2 - lat1) - (lat - lat1) * (lng2 - lng1)

    return abs(cross) < tolerance


def crosses_ray(lng: float, lat: float, start: LngLat, end: LngLat) -> bool:
    """
    Check whether an edge crosses the horizontal ray cast eastward from a position.

    Uses a half-open latitude interval (one endpoint strictly below the position, the
    other at or above it) so a ray passing exactly through a shared vertex is counted
    once. Horizontal edges never cross, which also rules out a zero denominator.
    """
    lng1, lat1 = start
    lng2, lat2 = end

    if not ((lat1 < lat <= lat2) or (lat2 < lat <= lat1)):
        return False

    intersect_lng = lng1 + (lat - lat1) * (lng2 - lng1) / (lat2 - lat1)

    return lng < intersect_lng


def point_in_ring(
    lng: float,
    lat: float,
    ring: Sequence[LngLat],
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """
    Even-odd containment test of a position against a closed ring of vertices.

    Each edge (consecutive vertices, wrapping from the last back to the first) is first
    checked for the position lying on it, which counts as contained. Otherwise the edge
    toggles the result when it crosses the eastward ray from the position.

    Args:
        lng: Longitude of the position
        lat: Latitude of the position
        ring: The ring vertices as (longitude, latitude) pairs, at least three of them
        tolerance: On-edge tolerance in degrees

    Returns:
        True if the position is inside the ring or on its boundary
    """
    inside = False
    previous = ring[-1]
    for current in ring:
        if on_segment(lng, lat, current, previous, tolerance):
            return True
        if crosses_ray(lng, lat, current, previous):
            inside = not inside
        previous = current

    return inside
