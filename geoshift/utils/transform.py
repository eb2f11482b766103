"""
Conversions between the WGS84, GCJ02 and BD09 coordinate systems.

Every function in this module works on plain floats as well as numpy arrays of
equal shape, so single coordinates and whole tracks share the same arithmetic.
Scalar inputs produce Python floats, array inputs produce arrays.

Only four conversions are direct (WGS84<->GCJ02 and GCJ02<->BD09); WGS84<->BD09
goes through GCJ02. The GCJ02->WGS84 and BD09->GCJ02 directions are the
conventional one-step approximations of the forward formulas rather than exact
inverses, so a round trip is accurate to a few meters, not bit-for-bit.
"""

from __future__ import annotations

from typing import Tuple, Union

import numpy as np

from geoshift.utils.crs import (
    BD09_LAT_OFFSET,
    BD09_LNG_OFFSET,
    KRASOVSKY_A,
    KRASOVSKY_EE,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    PI,
    REGION_MAX_LAT,
    REGION_MAX_LNG,
    REGION_MIN_LAT,
    REGION_MIN_LNG,
    X_PI,
    CoordinateSystem,
)

Degrees = Union[float, np.ndarray]


def _as_arrays(lng: Degrees, lat: Degrees) -> Tuple[np.ndarray, np.ndarray]:
    return np.asarray(lng, dtype=float), np.asarray(lat, dtype=float)


def _unwrap(value: np.ndarray) -> Degrees:
    """Internal use."""
    return value.item() if value.ndim == 0 else value


def out_of_region(lng: Degrees, lat: Degrees):
    """
    Check whether a position lies outside the rectangle where GCJ02 obfuscation applies.

    The rectangle is a coarse approximation of the national territory: a True result
    means the point is certainly outside, a False result only means it may be inside.

    Args:
        lng: Longitude(s) in decimal degrees
        lat: Latitude(s) in decimal degrees

    Returns:
        A bool for scalar input, a boolean array for array input
    """
    lng, lat = _as_arrays(lng, lat)
    outside = (
        (lng < REGION_MIN_LNG)
        | (lng > REGION_MAX_LNG)
        | (lat < REGION_MIN_LAT)
        | (lat > REGION_MAX_LAT)
    )
    return bool(outside) if outside.ndim == 0 else outside


def normalize(lng: Degrees, lat: Degrees) -> Tuple[Degrees, Degrees]:
    """
    Bring transform output back into the valid coordinate domain.

    Longitudes outside [-180, 180] are wrapped modulo 360 and latitudes are clamped
    into [-90, 90]. Values already inside their domain are returned untouched.
    """
    lng, lat = _as_arrays(lng, lat)
    wrapped = np.where(
        (lng < MIN_LONGITUDE) | (lng > MAX_LONGITUDE),
        np.mod(lng + 180.0, 360.0) - 180.0,
        lng,
    )
    clamped = np.clip(lat, MIN_LATITUDE, MAX_LATITUDE)
    return _unwrap(wrapped), _unwrap(clamped)


def _transform_lat(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    ret = (
        -100.0
        + 2.0 * x
        + 3.0 * y
        + 0.2 * y * y
        + 0.1 * x * y
        + 0.2 * np.sqrt(np.abs(x))
    )
    ret = ret + (20.0 * np.sin(6.0 * x * PI) + 20.0 * np.sin(2.0 * x * PI)) * 2.0 / 3.0
    ret = ret + (20.0 * np.sin(y * PI) + 40.0 * np.sin(y / 3.0 * PI)) * 2.0 / 3.0
    ret = ret + (160.0 * np.sin(y / 12.0 * PI) + 320 * np.sin(y * PI / 30.0)) * 2.0 / 3.0
    return ret


def _transform_lng(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * np.sqrt(np.abs(x))
    ret = ret + (20.0 * np.sin(6.0 * x * PI) + 20.0 * np.sin(2.0 * x * PI)) * 2.0 / 3.0
    ret = ret + (20.0 * np.sin(x * PI) + 40.0 * np.sin(x / 3.0 * PI)) * 2.0 / 3.0
    ret = ret + (150.0 * np.sin(x / 12.0 * PI) + 300.0 * np.sin(x / 30.0 * PI)) * 2.0 / 3.0
    return ret


def _gcj02_offset(lng: np.ndarray, lat: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the GCJ02 offset, in degrees, for a position read as WGS84.

    The raw offsets are polynomial plus sine-harmonic functions of the position
    relative to (105, 35), scaled to degrees on the Krasovsky ellipsoid at the
    position's latitude.
    """
    d_lat = _transform_lat(lng - 105.0, lat - 35.0)
    d_lng = _transform_lng(lng - 105.0, lat - 35.0)
    rad_lat = lat / 180.0 * PI
    magic = np.sin(rad_lat)
    magic = 1 - KRASOVSKY_EE * magic * magic
    sqrt_magic = np.sqrt(magic)
    d_lat = (d_lat * 180.0) / (
        (KRASOVSKY_A * (1 - KRASOVSKY_EE)) / (magic * sqrt_magic) * PI
    )
    d_lng = (d_lng * 180.0) / (KRASOVSKY_A / sqrt_magic * np.cos(rad_lat) * PI)
    return d_lng, d_lat


def wgs84_to_gcj02(lng: Degrees, lat: Degrees) -> Tuple[Degrees, Degrees]:
    """
    Convert WGS84 longitude/latitude to GCJ02.

    Positions outside the obfuscation region are returned unchanged.

    Examples:
        >>> # Beijing moves a few hundred meters
        >>> lng, lat = wgs84_to_gcj02(116.397128, 39.916527)
        >>>
        >>> # Paris is outside the region and stays put
        >>> wgs84_to_gcj02(2.3522, 48.8566)
        (2.3522, 48.8566)
    """
    lng, lat = _as_arrays(lng, lat)
    d_lng, d_lat = _gcj02_offset(lng, lat)
    outside = out_of_region(lng, lat)
    return normalize(
        np.where(outside, lng, lng + d_lng),
        np.where(outside, lat, lat + d_lat),
    )


def gcj02_to_wgs84(lng: Degrees, lat: Degrees) -> Tuple[Degrees, Degrees]:
    """
    Convert GCJ02 longitude/latitude to WGS84.

    The offset is evaluated at the GCJ02 position as if it were WGS84 and the shifted
    position is reflected across the input. This is a one-step approximation of the
    inverse; its error is a few meters at most inside the region.

    Positions outside the obfuscation region are returned unchanged.
    """
    lng, lat = _as_arrays(lng, lat)
    d_lng, d_lat = _gcj02_offset(lng, lat)
    mg_lng = lng + d_lng
    mg_lat = lat + d_lat
    outside = out_of_region(lng, lat)
    return normalize(
        np.where(outside, lng, lng * 2 - mg_lng),
        np.where(outside, lat, lat * 2 - mg_lat),
    )


def gcj02_to_bd09(lng: Degrees, lat: Degrees) -> Tuple[Degrees, Degrees]:
    """
    Convert GCJ02 longitude/latitude to BD09.

    The position is perturbed in polar form (magnitude by a small sine term, angle by
    a small cosine term) and then shifted by a fixed offset.
    """
    x, y = _as_arrays(lng, lat)
    z = np.sqrt(x * x + y * y) + 0.00002 * np.sin(y * X_PI)
    theta = np.arctan2(y, x) + 0.000003 * np.cos(x * X_PI)
    return normalize(
        z * np.cos(theta) + BD09_LNG_OFFSET,
        z * np.sin(theta) + BD09_LAT_OFFSET,
    )


def bd09_to_gcj02(lng: Degrees, lat: Degrees) -> Tuple[Degrees, Degrees]:
    """
    Convert BD09 longitude/latitude to GCJ02.

    Removes the fixed offset first, then subtracts the polar perturbation terms. Like
    gcj02_to_wgs84 this is an approximation of the inverse, not an exact one.
    """
    lng, lat = _as_arrays(lng, lat)
    x = lng - BD09_LNG_OFFSET
    y = lat - BD09_LAT_OFFSET
    z = np.sqrt(x * x + y * y) - 0.00002 * np.sin(y * X_PI)
    theta = np.arctan2(y, x) - 0.000003 * np.cos(x * X_PI)
    return normalize(z * np.cos(theta), z * np.sin(theta))


def wgs84_to_bd09(lng: Degrees, lat: Degrees) -> Tuple[Degrees, Degrees]:
    """Convert WGS84 longitude/latitude to BD09 by way of GCJ02."""
    return gcj02_to_bd09(*wgs84_to_gcj02(lng, lat))


def bd09_to_wgs84(lng: Degrees, lat: Degrees) -> Tuple[Degrees, Degrees]:
    """Convert BD09 longitude/latitude to WGS84 by way of GCJ02."""
    return gcj02_to_wgs84(*bd09_to_gcj02(lng, lat))


def transform(
    lng: Degrees,
    lat: Degrees,
    source: CoordinateSystem,
    target: CoordinateSystem,
) -> Tuple[Degrees, Degrees]:
    """
    Convert longitude/latitude from one coordinate system to another.

    Args:
        lng: Longitude(s) in the source system
        lat: Latitude(s) in the source system
        source: The system the input is expressed in
        target: The system to convert to

    Returns:
        A (longitude, latitude) tuple in the target system. When source and target are
        the same the input is returned as given.

    Raises:
        ValueError: If either argument is not a CoordinateSystem member
    """
    if source is target:
        return lng, lat

    if source is CoordinateSystem.WGS84:
        if target is CoordinateSystem.GCJ02:
            return wgs84_to_gcj02(lng, lat)
        elif target is CoordinateSystem.BD09:
            return wgs84_to_bd09(lng, lat)
    elif source is CoordinateSystem.GCJ02:
        if target is CoordinateSystem.WGS84:
            return gcj02_to_wgs84(lng, lat)
        elif target is CoordinateSystem.BD09:
            return gcj02_to_bd09(lng, lat)
    elif source is CoordinateSystem.BD09:
        if target is CoordinateSystem.GCJ02:
            return bd09_to_gcj02(lng, lat)
        elif target is CoordinateSystem.WGS84:
            return bd09_to_wgs84(lng, lat)

    raise ValueError(f"no transform from {source!r} to {target!r}")
