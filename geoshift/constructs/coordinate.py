from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from shapely.geometry import Point

from geoshift.utils.crs import (
    EARTH_RADIUS_METERS,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    CoordinateSystem,
)
from geoshift.utils.exceptions import InvalidCoordinateError
from geoshift.utils.geometry import haversine_meters, in_rectangle
from geoshift.utils.keys import (
    DEFAULT_LATITUDE_KEY,
    DEFAULT_LONGITUDE_KEY,
    DEFAULT_SYSTEM_KEY,
)
from geoshift.utils.transform import transform


def _parse_degrees(field: str, value: Any) -> float:
    """Internal use."""
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidCoordinateError(field, value) from e


@dataclass(frozen=True)
class Coordinate:
    """
    Represents a single geographic position tagged with the coordinate system it is expressed in.

    A Coordinate is an immutable value: converting it to another system, or any other
    operation, returns a new instance. Equality is exact field equality; tolerances are
    only ever applied inside the geometric predicates.

    Attributes:
        longitude: The longitude in decimal degrees (range: -180 to 180)
        latitude: The latitude in decimal degrees (range: -90 to 90)
        system: The CoordinateSystem the values are expressed in

    Raises:
        InvalidCoordinateError: If longitude or latitude is outside its range (or not a number)

    Examples:
        >>> from geoshift.constructs.coordinate import Coordinate
        >>> from geoshift.utils.crs import CoordinateSystem
        >>> # A GPS fix in Beijing
        >>> gps = Coordinate(116.397128, 39.916527)
        >>>
        >>> # The same place as a domestic map provider would draw it
        >>> on_map = gps.to_system(CoordinateSystem.GCJ02)
        >>> print(on_map.system)
        CoordinateSystem.GCJ02
    """

    longitude: float
    latitude: float
    system: CoordinateSystem = CoordinateSystem.WGS84

    def __post_init__(self):
        # frozen, so the float values have to be set through object
        object.__setattr__(self, "longitude", _parse_degrees("longitude", self.longitude))
        object.__setattr__(self, "latitude", _parse_degrees("latitude", self.latitude))

        if not MIN_LONGITUDE <= self.longitude <= MAX_LONGITUDE:
            raise InvalidCoordinateError("longitude", self.longitude)
        if not MIN_LATITUDE <= self.latitude <= MAX_LATITUDE:
            raise InvalidCoordinateError("latitude", self.latitude)
        if not isinstance(self.system, CoordinateSystem):
            raise ValueError(f"expected a CoordinateSystem but got {self.system!r}")

    def __repr__(self):
        return f"Coordinate(longitude={self.longitude}, latitude={self.latitude}, system={self.system.name})"

    @classmethod
    def of(
        cls,
        longitude: float,
        latitude: float,
        system: CoordinateSystem = CoordinateSystem.WGS84,
    ) -> Coordinate:
        """
        Create a coordinate from longitude and latitude values.

        Any value that float() accepts is allowed, so this is also the entry point for
        numpy scalars and other numeric types.

        Args:
            longitude: The longitude in decimal degrees
            latitude: The latitude in decimal degrees
            system: The coordinate system of the values. Default is WGS84.

        Returns:
            A new Coordinate

        Raises:
            InvalidCoordinateError: If either value is not a number or is out of range
        """
        return cls(
            _parse_degrees("longitude", longitude),
            _parse_degrees("latitude", latitude),
            CoordinateSystem.parse(system),
        )

    @classmethod
    def from_strings(
        cls,
        longitude: str,
        latitude: str,
        system: CoordinateSystem = CoordinateSystem.WGS84,
    ) -> Coordinate:
        """
        Create a coordinate from textual longitude and latitude, e.g. form or CSV fields.

        Examples:
            >>> Coordinate.from_strings("121.4737", "31.2304", CoordinateSystem.BD09)
            Coordinate(longitude=121.4737, latitude=31.2304, system=BD09)
        """
        return cls.of(longitude, latitude, system)

    @classmethod
    def from_decimals(
        cls,
        longitude: Decimal,
        latitude: Decimal,
        system: CoordinateSystem = CoordinateSystem.WGS84,
    ) -> Coordinate:
        """Create a coordinate from Decimal longitude and latitude, e.g. values read from a database."""
        return cls.of(longitude, latitude, system)

    @classmethod
    def from_lat_lon(
        cls,
        lat: float,
        lon: float,
        system: CoordinateSystem = CoordinateSystem.WGS84,
    ) -> Coordinate:
        """
        Create a coordinate from latitude and longitude, in that order.

        This is a convenience for data sources that list latitude first.
        """
        return cls.of(lon, lat, system)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Coordinate:
        """
        Create a coordinate from a plain {longitude, latitude, system} record.

        The system may be given as a CoordinateSystem member or its name; it defaults
        to WGS84 when missing.
        """
        return cls.of(
            d[DEFAULT_LONGITUDE_KEY],
            d[DEFAULT_LATITUDE_KEY],
            d.get(DEFAULT_SYSTEM_KEY, CoordinateSystem.WGS84),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            DEFAULT_LONGITUDE_KEY: self.longitude,
            DEFAULT_LATITUDE_KEY: self.latitude,
            DEFAULT_SYSTEM_KEY: self.system.value,
        }

    @property
    def geom(self) -> Point:
        """A shapely Point with x as longitude and y as latitude."""
        return Point(self.longitude, self.latitude)

    def to_system(self, target: CoordinateSystem) -> Coordinate:
        """
        Convert this coordinate to another coordinate system.

        Conversion is computed on every call; nothing is cached. Converting to the
        coordinate's own system returns the coordinate itself.

        Args:
            target: The coordinate system to convert to

        Returns:
            A Coordinate expressed in the target system

        Examples:
            >>> bd = Coordinate(116.404, 39.915, CoordinateSystem.BD09)
            >>> gps = bd.to_system(CoordinateSystem.WGS84)
        """
        target = CoordinateSystem.parse(target)
        if target is self.system:
            return self

        lng, lat = transform(self.longitude, self.latitude, self.system, target)

        return Coordinate(float(lng), float(lat), target)

    def to_wgs84(self) -> Coordinate:
        return self.to_system(CoordinateSystem.WGS84)

    def to_gcj02(self) -> Coordinate:
        return self.to_system(CoordinateSystem.GCJ02)

    def to_bd09(self) -> Coordinate:
        return self.to_system(CoordinateSystem.BD09)

    def distance_meters(
        self, other: Coordinate, radius: float = EARTH_RADIUS_METERS
    ) -> float:
        """
        Compute the great-circle distance to another coordinate in meters.

        Both coordinates are converted to WGS84 first, so they may be tagged with
        different systems.

        Args:
            other: The coordinate to measure to
            radius: The sphere radius in meters. Default is the WGS84 equatorial radius.

        Returns:
            The haversine distance in meters
        """
        a = self.to_wgs84()
        b = other.to_wgs84()
        return haversine_meters(a.longitude, a.latitude, b.longitude, b.latitude, radius)

    def distance_kilometers(
        self, other: Coordinate, radius: float = EARTH_RADIUS_METERS
    ) -> float:
        return self.distance_meters(other, radius) / 1000

    def is_in_circle(self, center: Coordinate, radius: float) -> bool:
        """
        Check whether this coordinate lies within a circle, boundary included.

        Args:
            center: The center of the circle, in any coordinate system
            radius: The radius of the circle in meters

        Returns:
            True if the distance to the center is at most the radius
        """
        return self.distance_meters(center) <= radius

    def is_in_rectangle(self, corner1: Coordinate, corner2: Coordinate) -> bool:
        """
        Check whether this coordinate lies in the rectangle spanned by two diagonal corners.

        The corners are converted to this coordinate's system first and may be given in
        either order. Edges count as inside.
        """
        c1 = corner1.to_system(self.system)
        c2 = corner2.to_system(self.system)
        return in_rectangle(
            self.longitude,
            self.latitude,
            min(c1.longitude, c2.longitude),
            min(c1.latitude, c2.latitude),
            max(c1.longitude, c2.longitude),
            max(c1.latitude, c2.latitude),
        )
