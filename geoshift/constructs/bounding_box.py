from __future__ import annotations

from typing import Iterable, NamedTuple, Optional

from shapely.geometry import Polygon, box

from geoshift.constructs.coordinate import Coordinate
from geoshift.utils.crs import CoordinateSystem
from geoshift.utils.geometry import in_rectangle


class BoundingBox(NamedTuple):
    """
    The axis-aligned rectangle enclosing a set of coordinates.

    Every polygon lies inside the bounding box of its vertices, so testing a point
    against the box first is a cheap way to reject points far away from a polygon.

    Attributes:
        min_lng: The western edge in decimal degrees
        min_lat: The southern edge in decimal degrees
        max_lng: The eastern edge in decimal degrees
        max_lat: The northern edge in decimal degrees
        system: The coordinate system the edges are expressed in

    Examples:
        >>> from geoshift.constructs.coordinate import Coordinate
        >>> from geoshift.constructs.bounding_box import BoundingBox
        >>> bbox = BoundingBox.from_coordinates(
        ...     [Coordinate(0, 0), Coordinate(2, 1), Coordinate(1, 3)]
        ... )
        >>> bbox.contains(Coordinate(1, 1))
        True
        >>> bbox.north_east
        Coordinate(longitude=2.0, latitude=3.0, system=WGS84)
    """

    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float
    system: CoordinateSystem = CoordinateSystem.WGS84

    @classmethod
    def from_coordinates(
        cls,
        coords: Iterable[Coordinate],
        system: Optional[CoordinateSystem] = None,
    ) -> BoundingBox:
        """
        Build the bounding box of a set of coordinates.

        Args:
            coords: The coordinates to enclose; must not be empty
            system: The system to express the box in. Coordinates tagged with another
                system are converted first. Defaults to the system of the first coordinate.

        Returns:
            A new BoundingBox

        Raises:
            ValueError: If no coordinates are given
        """
        coords = list(coords)
        if not coords:
            raise ValueError("cannot build a bounding box from zero coordinates")

        if system is None:
            system = coords[0].system
        coords = [c.to_system(system) for c in coords]

        lngs = [c.longitude for c in coords]
        lats = [c.latitude for c in coords]

        return cls(min(lngs), min(lats), max(lngs), max(lats), system)

    @property
    def south_west(self) -> Coordinate:
        return Coordinate(float(self.min_lng), float(self.min_lat), self.system)

    @property
    def north_east(self) -> Coordinate:
        return Coordinate(float(self.max_lng), float(self.max_lat), self.system)

    def contains(self, coord: Coordinate) -> bool:
        """
        Check whether a coordinate lies inside the box, edges included.

        The coordinate is converted to the box's system first.
        """
        c = coord.to_system(self.system)
        return in_rectangle(
            c.longitude,
            c.latitude,
            self.min_lng,
            self.min_lat,
            self.max_lng,
            self.max_lat,
        )

    def to_polygon(self) -> Polygon:
        """Get the box as a shapely Polygon (x as longitude, y as latitude)."""
        return box(self.min_lng, self.min_lat, self.max_lng, self.max_lat)
