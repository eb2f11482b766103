from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from geopandas import read_file
from shapely.geometry import Polygon, mapping

from geoshift.constructs.bounding_box import BoundingBox
from geoshift.constructs.coordinate import Coordinate
from geoshift.utils.crs import LATLON_CRS, CoordinateSystem
from geoshift.utils.geo import is_in_polygon
from geoshift.utils.geometry import DEFAULT_TOLERANCE

log = logging.getLogger(__name__)


class Region:
    """
    A polygonal area described by its boundary vertices in one coordinate system.

    A Region is a reusable holder for the boundary sequence accepted by
    geoshift.utils.geo.is_in_polygon, e.g. a delivery zone or a campus outline that is
    tested against many points. All vertices are stored in the region's system.

    Args:
        boundary: The polygon vertices in order. The ring may or may not be closed.
        system: The coordinate system to store the vertices in. Vertices tagged with
            another system are converted. Defaults to the system of the first vertex.

    Attributes:
        boundary: The vertices as a tuple of Coordinates
        system: The coordinate system of the vertices

    Examples:
        >>> from geoshift.constructs.region import Region
        >>>
        >>> # A zone drawn on a BD09 map
        >>> zone = Region.from_coordinates(
        ...     [(116.30, 39.90), (116.50, 39.90), (116.50, 40.00), (116.30, 40.00)],
        ...     CoordinateSystem.BD09,
        ... )
        >>>
        >>> # Test a raw GPS fix against it
        >>> zone.contains(Coordinate(116.40, 39.95))
        True
        >>>
        >>> # Load a boundary polygon drawn in WGS84
        >>> campus = Region.from_geojson('campus.geojson')
    """

    def __init__(
        self,
        boundary: Sequence[Coordinate],
        system: Optional[CoordinateSystem] = None,
    ):
        if system is None:
            system = boundary[0].system if boundary else CoordinateSystem.WGS84
        self.system = CoordinateSystem.parse(system)
        self.boundary = tuple(c.to_system(self.system) for c in boundary)

    def __len__(self):
        """Number of boundary vertices."""
        return len(self.boundary)

    def __eq__(self, other):
        if not isinstance(other, Region):
            return NotImplemented
        return self.system is other.system and self.boundary == other.boundary

    def __repr__(self):
        return f"Region(system={self.system.name}, vertices={len(self.boundary)})"

    @classmethod
    def from_coordinates(
        cls,
        points: Sequence[Tuple[float, float]],
        system: CoordinateSystem = CoordinateSystem.WGS84,
    ) -> Region:
        """
        Create a region from (longitude, latitude) pairs.

        Args:
            points: The polygon vertices as (longitude, latitude) pairs
            system: The coordinate system of the pairs. Default is WGS84.

        Returns:
            A new Region

        Raises:
            InvalidCoordinateError: If any pair is outside the valid range
        """
        return cls([Coordinate.of(lng, lat, system) for lng, lat in points], system)

    @classmethod
    def from_geojson(
        cls,
        file: Union[Path, str],
        system: CoordinateSystem = CoordinateSystem.WGS84,
    ) -> Region:
        """
        Create a region from a GeoJSON file containing a single polygon.

        Only the exterior ring of the polygon is used. For a WGS84 region the geometry
        is reprojected to EPSG:4326 if the file declares another CRS. GeoJSON has no way
        to declare GCJ02 or BD09, so for those systems the coordinates are taken as-is.

        Args:
            file: Path to the GeoJSON file (as string or Path object)
            system: The coordinate system the polygon is drawn in. Default is WGS84.

        Returns:
            A new Region

        Raises:
            TypeError: If the file contains multiple features, a non-polygon geometry or
                lacks CRS information
        """
        filepath = Path(file)
        frame = read_file(filepath)

        if len(frame) > 1:
            raise TypeError(
                "found multiple polygons in the input; please only provide one"
            )
        elif frame.crs is None:
            raise TypeError(
                "no crs information found in the file; please make sure file has a crs"
            )

        system = CoordinateSystem.parse(system)
        if system is CoordinateSystem.WGS84 and not frame.crs.equals(
            LATLON_CRS, ignore_axis_order=True
        ):
            frame = frame.to_crs(LATLON_CRS)

        polygon = frame.iloc[0].geometry
        if not isinstance(polygon, Polygon):
            raise TypeError(f"expected a polygon but found a {polygon.geom_type}")

        log.debug("read a %s polygon from %s", system.name, filepath)

        points = [(c[0], c[1]) for c in polygon.exterior.coords]

        return cls.from_coordinates(points, system)

    @property
    def bounds(self) -> BoundingBox:
        """The bounding box of the boundary vertices, in the region's system."""
        return BoundingBox.from_coordinates(self.boundary, self.system)

    @property
    def geometry(self) -> Polygon:
        """
        The boundary as a shapely Polygon with x as longitude and y as latitude.

        Raises:
            ValueError: If the region has fewer than three vertices
        """
        return Polygon(self.coordinates())

    def coordinates(self) -> List[Tuple[float, float]]:
        return [(c.longitude, c.latitude) for c in self.boundary]

    def to_system(self, target: CoordinateSystem) -> Region:
        """Convert every boundary vertex to the target coordinate system."""
        target = CoordinateSystem.parse(target)
        if target is self.system:
            return self
        return Region(self.boundary, target)

    def contains(self, coord: Coordinate, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """
        Check whether a coordinate lies inside the region or on its boundary.

        See geoshift.utils.geo.is_in_polygon for the rules applied.
        """
        return is_in_polygon(coord, self.boundary, tolerance)

    def to_geojson(self) -> str:
        """
        Convert the region to a GeoJSON geometry string.

        The vertices are written in the region's own system; convert the region to
        WGS84 first if the output is meant for tools that assume standard GeoJSON.

        Examples:
            >>> region = Region.from_geojson('campus.geojson')
            >>> with open('campus_gcj02.geojson', 'w') as f:
            ...     f.write(region.to_system(CoordinateSystem.GCJ02).to_geojson())
        """
        return json.dumps(mapping(self.geometry))
