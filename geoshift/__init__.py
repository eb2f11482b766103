from geoshift.constructs.bounding_box import BoundingBox
from geoshift.constructs.coordinate import Coordinate
from geoshift.constructs.region import Region
from geoshift.constructs.track import Track
from geoshift.utils.crs import CoordinateSystem
from geoshift.utils.exceptions import InvalidCoordinateError
from geoshift.utils.geo import (
    convert,
    distance_kilometers,
    distance_meters,
    is_in_circle,
    is_in_polygon,
    make_point,
)

__all__ = [
    "BoundingBox",
    "Coordinate",
    "CoordinateSystem",
    "InvalidCoordinateError",
    "Region",
    "Track",
    "convert",
    "distance_kilometers",
    "distance_meters",
    "is_in_circle",
    "is_in_polygon",
    "make_point",
]
