from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from geopandas import GeoDataFrame, points_from_xy

from geoshift.constructs.coordinate import Coordinate
from geoshift.constructs.region import Region
from geoshift.utils.crs import (
    EARTH_RADIUS_METERS,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    CoordinateSystem,
)
from geoshift.utils.exceptions import InvalidCoordinateError
from geoshift.utils.geo import is_in_polygon
from geoshift.utils.geometry import DEFAULT_TOLERANCE, haversine_meters
from geoshift.utils.keys import DEFAULT_LATITUDE_KEY, DEFAULT_LONGITUDE_KEY
from geoshift.utils.transform import transform


def _validated_column(
    frame: pd.DataFrame, column: str, field: str, low: float, high: float
) -> np.ndarray:
    """Internal use."""
    values = pd.to_numeric(frame[column], errors="coerce").to_numpy(dtype=float)
    # NaN fails both comparisons, so unparseable entries are caught here too
    bad = np.flatnonzero(~((values >= low) & (values <= high)))
    if len(bad) > 0:
        raise InvalidCoordinateError(field, frame[column].iloc[bad[0]])
    return values


class Track:
    """
    An ordered batch of coordinates sharing one coordinate system, e.g. a GPS log.

    A Track wraps a pandas DataFrame with longitude and latitude columns and applies the
    coordinate transforms and distance computations to all rows at once with numpy. Every
    row is validated on construction.

    The underlying DataFrame must have unique indices - duplicate indices will raise
    an IndexError during initialization.

    Args:
        frame: A DataFrame with longitude and latitude columns (named by
            geoshift.utils.keys); other columns are dropped
        system: The coordinate system of the values. Default is WGS84.

    Attributes:
        coords: A list of Coordinate objects, one per row
        system: The coordinate system of the track
        index: The pandas Index of the underlying DataFrame

    Examples:
        >>> import pandas as pd
        >>> from geoshift.constructs.track import Track
        >>>
        >>> df = pd.DataFrame({
        ...     'longitude': [116.3975, 116.4039, 116.4108],
        ...     'latitude': [39.9087, 39.9151, 39.9219],
        ... })
        >>> track = Track.from_dataframe(df)
        >>>
        >>> # Convert the whole log for display on a GCJ02 map
        >>> on_map = track.to_system(CoordinateSystem.GCJ02)
        >>>
        >>> # Which fixes were within 1km of a point of interest?
        >>> near = track.within_circle(Coordinate(116.4039, 39.9151), 1000)
    """

    _frame: pd.DataFrame

    def __init__(
        self,
        frame: pd.DataFrame,
        system: CoordinateSystem = CoordinateSystem.WGS84,
    ):
        if frame.index.has_duplicates:
            duplicates = frame.index[frame.index.duplicated()].values
            raise IndexError(
                f"Track cannot have duplicates in the index but found {duplicates}"
            )
        for column in (DEFAULT_LONGITUDE_KEY, DEFAULT_LATITUDE_KEY):
            if column not in frame.columns:
                raise ValueError(f"Track requires a '{column}' column")

        lng = _validated_column(
            frame, DEFAULT_LONGITUDE_KEY, "longitude", MIN_LONGITUDE, MAX_LONGITUDE
        )
        lat = _validated_column(
            frame, DEFAULT_LATITUDE_KEY, "latitude", MIN_LATITUDE, MAX_LATITUDE
        )

        self.system = CoordinateSystem.parse(system)
        self._frame = pd.DataFrame(
            {DEFAULT_LONGITUDE_KEY: lng, DEFAULT_LATITUDE_KEY: lat},
            index=frame.index,
        )

    def __getitem__(self, i) -> Track:
        if isinstance(i, (int, np.integer)):
            i = [i]
        new_frame = self._frame.iloc[i]
        return Track(new_frame, self.system)

    def __add__(self, other: Track) -> Track:
        if self.system is not other.system:
            raise TypeError(
                "cannot add two tracks together with different coordinate systems"
            )
        new_frame = pd.concat([self._frame, other._frame])
        return Track(new_frame, self.system)

    def __len__(self):
        """Number of coordinates."""
        return len(self._frame)

    def __repr__(self):
        return f"Track(system={self.system.name}, points={len(self)})"

    @property
    def index(self) -> pd.Index:
        """Get index to underlying DataFrame."""
        return self._frame.index

    @property
    def longitudes(self) -> np.ndarray:
        return self._frame[DEFAULT_LONGITUDE_KEY].to_numpy()

    @property
    def latitudes(self) -> np.ndarray:
        return self._frame[DEFAULT_LATITUDE_KEY].to_numpy()

    @cached_property
    def coords(self) -> List[Coordinate]:
        """
        Get all points in the track as Coordinate objects, in index order.

        The result is cached; Tracks are never modified in place.
        """
        return [
            Coordinate(float(lng), float(lat), self.system)
            for lng, lat in zip(self.longitudes, self.latitudes)
        ]

    @classmethod
    def from_coordinates(
        cls,
        coords: Sequence[Coordinate],
        system: Optional[CoordinateSystem] = None,
    ) -> Track:
        """
        Create a track from Coordinate objects.

        Args:
            coords: The coordinates, in order
            system: The system of the track. Coordinates tagged with another system are
                converted. Defaults to the system of the first coordinate, or WGS84 when
                coords is empty.

        Returns:
            A new Track with a simple range index
        """
        if system is None:
            system = coords[0].system if coords else CoordinateSystem.WGS84
        system = CoordinateSystem.parse(system)
        converted = [c.to_system(system) for c in coords]
        frame = pd.DataFrame(
            {
                DEFAULT_LONGITUDE_KEY: [c.longitude for c in converted],
                DEFAULT_LATITUDE_KEY: [c.latitude for c in converted],
            },
            dtype=float,
        )
        return cls(frame, system)

    @classmethod
    def from_dataframe(
        cls,
        dataframe: pd.DataFrame,
        system: CoordinateSystem = CoordinateSystem.WGS84,
        lat_column: str = DEFAULT_LATITUDE_KEY,
        lon_column: str = DEFAULT_LONGITUDE_KEY,
    ) -> Track:
        """
        Create a track from a pandas DataFrame with latitude/longitude columns.

        The DataFrame index is kept and used to identify the points.

        Args:
            dataframe: A pandas DataFrame containing the coordinates
            system: The coordinate system of the values. Default is WGS84.
            lat_column: The name of the column containing latitude values. Default is "latitude".
            lon_column: The name of the column containing longitude values. Default is "longitude".

        Returns:
            A new Track instance

        Raises:
            ValueError: If either column is missing
            InvalidCoordinateError: If any value is not a number or is out of range

        Examples:
            >>> # Use custom column names
            >>> df_custom = pd.DataFrame({
            ...     'lat': [31.2304, 31.2397],
            ...     'lng': [121.4737, 121.4998]
            ... })
            >>> track = Track.from_dataframe(
            ...     df_custom, CoordinateSystem.GCJ02, lat_column='lat', lon_column='lng'
            ... )
        """
        missing = [c for c in (lat_column, lon_column) if c not in dataframe.columns]
        if missing:
            raise ValueError(f"could not find the columns {missing} in the dataframe")

        frame = pd.DataFrame(
            {
                DEFAULT_LONGITUDE_KEY: dataframe[lon_column],
                DEFAULT_LATITUDE_KEY: dataframe[lat_column],
            },
            index=dataframe.index,
        )

        return cls(frame, system)

    @classmethod
    def from_csv(
        cls,
        file: Union[str, Path],
        system: CoordinateSystem = CoordinateSystem.WGS84,
        lat_column: str = DEFAULT_LATITUDE_KEY,
        lon_column: str = DEFAULT_LONGITUDE_KEY,
    ) -> Track:
        """
        Create a track from a CSV file containing latitude/longitude columns.

        Args:
            file: Path to the CSV file (as string or Path object)
            system: The coordinate system of the values. Default is WGS84.
            lat_column: The name of the column containing latitude values. Default is "latitude".
            lon_column: The name of the column containing longitude values. Default is "longitude".

        Returns:
            A new Track instance with coordinates from the CSV file

        Raises:
            FileNotFoundError: If the specified file does not exist
            TypeError: If the file does not have a .csv extension
            ValueError: If the specified lat/lon columns are not found in the CSV

        Examples:
            >>> # A log exported from a BD09 map
            >>> track = Track.from_csv('pickups.csv', CoordinateSystem.BD09, lat_column='lat', lon_column='lng')
        """
        filepath = Path(file)
        if not filepath.is_file():
            raise FileNotFoundError(file)
        elif not filepath.suffix == ".csv":
            raise TypeError(
                f"file of type {filepath.suffix} does not appear to be a csv file"
            )

        columns = pd.read_csv(filepath, nrows=0).columns.to_list()
        if lat_column in columns and lon_column in columns:
            df = pd.read_csv(filepath)
            return cls.from_dataframe(df, system, lat_column, lon_column)
        else:
            raise ValueError(
                "Could not find any coordinate information in the file; "
                "Make sure there are latitude and longitude columns "
                "[and provide the lat/lon column names to this function]"
            )

    def to_system(self, target: CoordinateSystem) -> Track:
        """
        Convert every point of the track to another coordinate system.

        Uses the same formulas as Coordinate.to_system, applied to whole columns.

        Args:
            target: The coordinate system to convert to

        Returns:
            A new Track with the same index in the target system, or this track when it
            is already in the target system
        """
        target = CoordinateSystem.parse(target)
        if target is self.system:
            return self

        lng, lat = transform(self.longitudes, self.latitudes, self.system, target)
        new_frame = pd.DataFrame(
            {DEFAULT_LONGITUDE_KEY: lng, DEFAULT_LATITUDE_KEY: lat},
            index=self._frame.index,
        )

        return Track(new_frame, target)

    def distances_to(
        self, center: Coordinate, radius: float = EARTH_RADIUS_METERS
    ) -> np.ndarray:
        """
        Compute the great-circle distance from every point to a coordinate, in meters.

        Both the track and the coordinate are normalized to WGS84 first.

        Returns:
            A float array aligned with the track's rows
        """
        wgs84 = self.to_system(CoordinateSystem.WGS84)
        c = center.to_wgs84()
        return np.asarray(
            haversine_meters(
                wgs84.longitudes, wgs84.latitudes, c.longitude, c.latitude, radius
            ),
            dtype=float,
        )

    def within_circle(self, center: Coordinate, radius: float) -> np.ndarray:
        """
        Flag the points lying within radius meters of a center, boundary included.

        Returns:
            A boolean array aligned with the track's rows
        """
        return self.distances_to(center) <= radius

    def within_region(
        self,
        region: Union[Region, Sequence[Coordinate]],
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> np.ndarray:
        """
        Flag the points lying inside a polygon or on its boundary.

        Args:
            region: A Region or a sequence of boundary vertices
            tolerance: On-edge tolerance in degrees, see geoshift.utils.geo.is_in_polygon

        Returns:
            A boolean array aligned with the track's rows
        """
        if isinstance(region, Region):
            region = region.boundary
        # convert the boundary once instead of once per point
        boundary = [c.to_system(self.system) for c in region]

        return np.array(
            [is_in_polygon(c, boundary, tolerance) for c in self.coords], dtype=bool
        )

    def to_dataframe(self) -> pd.DataFrame:
        return self._frame.copy()

    def to_geo_dataframe(self) -> GeoDataFrame:
        """
        Convert the track to a GeoDataFrame of points (x as longitude, y as latitude).

        Only a WGS84 track gets a CRS (EPSG:4326); GCJ02 and BD09 have no registered
        equivalent, so the frame is left without one.
        """
        return GeoDataFrame(
            self._frame.copy(),
            geometry=points_from_xy(self.longitudes, self.latitudes),
            crs=self.system.crs,
        )
