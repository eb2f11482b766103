"""
# Geoshift Example

An example of converting a GPS log between WGS84, GCJ02 and BD09 and testing it against a delivery zone
"""


def main():
    from pathlib import Path

    """
    First, we load a small GPS log.
    Devices report positions in WGS84, but maps from domestic providers in mainland China draw in GCJ02 (or BD09, for Baidu).

    Let's take a look at the file to see how geoshift expects the input data:
    """

    import pandas as pd

    log_file = Path(__file__).parents[2] / "tests/test_assets/sample_track.csv"

    df = pd.read_csv(log_file)
    df.head()

    """
    Notice that the values are plain decimal degrees with no hint of which coordinate system they use.
    Geoshift never guesses: every coordinate carries an explicit system tag and you supply it when loading.

    Now, let's load the log as a Track:
    """

    from geoshift.constructs.track import Track
    from geoshift.utils.crs import CoordinateSystem

    track = Track.from_csv(log_file, CoordinateSystem.WGS84)

    """
    By default, geoshift expects the latitude and longitude columns to be named "latitude" and "longitude" but you can pass your own names with `lat_column` and `lon_column`.

    To draw the log on a GCJ02 map, we convert the whole track at once:
    """

    on_map = track.to_system(CoordinateSystem.GCJ02)
    on_map.to_dataframe().head()

    """
    The points in Beijing and Shanghai moved a few hundred meters.
    The last point is in Paris, outside the region where the offset applies, so it is unchanged.

    Single points work the same way:
    """

    from geoshift import Coordinate, distance_meters, make_point

    gps = Coordinate(116.397128, 39.916527)
    bd = gps.to_bd09()

    """
    Converting back is an approximation, accurate to a few meters:
    """

    print(distance_meters(gps, bd.to_wgs84()))

    """
    Distances always normalize both points to WGS84 first, so points tagged with different systems can be compared directly.
    Here the same place tagged two ways is almost no distance apart:
    """

    print(distance_meters(gps, bd))

    """
    Coordinates copied from a web map usually arrive as strings. `make_point` parses and validates them:
    """

    pickup = make_point("116.404", "39.915", CoordinateSystem.BD09)

    """
    Next, let's build a delivery zone.
    Zones are often drawn on a BD09 map, while the fixes we test against them are WGS84.
    Geoshift converts the zone's vertices to the point's system before testing, so the mix is fine:
    """

    from geoshift import Region

    zone = Region.from_coordinates(
        [(116.30, 39.90), (116.50, 39.90), (116.50, 40.00), (116.30, 40.00)],
        CoordinateSystem.BD09,
    )

    print(zone.contains(gps))
    print(zone.contains(pickup))

    """
    Points on the zone's boundary count as inside.
    The `tolerance` argument controls how close to an edge (in degrees) a point must be to count as on it.

    For a whole track, `within_region` and `within_circle` return a boolean flag per row:
    """

    in_zone = track.within_region(zone)
    near_pickup = track.within_circle(pickup, 2000)

    track.to_dataframe().assign(in_zone=in_zone, near_pickup=near_pickup)

    """
    Lastly, we might want to look at the track on a plot or save it to a file.
    A WGS84 track converts to a GeoDataFrame with the EPSG:4326 CRS:
    """

    gdf = track.to_geo_dataframe()
    gdf.plot()

    """
    The zone can be written out as GeoJSON too.
    Convert it to WGS84 first if the file is meant for tools that assume standard GeoJSON:
    """

    print(zone.to_system(CoordinateSystem.WGS84).to_geojson())


if __name__ == "__main__":
    main()
