"""Standard column names used for tabular coordinate data.

These constants define the DataFrame column names that Track reads and writes.
Using consistent names keeps CSV input, DataFrame input and GeoDataFrame output interchangeable.
"""

# Column holding longitude values in decimal degrees
DEFAULT_LONGITUDE_KEY = "longitude"

# Column holding latitude values in decimal degrees
DEFAULT_LATITUDE_KEY = "latitude"

# Key holding the coordinate system name in a serialized Coordinate
DEFAULT_SYSTEM_KEY = "system"
