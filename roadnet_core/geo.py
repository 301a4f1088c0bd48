"""
Geographic utilities for the road network router.

Provides great-circle distance and bearing calculations used when connecting
dynamic nodes and when describing route segments.
"""

import math
from math import asin, cos, radians, sin, sqrt

from .types import Coordinate

# Mean Earth radius used by all great-circle calculations
EARTH_RADIUS_KM = 6371.0

_COMPASS_POINTS = ("north", "north-east", "east", "south-east", "south", "south-west", "west", "north-west")


def haversine(coord1: Coordinate, coord2: Coordinate) -> float:
    """
    Calculate great-circle distance between two points using Haversine formula.

    Args:
        coord1: First coordinate as (latitude, longitude) in decimal degrees
        coord2: Second coordinate as (latitude, longitude) in decimal degrees

    Returns:
        Distance in kilometers (float)

    Example:
        >>> mumbai = (19.0760, 72.8777)
        >>> pune = (18.5204, 73.8567)
        >>> round(haversine(mumbai, pune))
        120

    Note:
        - Earth radius is approximated as 6,371 km
        - Coordinates must be in (lat, lon) format, not (lon, lat)
    """
    lat1, lon1 = coord1
    lat2, lon2 = coord2

    lat1, lon1, lat2, lon2 = map(radians, (lat1, lon1, lat2, lon2))

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Clamp guards against a slightly > 1 from rounding on antipodal points
    c = 2 * asin(sqrt(min(1.0, a)))

    return EARTH_RADIUS_KM * c


def calculate_bearing(coord1: Coordinate, coord2: Coordinate) -> float:
    """
    Calculate initial bearing (forward azimuth) between two points.

    Args:
        coord1: Start coordinate as (latitude, longitude)
        coord2: End coordinate as (latitude, longitude)

    Returns:
        Bearing in degrees (0-360), where 0 is North, 90 is East, etc.
    """
    lat1, lon1 = map(radians, coord1)
    lat2, lon2 = map(radians, coord2)

    dlon = lon2 - lon1

    x = sin(dlon) * cos(lat2)
    y = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)

    bearing_rad = math.atan2(x, y)
    return (math.degrees(bearing_rad) + 360) % 360


def compass_direction(bearing: float) -> str:
    """Map a bearing in degrees to one of eight compass points."""
    index = int(((bearing % 360) + 22.5) // 45) % 8
    return _COMPASS_POINTS[index]
