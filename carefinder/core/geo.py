"""Great-circle distance helpers."""

import math

from carefinder.models import Coordinate

EARTH_RADIUS_MILES = 3959.0


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinates in miles."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
