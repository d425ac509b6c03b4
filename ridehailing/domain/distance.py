"""
Distance calculation using the Haversine formula.

Great-circle distance is used both to price a ride at request time and to
sum the legs of a tracked trip.  It ignores the road network, so it is a
lower bound of the distance actually driven.

Complexity: O(1) per call.
"""

import math

EARTH_RADIUS_KM = 6_371.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # float noise can push ``a`` a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def path_length_km(points: list[tuple[float, float]]) -> float:
    """Sum of the legs between consecutive ``(lat, lng)`` points."""
    return sum(
        haversine_km(a[0], a[1], b[0], b[1])
        for a, b in zip(points, points[1:])
    )
