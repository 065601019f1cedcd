"""Great-circle distance helpers."""

import math

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance between two points in miles."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Float error can push ``a`` a hair outside [0, 1] for antipodal points.
    a = min(max(a, 0.0), 1.0)
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(a))
