"""Great-circle distance helpers."""
from math import asin, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in kilometers between two decimal-degree points.

    NaN coordinates propagate to a NaN result.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    dphi = radians(lat2 - lat1)
    dlam = radians(lng2 - lng1)
    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlam / 2) ** 2
    if a > 1.0:  # float drift near antipodes
        a = 1.0
    c = 2 * asin(sqrt(a))
    return EARTH_RADIUS_KM * c
