from math import radians, sin, cos, sqrt, atan2

# Earth's mean radius in meters
R = 6_371_000.0

def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points
    on the Earth (specified in decimal degrees) using the Haversine formula.

    Args:
        lat1: Latitude of point 1.
        lon1: Longitude of point 1.
        lat2: Latitude of point 2.
        lon2: Longitude of point 2.

    Returns:
        Distance between the two points in meters.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    dphi = radians(lat2 - lat1)
    dlambda = radians(lon2 - lon1)

    a = sin(dphi / 2)**2 + cos(phi1) * cos(phi2) * sin(dlambda / 2)**2
    # Rounding can push `a` a hair past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return R * c
