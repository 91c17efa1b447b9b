import math
from typing import Sequence

from errors import InvalidInput
from geo.types import GeoPoint


def compute_midpoint(points: Sequence[GeoPoint]) -> GeoPoint:
    """Centroid of the points on the unit sphere.

    Each point is projected to a 3D unit vector and the vectors are averaged
    (without renormalizing). The mean vector is converted back to lat/lng, so
    longitudes that straddle the antimeridian average sensibly. For
    near-antipodal inputs the mean vector tends towards the origin and the
    result is unstable; that behaviour is kept as is.
    """
    if not points:
        raise InvalidInput("At least one point is required to compute a midpoint")

    x = y = z = 0.0
    for point in points:
        lat = math.radians(point.latitude)
        lng = math.radians(point.longitude)
        x += math.cos(lat) * math.cos(lng)
        y += math.cos(lat) * math.sin(lng)
        z += math.sin(lat)

    count = len(points)
    x /= count
    y /= count
    z /= count

    lng_mid = math.atan2(y, x)
    lat_mid = math.atan2(z, math.hypot(x, y))

    return GeoPoint(latitude=math.degrees(lat_mid), longitude=math.degrees(lng_mid))
