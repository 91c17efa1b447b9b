from geo.distance import EARTH_RADIUS_KM, haversine_km
from geo.midpoint import compute_midpoint
from geo.types import GeoPoint, PlaceCandidate

__all__ = [
    "EARTH_RADIUS_KM",
    "GeoPoint",
    "PlaceCandidate",
    "compute_midpoint",
    "haversine_km",
]
