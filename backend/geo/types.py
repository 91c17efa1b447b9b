from dataclasses import dataclass

from errors import InvalidInput


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidInput(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidInput(f"Longitude out of range: {self.longitude}")


@dataclass
class PlaceCandidate:
    identifier: str
    name: str
    category: str
    location: GeoPoint
    address: str | None = None
    distance_km: float = 0.0  # set by the ranker against the search center
