import enum
import logging
from dataclasses import dataclass, field

from config import settings
from errors import TransportFailure
from geo.distance import haversine_km
from geo.types import GeoPoint, PlaceCandidate
from places.categories import category_filter
from places.overpass import OverpassClient, build_overpass_query, resolve_element_location

logger = logging.getLogger(__name__)

ADDRESS_TAGS = ("addr:street", "addr:housenumber", "addr:city")


class SearchStatus(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass
class PlaceSearchResult:
    status: SearchStatus
    places: list[PlaceCandidate] = field(default_factory=list)
    message: str | None = None


def build_address(tags: dict) -> str | None:
    parts = [tags[key] for key in ADDRESS_TAGS if tags.get(key)]
    return ", ".join(parts) or None


def element_to_candidate(
    element: dict, center: GeoPoint, requested_category: str
) -> PlaceCandidate | None:
    """Normalize one Overpass element. Returns None for unnamed or unlocatable ones."""
    tags = element.get("tags") or {}
    name = tags.get("name")
    if not name:
        return None
    location = resolve_element_location(element)
    if location is None:
        return None
    return PlaceCandidate(
        identifier=str(element.get("id", "")),
        name=name,
        category=tags.get("amenity") or tags.get("shop") or requested_category,
        location=location,
        address=build_address(tags),
        distance_km=haversine_km(center, location),
    )


def rank_candidates(
    candidates: list[PlaceCandidate], limit: int | None = None
) -> list[PlaceCandidate]:
    """Sort ascending by distance and keep the closest `limit`."""
    cap = settings.MAX_PLACE_RESULTS if limit is None else limit
    return sorted(candidates, key=lambda c: c.distance_km)[:cap]


async def find_nearby_places(
    center: GeoPoint,
    category: str,
    radius_meters: float | None = None,
    *,
    client: OverpassClient | None = None,
    limit: int | None = None,
) -> PlaceSearchResult:
    """Query the POI index around `center` and return the closest named places."""
    radius = (
        settings.DEFAULT_SEARCH_RADIUS_METERS if radius_meters is None else radius_meters
    )
    query = build_overpass_query(center, category_filter(category), radius)
    client = client or OverpassClient()

    try:
        elements = await client.fetch_elements(query)
    except TransportFailure as e:
        return PlaceSearchResult(status=SearchStatus.TRANSPORT_FAILURE, message=str(e))

    candidates = []
    for element in elements:
        candidate = element_to_candidate(element, center, category)
        if candidate is not None:
            candidates.append(candidate)
    places = rank_candidates(candidates, limit)

    logger.info(
        "Place search category=%s radius=%s center=(%.5f, %.5f): %d elements, %d ranked",
        category,
        radius,
        center.latitude,
        center.longitude,
        len(elements),
        len(places),
    )

    if not places:
        return PlaceSearchResult(
            status=SearchStatus.NOT_FOUND,
            message=f"No {category} found nearby. Try a different location type.",
        )
    return PlaceSearchResult(status=SearchStatus.FOUND, places=places)
