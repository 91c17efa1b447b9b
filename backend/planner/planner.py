import logging
from dataclasses import dataclass, field

from config import settings
from errors import InvalidInput
from geo.midpoint import compute_midpoint
from geo.types import GeoPoint
from geocoding.nominatim import GeocodeResult, geocode
from places.overpass import OverpassClient
from places.search import PlaceSearchResult, find_nearby_places

logger = logging.getLogger(__name__)

MIN_LOCATIONS = 2


@dataclass
class MeetupPlan:
    locations: list[GeocodeResult]
    midpoint: GeoPoint
    search: PlaceSearchResult
    unresolved: list[str] = field(default_factory=list)


async def plan_meetup(
    addresses: list[str],
    category: str,
    radius_meters: float | None = None,
    *,
    client: OverpassClient | None = None,
) -> MeetupPlan:
    """Geocode every address, meet in the middle, and rank places around it.

    Addresses that do not resolve are skipped as long as at least
    MIN_LOCATIONS others do.
    """
    cleaned = [a for a in addresses if a and a.strip()]
    if len(cleaned) < MIN_LOCATIONS:
        raise InvalidInput(f"Please enter at least {MIN_LOCATIONS} addresses")

    # One at a time: Nominatim allows a single request per second per client
    locations: list[GeocodeResult] = []
    unresolved: list[str] = []
    for address in cleaned:
        result = await geocode(address)
        if result is None:
            unresolved.append(address)
        else:
            locations.append(result)

    if len(locations) < MIN_LOCATIONS:
        raise InvalidInput(
            f"Need at least {MIN_LOCATIONS} found addresses; "
            f"address not found: {', '.join(unresolved)}"
        )
    if unresolved:
        logger.info("Skipping unresolved addresses: %s", unresolved)

    midpoint = compute_midpoint([loc.point for loc in locations])
    logger.info(
        "Midpoint of %d locations: (%.5f, %.5f)",
        len(locations),
        midpoint.latitude,
        midpoint.longitude,
    )

    if radius_meters is None:
        radius_meters = settings.PLANNER_SEARCH_RADIUS_METERS
    search = await find_nearby_places(midpoint, category, radius_meters, client=client)
    return MeetupPlan(
        locations=locations, midpoint=midpoint, search=search, unresolved=unresolved
    )
