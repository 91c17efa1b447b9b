"""Forward and reverse geocoding against OpenStreetMap Nominatim."""
import logging
from dataclasses import dataclass

import httpx

from config import settings
from errors import InvalidInput, TransportFailure
from geo.types import GeoPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodeResult:
    point: GeoPoint
    display_name: str


def _headers() -> dict[str, str]:
    return {
        "Accept": "application/json",
        "User-Agent": settings.NOMINATIM_USER_AGENT,
    }


async def _get_json(
    path: str, params: dict, http_client: httpx.AsyncClient | None = None
):
    url = f"{settings.NOMINATIM_BASE_URL.rstrip('/')}/{path}"
    try:
        if http_client is not None:
            resp = await http_client.get(url, params=params, headers=_headers())
        else:
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
                resp = await client.get(url, params=params, headers=_headers())
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as e:
        logger.exception("Nominatim %s request failed", path)
        raise TransportFailure(f"Geocoding failed: {e}") from e
    except ValueError as e:
        logger.exception("Nominatim %s returned invalid JSON", path)
        raise TransportFailure("Geocoding returned an unreadable response") from e


async def geocode(
    address: str, *, http_client: httpx.AsyncClient | None = None
) -> GeocodeResult | None:
    """Resolve free-text `address` to its best match, or None if nothing matched."""
    if not address or not address.strip():
        raise InvalidInput("Please enter an address")

    data = await _get_json(
        "search",
        {"format": "json", "q": address.strip(), "limit": 1},
        http_client,
    )
    if not isinstance(data, list):
        logger.warning("Unexpected Nominatim search payload for %r: %r", address, data)
        raise TransportFailure("Geocoding returned an unexpected response")
    if not data:
        logger.info("No geocoding match for %r", address)
        return None

    best = data[0]
    try:
        point = GeoPoint(latitude=float(best["lat"]), longitude=float(best["lon"]))
        display_name = best.get("display_name", address)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise TransportFailure("Geocoding returned a malformed result") from e
    return GeocodeResult(point=point, display_name=display_name)


async def reverse_geocode(
    point: GeoPoint, *, http_client: httpx.AsyncClient | None = None
) -> str | None:
    data = await _get_json(
        "reverse",
        {"format": "json", "lat": point.latitude, "lon": point.longitude},
        http_client,
    )
    if not isinstance(data, dict):
        return None
    return data.get("display_name") or None
