import logging

import httpx

from config import settings
from errors import InvalidInput, TransportFailure
from geo.types import GeoPoint

logger = logging.getLogger(__name__)


def build_overpass_query(
    center: GeoPoint,
    tag_filter: str,
    radius_meters: float,
    timeout_seconds: int | None = None,
) -> str:
    """Overpass QL for all nodes and ways matching `tag_filter` around `center`."""
    timeout = (
        settings.OVERPASS_QUERY_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
    )
    radius = int(radius_meters) if float(radius_meters).is_integer() else radius_meters
    around = f"(around:{radius},{center.latitude},{center.longitude})"
    return (
        f"[out:json][timeout:{timeout}];\n"
        "(\n"
        f"  node{tag_filter}{around};\n"
        f"  way{tag_filter}{around};\n"
        ");\n"
        "out body center;"
    )


def resolve_element_location(element: dict) -> GeoPoint | None:
    """Nodes carry lat/lon directly; ways carry them under `center`."""
    lat = element.get("lat")
    lon = element.get("lon")
    if lat is None or lon is None:
        center = element.get("center") or {}
        lat = center.get("lat")
        lon = center.get("lon")
    if lat is None or lon is None:
        return None
    try:
        return GeoPoint(latitude=float(lat), longitude=float(lon))
    except (InvalidInput, TypeError, ValueError):
        logger.warning("Dropping element %s with bad coordinates", element.get("id"))
        return None


class OverpassClient:
    def __init__(
        self,
        api_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self.api_url = api_url or settings.OVERPASS_API_URL
        self.http_client = http_client
        self.timeout = settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout

    async def fetch_elements(self, query: str) -> list[dict]:
        """POST an Overpass QL query and return the raw `elements` list."""
        try:
            if self.http_client is not None:
                resp = await self._post(self.http_client, query)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await self._post(client, query)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Overpass returned HTTP %s", e.response.status_code)
            raise TransportFailure(
                f"Place search failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.exception("Overpass request failed")
            raise TransportFailure(f"Place search failed: {e}") from e
        except ValueError as e:
            logger.exception("Overpass returned invalid JSON")
            raise TransportFailure("Place search returned an unreadable response") from e

        elements = data.get("elements", []) if isinstance(data, dict) else []
        return [el for el in elements if isinstance(el, dict)]

    async def _post(self, client: httpx.AsyncClient, query: str) -> httpx.Response:
        return await client.post(self.api_url, data={"data": query})
