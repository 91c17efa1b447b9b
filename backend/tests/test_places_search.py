import pytest

from conftest import mock_http_client, overpass_element
from geo.distance import haversine_km
from geo.types import GeoPoint
from places.overpass import OverpassClient
from places.search import (
    SearchStatus,
    build_address,
    element_to_candidate,
    find_nearby_places,
    rank_candidates,
)

CENTER = GeoPoint(40.7128, -74.006)


def _client(handler):
    return OverpassClient(http_client=mock_http_client(handler))


def test_build_address_order_and_omissions():
    tags = {"addr:city": "New York", "addr:street": "Broadway", "addr:housenumber": "1"}
    assert build_address(tags) == "Broadway, 1, New York"
    assert build_address({"addr:city": "New York"}) == "New York"
    assert build_address({"addr:street": ""}) is None
    assert build_address({}) is None


def test_element_to_candidate_prefers_amenity_then_shop():
    el = overpass_element(7, "Joe's", lat=40.72, lon=-74.0, amenity="cafe", shop="coffee")
    candidate = element_to_candidate(el, CENTER, "coffee")
    assert candidate.identifier == "7"
    assert candidate.category == "cafe"

    el = overpass_element(8, "Mall", lat=40.72, lon=-74.0, shop="mall")
    assert element_to_candidate(el, CENTER, "mall").category == "mall"

    el = overpass_element(9, "Thing", lat=40.72, lon=-74.0)
    assert element_to_candidate(el, CENTER, "library").category == "library"


def test_element_to_candidate_drops_unnamed():
    el = overpass_element(1, None, lat=40.72, lon=-74.0, amenity="cafe")
    assert element_to_candidate(el, CENTER, "coffee") is None


def test_element_to_candidate_distance_matches_center():
    el = overpass_element(1, "A", center=(40.75, -73.99))
    candidate = element_to_candidate(el, CENTER, "coffee")
    assert candidate.location == GeoPoint(40.75, -73.99)
    assert candidate.distance_km == pytest.approx(haversine_km(CENTER, GeoPoint(40.75, -73.99)))


def test_rank_candidates_sorts_and_caps():
    elements = [
        overpass_element(i, f"Place {i}", lat=40.7128 + i * 0.001, lon=-74.006)
        for i in range(15, 0, -1)
    ]
    candidates = [element_to_candidate(el, CENTER, "coffee") for el in elements]
    ranked = rank_candidates(candidates, limit=10)
    assert len(ranked) == 10
    assert [c.identifier for c in ranked] == [str(i) for i in range(1, 11)]


@pytest.mark.asyncio
async def test_find_nearby_places_ranks_named_results(overpass_handler_factory):
    elements = [overpass_element(i, f"Cafe {i}", lat=40.7128 + i * 0.002, lon=-74.006) for i in range(12)]
    elements.append(overpass_element(100, None, lat=40.7128, lon=-74.006))
    elements.append(overpass_element(101, "Big Cafe", center=(40.7129, -74.006), amenity="cafe"))

    result = await find_nearby_places(CENTER, "coffee", client=_client(overpass_handler_factory(elements)))

    assert result.status == SearchStatus.FOUND
    assert result.message is None
    assert len(result.places) == 10
    distances = [p.distance_km for p in result.places]
    assert distances == sorted(distances)
    assert all(p.name for p in result.places)
    assert "100" not in [p.identifier for p in result.places]
    assert result.places[0].identifier == "0"
    assert result.places[1].identifier == "101"


@pytest.mark.asyncio
async def test_find_nearby_places_sends_category_filter_and_radius(overpass_handler_factory):
    requests = []
    handler = overpass_handler_factory([], requests=requests)
    await find_nearby_places(CENTER, "bank", 2500, client=_client(handler))
    body = requests[0].content.decode()
    assert "amenity%22%3D%22bank" in body
    assert "around%3A2500%2C" in body


@pytest.mark.asyncio
async def test_unknown_category_uses_default_filter(overpass_handler_factory):
    requests = []
    elements = [overpass_element(1, "Corner Cafe", lat=40.713, lon=-74.006)]
    handler = overpass_handler_factory(elements, requests=requests)

    result = await find_nearby_places(CENTER, "aquarium", client=_client(handler))

    assert result.status == SearchStatus.FOUND
    assert result.places[0].category == "aquarium"
    assert "amenity%22%3D%22cafe" in requests[0].content.decode()


@pytest.mark.asyncio
async def test_no_results_is_not_found_not_an_error(overpass_handler_factory):
    result = await find_nearby_places(CENTER, "police", client=_client(overpass_handler_factory([])))
    assert result.status == SearchStatus.NOT_FOUND
    assert result.places == []
    assert result.message == "No police found nearby. Try a different location type."


@pytest.mark.asyncio
async def test_only_unnamed_results_is_not_found(overpass_handler_factory):
    elements = [overpass_element(1, None, lat=40.713, lon=-74.006)]
    result = await find_nearby_places(CENTER, "coffee", client=_client(overpass_handler_factory(elements)))
    assert result.status == SearchStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_transport_failure_is_reported(overpass_handler_factory):
    result = await find_nearby_places(
        CENTER, "coffee", client=_client(overpass_handler_factory([], status_code=500))
    )
    assert result.status == SearchStatus.TRANSPORT_FAILURE
    assert result.places == []
    assert "500" in result.message


@pytest.mark.asyncio
async def test_default_radius_is_five_kilometres(overpass_handler_factory):
    requests = []
    handler = overpass_handler_factory([], requests=requests)
    await find_nearby_places(CENTER, "coffee", client=_client(handler))
    assert "around%3A5000%2C" in requests[0].content.decode()


@pytest.mark.asyncio
async def test_explicit_zero_radius_is_not_replaced_by_default(overpass_handler_factory):
    requests = []
    handler = overpass_handler_factory([], requests=requests)
    result = await find_nearby_places(CENTER, "coffee", 0, client=_client(handler))
    assert "around%3A0%2C" in requests[0].content.decode()
    assert result.status == SearchStatus.NOT_FOUND
