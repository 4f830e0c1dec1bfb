"""Unit tests for nearby search and place details in MapsClient."""

import pytest

from conftest import place_payload
from maps_mcp_server.client import MAX_NEARBY_RESULTS
from maps_mcp_server.errors import InvalidInput, NotFound, UnsupportedFilter, UpstreamError
from maps_mcp_server.models import ResolvedLocation

OSAKA = ResolvedLocation(lat=34.6937, lng=135.5023)


@pytest.mark.asyncio
async def test_search_nearby_builds_circle_request(client):
    client._post_json.return_value = (200, {"places": [place_payload("a", rating=4.5)]})

    places = await client.search_nearby(OSAKA, radius=500, keyword="restaurant")

    url, body = client._post_json.await_args.args
    headers = client._post_json.await_args.kwargs["headers"]
    assert url == "https://places.googleapis.com/v1/places:searchNearby"
    assert body["locationRestriction"]["circle"] == {
        "center": {"latitude": 34.6937, "longitude": 135.5023},
        "radius": 500.0,
    }
    assert body["includedTypes"] == ["restaurant"]
    assert body["maxResultCount"] == MAX_NEARBY_RESULTS
    assert headers["X-Goog-Api-Key"] == "test-key"
    assert "places.rating" in headers["X-Goog-FieldMask"]
    assert places[0].to_dict() == {
        "name": "Place a",
        "place_id": "a",
        "address": "a Main St",
        "location": {"lat": 34.69, "lng": 135.50},
        "rating": 4.5,
        "total_ratings": 120,
        "open_now": None,
    }


@pytest.mark.asyncio
async def test_search_nearby_without_keyword_sends_no_types(client):
    client._post_json.return_value = (200, {})

    places = await client.search_nearby(OSAKA)

    body = client._post_json.await_args.args[1]
    assert "includedTypes" not in body
    assert body["locationRestriction"]["circle"]["radius"] == 1000.0
    assert places == []


@pytest.mark.asyncio
async def test_min_rating_drops_low_and_unrated_places(client):
    client._post_json.return_value = (200, {"places": [
        place_payload("high", rating=4.6),
        place_payload("edge", rating=4.0),
        place_payload("low", rating=3.2),
        place_payload("unrated"),
    ]})

    places = await client.search_nearby(OSAKA, min_rating=4.0)

    assert [p.place_id for p in places] == ["high", "edge"]
    assert all(p.rating is not None and p.rating >= 4.0 for p in places)


@pytest.mark.asyncio
async def test_zero_min_rating_keeps_unrated_places(client):
    client._post_json.return_value = (200, {"places": [place_payload("unrated")]})

    places = await client.search_nearby(OSAKA, min_rating=0)

    assert [p.place_id for p in places] == ["unrated"]


@pytest.mark.asyncio
async def test_open_now_keeps_only_open_places(client):
    client._post_json.return_value = (200, {"places": [
        place_payload("open", open_now=True),
        place_payload("closed", open_now=False),
        place_payload("unknown"),
    ]})

    places = await client.search_nearby(OSAKA, open_now=True)

    assert [p.place_id for p in places] == ["open"]


@pytest.mark.asyncio
async def test_results_are_capped_and_unique(client):
    raw = [place_payload(str(i), rating=4.0) for i in range(30)]
    raw.insert(1, place_payload("0", rating=4.0))
    client._post_json.return_value = (200, {"places": raw})

    places = await client.search_nearby(OSAKA)

    ids = [p.place_id for p in places]
    assert len(ids) == MAX_NEARBY_RESULTS
    assert len(set(ids)) == len(ids)


@pytest.mark.asyncio
async def test_unsupported_type_echoes_provider_message(client):
    client._post_json.return_value = (400, {"error": {
        "code": 400,
        "message": "Unsupported types: tourist attractions.",
        "status": "INVALID_ARGUMENT",
    }})

    with pytest.raises(UnsupportedFilter) as exc_info:
        await client.search_nearby(OSAKA, keyword="tourist attractions")

    assert str(exc_info.value) == "Unsupported types: tourist attractions."


@pytest.mark.asyncio
async def test_quota_failure_is_upstream_error(client):
    client._post_json.return_value = (429, {"error": {"code": 429, "message": "Quota exceeded"}})

    with pytest.raises(UpstreamError, match="Quota exceeded"):
        await client.search_nearby(OSAKA, keyword="cafe")


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs", [{"radius": 0}, {"radius": 60000}, {"min_rating": 6}, {"min_rating": -1}])
async def test_search_nearby_validates_bounds(client, kwargs):
    with pytest.raises(InvalidInput):
        await client.search_nearby(OSAKA, **kwargs)
    client._post_json.assert_not_awaited()


@pytest.mark.asyncio
async def test_place_details_maps_all_fields(client):
    client._get_json.return_value = (200, {
        "id": "ChIJ2eUgeAK6j4ARbn5u_wAGqWA",
        "displayName": {"text": "Googleplex"},
        "formattedAddress": "1600 Amphitheatre Pkwy, Mountain View, CA",
        "location": {"latitude": 37.422, "longitude": -122.084},
        "rating": 4.3,
        "userRatingCount": 1500,
        "currentOpeningHours": {"openNow": True},
        "nationalPhoneNumber": "(650) 253-0000",
        "websiteUri": "https://about.google/",
        "priceLevel": "PRICE_LEVEL_MODERATE",
        "reviews": [
            {
                "rating": 5,
                "text": {"text": "Great campus", "languageCode": "en"},
                "publishTime": "2024-01-01T00:00:00.123456789Z",
                "relativePublishTimeDescription": "a year ago",
                "authorAttribution": {"displayName": "Ada"},
            },
            {
                "rating": 3,
                "originalText": {"text": "Busy"},
                "relativePublishTimeDescription": "2 weeks ago",
                "authorAttribution": {"displayName": "Lin"},
            },
        ],
    })

    details = await client.get_place_details("ChIJ2eUgeAK6j4ARbn5u_wAGqWA")

    assert client._get_json.await_args.args[0].endswith("/places/ChIJ2eUgeAK6j4ARbn5u_wAGqWA")
    data = details.to_dict()
    assert data["name"] == "Googleplex"
    assert data["address"] == "1600 Amphitheatre Pkwy, Mountain View, CA"
    assert data["location"] == {"lat": 37.422, "lng": -122.084}
    assert data["open_now"] is True
    assert data["phone"] == "(650) 253-0000"
    assert data["website"] == "https://about.google/"
    assert data["price_level"] == 2
    assert data["reviews"] == [
        {"rating": 5, "text": "Great campus", "time": 1704067200, "author_name": "Ada"},
        {"rating": 3, "text": "Busy", "time": "2 weeks ago", "author_name": "Lin"},
    ]


@pytest.mark.asyncio
async def test_place_details_without_optional_fields(client):
    client._get_json.return_value = (200, {"id": "bare", "displayName": {"text": "Bare"}})

    details = await client.get_place_details("bare")

    assert details.rating is None
    assert details.price_level is None
    assert details.location is None
    assert details.reviews == []


@pytest.mark.asyncio
async def test_place_details_missing_record_is_not_found(client):
    client._get_json.return_value = (404, {"error": {"code": 404, "message": "Requested entity was not found."}})

    with pytest.raises(NotFound):
        await client.get_place_details("missing")


@pytest.mark.asyncio
async def test_place_details_requires_id(client):
    with pytest.raises(InvalidInput):
        await client.get_place_details("")


@pytest.mark.asyncio
async def test_nearby_place_with_string_display_name_is_malformed(client):
    client._post_json.return_value = (200, {"places": [{"id": "p1", "displayName": "Cafe"}]})

    with pytest.raises(UpstreamError, match="Malformed nearby search response"):
        await client.search_nearby(OSAKA)


@pytest.mark.asyncio
async def test_place_details_with_non_list_reviews_is_malformed(client):
    client._get_json.return_value = (200, {"id": "p1", "displayName": {"text": "Cafe"}, "reviews": 5})

    with pytest.raises(UpstreamError, match="Malformed place details response"):
        await client.get_place_details("p1")
