"""Fixtures shared by the client, facade and tool tests."""

from unittest.mock import AsyncMock

import pytest

from maps_mcp_server.client import MapsClient
from maps_mcp_server.config import Settings
from maps_mcp_server.searcher import PlacesSearcher


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key", timeout_seconds=5.0)


@pytest.fixture
def client(settings) -> MapsClient:
    """Client whose HTTP helpers are stubbed; tests set return values per call."""
    maps_client = MapsClient(settings)
    maps_client._get_json = AsyncMock()
    maps_client._post_json = AsyncMock()
    return maps_client


@pytest.fixture
def searcher(client) -> PlacesSearcher:
    return PlacesSearcher(client)


def geocode_payload(lat=37.4220, lng=-122.0841,
                    address="1600 Amphitheatre Pkwy, Mountain View, CA 94043, USA",
                    place_id="ChIJF4Yf2Ry7j4AR__1AkytDyAE"):
    return {
        "status": "OK",
        "results": [
            {
                "formatted_address": address,
                "place_id": place_id,
                "geometry": {"location": {"lat": lat, "lng": lng}},
                "address_components": [
                    {"long_name": "1600", "short_name": "1600", "types": ["street_number"]},
                    {"long_name": "Mountain View", "short_name": "Mountain View", "types": ["locality", "political"]},
                    {"long_name": "94043", "short_name": "94043", "types": ["postal_code"]},
                ],
            },
            {
                "formatted_address": "Somewhere else",
                "place_id": "second",
                "geometry": {"location": {"lat": 0.0, "lng": 0.0}},
            },
        ],
    }


def place_payload(place_id, rating=None, open_now=None, name=None):
    place = {
        "id": place_id,
        "displayName": {"text": name or f"Place {place_id}", "languageCode": "en"},
        "formattedAddress": f"{place_id} Main St",
        "location": {"latitude": 34.69, "longitude": 135.50},
    }
    if rating is not None:
        place["rating"] = rating
        place["userRatingCount"] = 120
    if open_now is not None:
        place["currentOpeningHours"] = {"openNow": open_now}
    return place
