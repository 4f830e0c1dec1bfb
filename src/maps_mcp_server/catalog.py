"""Descriptions and example invocations for every maps tool."""

from typing import Any, Dict, List

TOOL_DESCRIPTIONS: Dict[str, str] = {
    "search_nearby": "Search for nearby places",
    "maps_geocode": "Convert address to coordinates",
    "maps_reverse_geocode": "Convert coordinates to address",
    "maps_distance_matrix": "Calculate distance and time between multiple origins and destinations",
    "maps_directions": "Get directions between two points",
    "maps_elevation": "Get elevation data for locations",
    "get_place_details": "Get detailed information about a specific place",
}

TOOL_EXAMPLES: Dict[str, List[Dict[str, Any]]] = {
    "search_nearby": [
        {
            "center": {"value": "Osaka, Japan", "isCoordinates": False},
            "keyword": "restaurant",
            "radius": 1000,
        },
        {
            "center": {"value": "34.6937,135.5023", "isCoordinates": True},
            "keyword": "tourist_attraction",
            "radius": 5000,
        },
    ],
    "maps_geocode": [
        {"address": "1600 Amphitheatre Parkway, Mountain View, CA"},
    ],
    "maps_reverse_geocode": [
        {"latitude": 37.4221, "longitude": -122.0841},
    ],
    "maps_distance_matrix": [
        {
            "origins": ["New York, NY", "Boston, MA"],
            "destinations": ["Philadelphia, PA", "Washington, DC"],
            "mode": "driving",
        },
    ],
    "maps_directions": [
        {"origin": "New York, NY", "destination": "Boston, MA", "mode": "driving"},
    ],
    "maps_elevation": [
        {"locations": [{"latitude": 37.4221, "longitude": -122.0841}]},
    ],
    "get_place_details": [
        {"placeId": "ChIJ2eUgeAK6j4ARbn5u_wAGqWA"},
    ],
}


def list_tools() -> List[Dict[str, str]]:
    return [{"name": name, "description": description} for name, description in TOOL_DESCRIPTIONS.items()]


def get_examples(tool_name: str) -> List[Dict[str, Any]]:
    if tool_name not in TOOL_EXAMPLES:
        raise ValueError(f"Unknown tool '{tool_name}'. Known tools: {', '.join(TOOL_EXAMPLES)}")
    return TOOL_EXAMPLES[tool_name]
