import asyncio
import logging
import re
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

import aiohttp

from maps_mcp_server.config import Settings
from maps_mcp_server.errors import (
    InvalidInput,
    InvalidWaypoint,
    NoRouteFound,
    NotFound,
    UnsupportedFilter,
    UpstreamError,
)
from maps_mcp_server.models import (
    AddressComponent,
    DistanceMatrix,
    ElevationSample,
    GeocodeResult,
    LatLng,
    Measure,
    PlaceDetail,
    PlaceSummary,
    ResolvedLocation,
    ReverseGeocodeResult,
    Review,
    Route,
    RouteLeg,
    RouteResult,
)
from maps_mcp_server.utils import (
    check_lat_lng,
    format_distance,
    format_duration,
    looks_like_coordinates,
    parse_coordinates,
    parse_duration,
)

logger = logging.getLogger(__name__)

USER_AGENT = "Maps-MCP-Server/1.0"
MAX_NEARBY_RESULTS = 20
MAX_NEARBY_RADIUS = 50000.0
TRAVEL_MODES = ("driving", "walking", "bicycling", "transit")
ROUTES_TRAVEL_MODES = {
    "driving": "DRIVE",
    "walking": "WALK",
    "bicycling": "BICYCLE",
    "transit": "TRANSIT",
}
PRICE_LEVELS = {
    "PRICE_LEVEL_FREE": 0,
    "PRICE_LEVEL_INEXPENSIVE": 1,
    "PRICE_LEVEL_MODERATE": 2,
    "PRICE_LEVEL_EXPENSIVE": 3,
    "PRICE_LEVEL_VERY_EXPENSIVE": 4,
}

NEARBY_FIELD_MASK = ",".join([
    "places.id",
    "places.displayName",
    "places.formattedAddress",
    "places.location",
    "places.rating",
    "places.userRatingCount",
    "places.currentOpeningHours.openNow",
])
DETAILS_FIELD_MASK = ",".join([
    "id",
    "displayName",
    "formattedAddress",
    "location",
    "rating",
    "userRatingCount",
    "currentOpeningHours.openNow",
    "nationalPhoneNumber",
    "websiteUri",
    "priceLevel",
    "reviews",
])
ROUTES_FIELD_MASK = ",".join([
    "routes.duration",
    "routes.distanceMeters",
    "routes.legs.distanceMeters",
    "routes.legs.duration",
    "routes.legs.startLocation",
    "routes.legs.endLocation",
    "routes.routeLabels",
    "routes.description",
])


class MapsClient:
    """Google Maps Platform adapter: one method per upstream contract, no retries, no caching."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.session: Optional[aiohttp.ClientSession] = None

    async def connect(self):
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
        self.session = aiohttp.ClientSession(timeout=timeout, headers={"User-Agent": USER_AGENT})

    async def disconnect(self):
        if self.session:
            await self.session.close()
            self.session = None

    # -- geocoding --------------------------------------------------------

    async def resolve_address(self, address: str) -> ResolvedLocation:
        """Forward-geocode an address and keep only the top-ranked candidate."""
        if not address or not address.strip():
            raise InvalidInput("Address is required")

        status, payload = await self._get_json(
            f"{self.settings.maps_base_url}/geocode/json",
            params={"address": address.strip(), "language": self.settings.language, "key": self.settings.api_key},
        )
        results = self._legacy_results(status, payload, "Geocoding")
        if not results:
            raise NotFound("Location not found for this address")

        with _malformed("geocoding"):
            top = results[0]
            location = top.get("geometry", {}).get("location") or {}
            if "lat" not in location or "lng" not in location:
                raise UpstreamError("Geocoding result has no coordinates")
            return ResolvedLocation(
                lat=float(location["lat"]),
                lng=float(location["lng"]),
                formatted_address=top.get("formatted_address"),
                place_id=top.get("place_id"),
            )

    def resolve_coordinates(self, text: str) -> ResolvedLocation:
        lat, lng = parse_coordinates(text)
        return ResolvedLocation(lat=lat, lng=lng)

    async def geocode(self, address: str) -> GeocodeResult:
        resolved = await self.resolve_address(address)
        return GeocodeResult(
            location=resolved.point,
            formatted_address=resolved.formatted_address or "",
            place_id=resolved.place_id or "",
        )

    async def reverse_resolve(self, lat: float, lng: float) -> ReverseGeocodeResult:
        check_lat_lng(lat, lng)
        status, payload = await self._get_json(
            f"{self.settings.maps_base_url}/geocode/json",
            params={"latlng": f"{lat},{lng}", "language": self.settings.language, "key": self.settings.api_key},
        )
        results = self._legacy_results(status, payload, "Reverse geocoding")
        if not results:
            raise NotFound("Address not found for these coordinates")

        with _malformed("reverse geocoding"):
            top = results[0]
            return ReverseGeocodeResult(
                formatted_address=top.get("formatted_address", ""),
                place_id=top.get("place_id", ""),
                address_components=[
                    AddressComponent(
                        long_name=component.get("long_name", ""),
                        short_name=component.get("short_name", ""),
                        types=list(component.get("types", [])),
                    )
                    for component in top.get("address_components", [])
                ],
            )

    # -- places -----------------------------------------------------------

    async def search_nearby(self,
                            center: ResolvedLocation,
                            radius: float = 1000,
                            keyword: Optional[str] = None,
                            open_now: bool = False,
                            min_rating: Optional[float] = None) -> List[PlaceSummary]:
        """Search places within a circle around center.

        The keyword goes upstream as an included place type. Minimum rating
        and open-now are applied here because the endpoint has no such
        parameters.
        """
        if radius is None or not 0 < radius <= MAX_NEARBY_RADIUS:
            raise InvalidInput(f"Radius must be greater than 0 and at most {int(MAX_NEARBY_RADIUS)} meters")
        if min_rating is not None and not 0 <= min_rating <= 5:
            raise InvalidInput("Minimum rating must be between 0 and 5")
        keyword = keyword.strip() if keyword else None

        body: Dict[str, Any] = {
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": center.lat, "longitude": center.lng},
                    "radius": float(radius),
                }
            },
            "maxResultCount": MAX_NEARBY_RESULTS,
            "languageCode": self.settings.language,
        }
        if keyword:
            body["includedTypes"] = [keyword]

        status, payload = await self._post_json(
            f"{self.settings.places_base_url}/places:searchNearby",
            body,
            headers=self._google_headers(NEARBY_FIELD_MASK),
        )
        if status != 200:
            message = self._google_error_message(payload)
            if status == 400 and keyword and ("Unsupported types" in message or keyword in message):
                raise UnsupportedFilter(message or f"Unsupported types: {keyword}.")
            raise self._upstream("Nearby search", status, message)

        places = []
        seen = set()
        with _malformed("nearby search"):
            for raw in payload.get("places", []):
                place = self._place_summary(raw)
                if not place.place_id or place.place_id in seen:
                    continue
                if min_rating and (place.rating or 0) < min_rating:
                    continue
                if open_now and place.open_now is not True:
                    continue
                seen.add(place.place_id)
                places.append(place)

        return places[:MAX_NEARBY_RESULTS]

    async def get_place_details(self, place_id: str) -> PlaceDetail:
        if not place_id or not place_id.strip():
            raise InvalidInput("Place ID is required")
        place_id = place_id.strip()

        status, payload = await self._get_json(
            f"{self.settings.places_base_url}/places/{quote(place_id, safe='')}",
            params={"languageCode": self.settings.language},
            headers=self._google_headers(DETAILS_FIELD_MASK),
        )
        if status == 404:
            raise NotFound(f"Place not found: {place_id}")
        if status == 400:
            raise InvalidInput(self._google_error_message(payload) or f"Invalid place ID: {place_id}")
        if status != 200:
            raise self._upstream("Place details", status, self._google_error_message(payload))
        if not payload:
            raise NotFound(f"Place not found: {place_id}")

        with _malformed("place details"):
            summary = self._place_summary(payload)
            return PlaceDetail(
                name=summary.name,
                place_id=summary.place_id or place_id,
                address=summary.address,
                location=summary.location,
                rating=summary.rating,
                total_ratings=summary.total_ratings,
                open_now=summary.open_now,
                phone=payload.get("nationalPhoneNumber") or payload.get("internationalPhoneNumber"),
                website=payload.get("websiteUri"),
                price_level=PRICE_LEVELS.get(payload.get("priceLevel")),
                reviews=[self._review(review) for review in payload.get("reviews", [])],
            )

    # -- routing ----------------------------------------------------------

    async def distance_matrix(self,
                              origins: Union[Sequence[str], str],
                              destinations: Union[Sequence[str], str],
                              mode: str = "driving") -> DistanceMatrix:
        """Measure every origin x destination pair in one request.

        Pairs the provider cannot route become None cells; only a
        request-level failure aborts the call.
        """
        origin_list = self._split_locations(origins, "origin")
        destination_list = self._split_locations(destinations, "destination")
        self._check_mode(mode)

        status, payload = await self._get_json(
            f"{self.settings.maps_base_url}/distancematrix/json",
            params={
                "origins": "|".join(origin_list),
                "destinations": "|".join(destination_list),
                "mode": mode,
                "language": self.settings.language,
                "key": self.settings.api_key,
            },
        )
        if status != 200:
            raise self._upstream("Distance matrix calculation", status)
        if payload.get("status") != "OK":
            message = f"Distance matrix calculation failed: {payload.get('status')}"
            if payload.get("error_message"):
                message += f" - {payload['error_message']}"
            raise UpstreamError(message, status)

        with _malformed("distance matrix"):
            rows = payload.get("rows", [])
            distances, durations = [], []
            for i in range(len(origin_list)):
                elements = rows[i].get("elements", []) if i < len(rows) else []
                distance_row, duration_row = [], []
                for j in range(len(destination_list)):
                    element = elements[j] if j < len(elements) else {}
                    if element.get("status") == "OK":
                        distance_row.append(Measure(element["distance"]["value"], element["distance"]["text"]))
                        duration_row.append(Measure(element["duration"]["value"], element["duration"]["text"]))
                    else:
                        distance_row.append(None)
                        duration_row.append(None)
                distances.append(distance_row)
                durations.append(duration_row)

            return DistanceMatrix(
                distances=distances,
                durations=durations,
                origin_addresses=list(payload.get("origin_addresses", [])),
                destination_addresses=list(payload.get("destination_addresses", [])),
            )

    async def directions(self, origin: str, destination: str, mode: str = "driving") -> RouteResult:
        if not origin or not origin.strip() or not destination or not destination.strip():
            raise InvalidInput("Both origin and destination are required")
        self._check_mode(mode)

        status, payload = await self._post_json(
            f"{self.settings.routes_base_url}/directions/v2:computeRoutes",
            {
                "origin": {"address": origin.strip()},
                "destination": {"address": destination.strip()},
                "travelMode": ROUTES_TRAVEL_MODES[mode],
                "languageCode": self.settings.language,
            },
            headers=self._google_headers(ROUTES_FIELD_MASK),
        )
        if status != 200:
            message = self._google_error_message(payload)
            # the routes endpoint takes address-typed waypoints only
            if 400 <= status < 500 and (looks_like_coordinates(origin) or looks_like_coordinates(destination)):
                raise InvalidWaypoint(message or "Routing backend rejected a coordinate waypoint")
            raise self._upstream("Directions", status, message)

        raw_routes = payload.get("routes") or []
        if not raw_routes:
            raise NoRouteFound("No route found")

        with _malformed("directions"):
            routes = [self._route(raw) for raw in raw_routes]
            first = routes[0]
            return RouteResult(
                routes=routes,
                summary=first.description or ", ".join(first.labels),
                total_distance=first.distance,
                total_duration=first.duration,
            )

    # -- elevation --------------------------------------------------------

    async def elevation(self, locations: Sequence[Dict[str, float]]) -> List[ElevationSample]:
        if not locations:
            raise InvalidInput("At least one location is required")
        points = []
        for location in locations:
            try:
                point = LatLng(float(location["latitude"]), float(location["longitude"]))
            except (KeyError, TypeError, ValueError):
                raise InvalidInput("Each location needs numeric latitude and longitude") from None
            check_lat_lng(point.lat, point.lng)
            points.append(point)

        status, payload = await self._get_json(
            f"{self.settings.maps_base_url}/elevation/json",
            params={
                "locations": "|".join(f"{p.lat},{p.lng}" for p in points),
                "key": self.settings.api_key,
            },
        )
        results = self._legacy_results(status, payload, "Elevation")
        if not results:
            raise NotFound("No elevation data found for these locations")
        if len(results) != len(points):
            raise UpstreamError(f"Elevation returned {len(results)} samples for {len(points)} locations")

        with _malformed("elevation"):
            return [
                ElevationSample(elevation=float(item["elevation"]), location=point, resolution=item.get("resolution"))
                for item, point in zip(results, points)
            ]

    # -- response shaping -------------------------------------------------

    @staticmethod
    def _place_summary(place: Dict[str, Any]) -> PlaceSummary:
        return PlaceSummary(
            name=(place.get("displayName") or {}).get("text"),
            place_id=place.get("id", ""),
            address=place.get("formattedAddress"),
            location=_lat_lng(place.get("location")),
            rating=place.get("rating"),
            total_ratings=place.get("userRatingCount"),
            open_now=(place.get("currentOpeningHours") or {}).get("openNow"),
        )

    @staticmethod
    def _review(review: Dict[str, Any]) -> Review:
        text = review.get("text") or review.get("originalText") or {}
        return Review(
            rating=review.get("rating"),
            text=text.get("text") if isinstance(text, dict) else text,
            time=_review_time(review),
            author_name=(review.get("authorAttribution") or {}).get("displayName") or review.get("author_name"),
        )

    @staticmethod
    def _route(raw: Dict[str, Any]) -> Route:
        legs = []
        for leg in raw.get("legs", []):
            legs.append(RouteLeg(
                distance=_distance(leg.get("distanceMeters")),
                duration=_duration(leg.get("duration")),
                start_location=_lat_lng((leg.get("startLocation") or {}).get("latLng")),
                end_location=_lat_lng((leg.get("endLocation") or {}).get("latLng")),
            ))
        return Route(
            legs=legs,
            distance=_distance(raw.get("distanceMeters")),
            duration=_duration(raw.get("duration")),
            labels=list(raw.get("routeLabels", [])),
            description=raw.get("description"),
        )

    # -- transport --------------------------------------------------------

    async def _get_json(self, url: str, params: Dict[str, Any] = None,
                        headers: Dict[str, str] = None) -> Tuple[int, Dict[str, Any]]:
        return await self._request("GET", url, params=params, headers=headers)

    async def _post_json(self, url: str, body: Dict[str, Any],
                         headers: Dict[str, str] = None) -> Tuple[int, Dict[str, Any]]:
        return await self._request("POST", url, json=body, headers=headers)

    async def _request(self, method: str, url: str, **kwargs) -> Tuple[int, Dict[str, Any]]:
        if not self.session:
            raise RuntimeError("Maps client not connected")

        logger.debug("%s %s", method, url)
        try:
            async with self.session.request(method, url, **kwargs) as response:
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    raise UpstreamError(f"Non-JSON response from {url}", response.status) from None
                if payload is not None and not isinstance(payload, dict):
                    raise UpstreamError(f"Unexpected response shape from {url}", response.status)
                if response.status != 200:
                    logger.warning("%s %s returned HTTP %s", method, url, response.status)
                return response.status, payload or {}
        except asyncio.TimeoutError:
            logger.warning("%s %s timed out", method, url)
            raise UpstreamError(
                f"Request to {url} timed out after {self.settings.timeout_seconds:g}s"
            ) from None
        except aiohttp.ClientError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise UpstreamError(f"Request to {url} failed: {e}") from e

    def _google_headers(self, field_mask: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.settings.api_key,
            "X-Goog-FieldMask": field_mask,
        }

    @staticmethod
    def _legacy_results(status: int, payload: Dict[str, Any], what: str) -> List[Dict[str, Any]]:
        """Unwrap a classic web-service response; ZERO_RESULTS yields an empty list."""
        if status != 200:
            raise UpstreamError(f"{what} request failed: HTTP {status}", status)
        api_status = payload.get("status")
        if api_status == "ZERO_RESULTS":
            return []
        if api_status != "OK":
            message = f"{what} request failed: {api_status}"
            if payload.get("error_message"):
                message += f" - {payload['error_message']}"
            raise UpstreamError(message, status)
        return payload.get("results") or []

    @staticmethod
    def _google_error_message(payload: Dict[str, Any]) -> str:
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict):
            return error.get("message", "")
        return ""

    @staticmethod
    def _upstream(what: str, status: int, message: str = "") -> UpstreamError:
        return UpstreamError(f"{what} failed: {message or f'HTTP {status}'}", status)

    @staticmethod
    def _split_locations(value: Union[Sequence[str], str], label: str) -> List[str]:
        if isinstance(value, str):
            items = value.split("|") if value.strip() else []
        else:
            items = list(value or [])
        if not items:
            raise InvalidInput(f"At least one {label} is required")
        # dropping a blank entry would shrink the matrix below the caller's shape
        cleaned = []
        for index, item in enumerate(items, start=1):
            text = str(item).strip() if item is not None else ""
            if not text:
                raise InvalidInput(f"{label.capitalize()} {index} is blank")
            cleaned.append(text)
        return cleaned

    @staticmethod
    def _check_mode(mode: str):
        if mode not in TRAVEL_MODES:
            raise InvalidInput(f"Invalid mode '{mode}'. Use one of: {', '.join(TRAVEL_MODES)}")


@contextmanager
def _malformed(what: str):
    """Turn shape errors while reading a provider payload into UpstreamError."""
    try:
        yield
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Malformed %s response: %r", what, e)
        raise UpstreamError(f"Malformed {what} response") from e


def _lat_lng(raw: Optional[Dict[str, float]]) -> Optional[LatLng]:
    if not raw or "latitude" not in raw or "longitude" not in raw:
        return None
    return LatLng(raw["latitude"], raw["longitude"])


def _distance(meters: Optional[int]) -> Measure:
    return Measure(meters, format_distance(meters))


def _duration(raw: Optional[str]) -> Measure:
    seconds = parse_duration(raw)
    return Measure(seconds, format_duration(seconds))


def _review_time(review: Dict[str, Any]) -> Union[int, str, None]:
    raw = review.get("publishTime")
    if raw:
        # fractional seconds can run to nanoseconds, which fromisoformat rejects
        normalized = re.sub(r"\.\d+", "", raw).replace("Z", "+00:00")
        try:
            return int(datetime.fromisoformat(normalized).timestamp())
        except ValueError:
            pass
    legacy = review.get("time")
    if isinstance(legacy, int):
        return legacy
    if isinstance(legacy, str) and legacy.strip().isdigit():
        return int(legacy)
    return review.get("relativePublishTimeDescription")
