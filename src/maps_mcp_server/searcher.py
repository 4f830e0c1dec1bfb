"""Tool-facing facade over :class:`MapsClient`.

Every public coroutine here returns an envelope dict::

    {"success": True, "data": ...}
    {"success": False, "error": "...", "error_code": "NotFound"}

and never raises. Adapter failures are converted at this boundary only.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from maps_mcp_server.client import MapsClient
from maps_mcp_server.errors import MapsError, UpstreamError
from maps_mcp_server.models import LocationQuery, ResolvedLocation

logger = logging.getLogger(__name__)


def success_envelope(data: Any, **extra: Any) -> Dict[str, Any]:
    envelope = {"success": True, "data": data}
    envelope.update(extra)
    return envelope


def error_envelope(error: Exception) -> Dict[str, Any]:
    return {
        "success": False,
        "error": str(error),
        "error_code": getattr(error, "code", type(error).__name__),
    }


class PlacesSearcher:
    def __init__(self, maps_client: MapsClient):
        self.maps_client = maps_client

    async def resolve_location(self, query: LocationQuery) -> ResolvedLocation:
        """Pin a search origin to coordinates: parse raw 'lat,lng' or geocode free text."""
        if query.is_coordinates:
            return self.maps_client.resolve_coordinates(query.value)
        return await self.maps_client.resolve_address(query.value)

    async def search_nearby(self,
                            center: Union[LocationQuery, Dict[str, Any]],
                            keyword: Optional[str] = None,
                            radius: float = 1000,
                            open_now: bool = False,
                            min_rating: Optional[float] = None) -> Dict[str, Any]:
        try:
            if not isinstance(center, LocationQuery):
                center = LocationQuery.from_params(center)
            location = await self.resolve_location(center)
            logger.info("Nearby search around (%s, %s) keyword=%r", location.lat, location.lng, keyword)
            places = await self.maps_client.search_nearby(
                location,
                radius=radius,
                keyword=keyword,
                open_now=open_now,
                min_rating=min_rating,
            )
        except (MapsError, RuntimeError) as e:
            return self._failed("search_nearby", e)
        except Exception as e:
            return self._crashed("search_nearby", e)
        return success_envelope([place.to_dict() for place in places], location=location.to_dict())

    async def get_place_details(self, place_id: str) -> Dict[str, Any]:
        try:
            details = await self.maps_client.get_place_details(place_id)
        except (MapsError, RuntimeError) as e:
            return self._failed("get_place_details", e)
        except Exception as e:
            return self._crashed("get_place_details", e)
        return success_envelope(details.to_dict())

    async def geocode(self, address: str) -> Dict[str, Any]:
        try:
            result = await self.maps_client.geocode(address)
        except (MapsError, RuntimeError) as e:
            return self._failed("geocode", e)
        except Exception as e:
            return self._crashed("geocode", e)
        return success_envelope(result.to_dict())

    async def reverse_geocode(self, latitude: float, longitude: float) -> Dict[str, Any]:
        try:
            result = await self.maps_client.reverse_resolve(latitude, longitude)
        except (MapsError, RuntimeError) as e:
            return self._failed("reverse_geocode", e)
        except Exception as e:
            return self._crashed("reverse_geocode", e)
        return success_envelope(result.to_dict())

    async def calculate_distance_matrix(self,
                                        origins: Union[Sequence[str], str],
                                        destinations: Union[Sequence[str], str],
                                        mode: str = "driving") -> Dict[str, Any]:
        try:
            matrix = await self.maps_client.distance_matrix(origins, destinations, mode)
        except (MapsError, RuntimeError) as e:
            return self._failed("calculate_distance_matrix", e)
        except Exception as e:
            return self._crashed("calculate_distance_matrix", e)
        return success_envelope(matrix.to_dict())

    async def get_directions(self, origin: str, destination: str, mode: str = "driving") -> Dict[str, Any]:
        try:
            result = await self.maps_client.directions(origin, destination, mode)
        except (MapsError, RuntimeError) as e:
            return self._failed("get_directions", e)
        except Exception as e:
            return self._crashed("get_directions", e)
        return success_envelope(result.to_dict())

    async def get_elevation(self, locations: List[Dict[str, float]]) -> Dict[str, Any]:
        try:
            samples = await self.maps_client.elevation(locations)
        except (MapsError, RuntimeError) as e:
            return self._failed("get_elevation", e)
        except Exception as e:
            return self._crashed("get_elevation", e)
        return success_envelope([sample.to_dict() for sample in samples])

    @staticmethod
    def _failed(operation: str, error: Exception) -> Dict[str, Any]:
        logger.warning("%s failed: %s", operation, error)
        return error_envelope(error)

    @staticmethod
    def _crashed(operation: str, error: Exception) -> Dict[str, Any]:
        logger.exception("%s raised an unexpected error", operation)
        return error_envelope(UpstreamError(f"Unexpected error in {operation}: {error!r}"))
