"""Typed records for everything the maps tools return.

Each record is built once from a provider payload and never mutated.
Optional upstream fields stay ``None`` when the provider omits them.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from maps_mcp_server.utils import check_lat_lng


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class LocationQuery:
    """Caller-supplied search origin: free text or a 'lat,lng' string."""

    value: str
    is_coordinates: bool = False

    @classmethod
    def from_params(cls, center: Dict[str, Any]) -> "LocationQuery":
        return cls(
            value=str(center.get("value", "")),
            is_coordinates=bool(center.get("isCoordinates", False)),
        )


@dataclass(frozen=True)
class ResolvedLocation:
    lat: float
    lng: float
    formatted_address: Optional[str] = None
    place_id: Optional[str] = None

    def __post_init__(self):
        check_lat_lng(self.lat, self.lng)

    @property
    def point(self) -> LatLng:
        return LatLng(self.lat, self.lng)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PlaceSummary:
    name: Optional[str]
    place_id: str
    address: Optional[str] = None
    location: Optional[LatLng] = None
    rating: Optional[float] = None
    total_ratings: Optional[int] = None
    open_now: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Review:
    rating: Optional[float]
    text: Optional[str]
    # epoch seconds when the provider gives a timestamp, else its relative description
    time: Union[int, str, None]
    author_name: Optional[str]


@dataclass(frozen=True)
class PlaceDetail:
    name: Optional[str]
    place_id: str
    address: Optional[str] = None
    location: Optional[LatLng] = None
    rating: Optional[float] = None
    total_ratings: Optional[int] = None
    open_now: Optional[bool] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    price_level: Optional[int] = None
    reviews: List[Review] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AddressComponent:
    long_name: str
    short_name: str
    types: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GeocodeResult:
    location: LatLng
    formatted_address: str
    place_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ReverseGeocodeResult:
    formatted_address: str
    place_id: str
    address_components: List[AddressComponent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Measure:
    """A distance in meters or a duration in seconds, with display text."""

    value: Optional[int]
    text: str


@dataclass(frozen=True)
class DistanceMatrix:
    # a None cell means the provider found no route for that origin/destination pair
    distances: List[List[Optional[Measure]]]
    durations: List[List[Optional[Measure]]]
    origin_addresses: List[str]
    destination_addresses: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RouteLeg:
    distance: Measure
    duration: Measure
    start_location: Optional[LatLng] = None
    end_location: Optional[LatLng] = None


@dataclass(frozen=True)
class Route:
    legs: List[RouteLeg]
    distance: Measure
    duration: Measure
    labels: List[str] = field(default_factory=list)
    description: Optional[str] = None


@dataclass(frozen=True)
class RouteResult:
    routes: List[Route]
    summary: str
    total_distance: Measure
    total_duration: Measure

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ElevationSample:
    elevation: float
    location: LatLng
    resolution: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
