"""Error taxonomy shared by the provider adapter and the tool facade."""

from typing import Optional


class MapsError(Exception):
    """Base class for every failure a maps operation can report."""

    code = "MapsError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidInput(MapsError):
    code = "InvalidInput"


class NotFound(MapsError):
    code = "NotFound"


class UnsupportedFilter(MapsError):
    """The provider rejected a nearby-search type/category."""

    code = "UnsupportedFilter"


class NoRouteFound(MapsError):
    code = "NoRouteFound"


class InvalidWaypoint(MapsError):
    """The routing backend refused a waypoint, typically raw coordinates sent as an address."""

    code = "InvalidWaypoint"


class UpstreamError(MapsError):
    code = "UpstreamError"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ConfigError(MapsError):
    """Startup configuration is unusable. Never returned inside an envelope."""

    code = "ConfigError"
