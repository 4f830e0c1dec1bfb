"""Runtime settings read from the process environment."""

import os
from dataclasses import dataclass

from maps_mcp_server.errors import ConfigError


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    maps_base_url: str = "https://maps.googleapis.com/maps/api"
    places_base_url: str = "https://places.googleapis.com/v1"
    routes_base_url: str = "https://routes.googleapis.com"
    timeout_seconds: float = 10.0
    language: str = "en"
    log_level: str = "INFO"
    transport: str = "stdio"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("GOOGLE_MAPS_API_KEY", cls.api_key).strip(),
            maps_base_url=os.getenv("MAPS_BASE_URL", cls.maps_base_url).rstrip("/"),
            places_base_url=os.getenv("PLACES_BASE_URL", cls.places_base_url).rstrip("/"),
            routes_base_url=os.getenv("ROUTES_BASE_URL", cls.routes_base_url).rstrip("/"),
            timeout_seconds=float(os.getenv("MAPS_TIMEOUT_SECONDS", str(cls.timeout_seconds))),
            language=os.getenv("MAPS_LANGUAGE", cls.language),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            transport=os.getenv("MCP_TRANSPORT", cls.transport),
        )

    def require_api_key(self) -> None:
        if not self.api_key:
            raise ConfigError("Google Maps API Key is required (set GOOGLE_MAPS_API_KEY)")
