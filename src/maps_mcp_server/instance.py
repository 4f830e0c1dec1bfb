from mcp.server.fastmcp import FastMCP
from dataclasses import dataclass
from typing import AsyncIterator, Optional
from contextlib import asynccontextmanager
from maps_mcp_server.client import MapsClient
from maps_mcp_server.config import Settings
from maps_mcp_server.searcher import PlacesSearcher

# Settings validated by server.main(); unset when the app is loaded by `mcp dev`
_settings: Optional[Settings] = None


def configure(settings: Settings) -> None:
    global _settings
    _settings = settings


def current_settings() -> Settings:
    """Settings handed over by main(), or read and checked from the environment."""
    if _settings is not None:
        return _settings
    settings = Settings.from_env()
    settings.require_api_key()
    return settings

# Create application context
@dataclass
class AppContext:
    maps_client: MapsClient
    searcher: PlacesSearcher

# Define lifespan manager
@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Manage Maps client lifecycle"""
    maps_client = MapsClient(current_settings())
    try:
        await maps_client.connect()
        yield AppContext(maps_client=maps_client, searcher=PlacesSearcher(maps_client))
    finally:
        await maps_client.disconnect()

# Create the MCP server
mcp = FastMCP(
    "Google Maps MCP Server",
    dependencies=["aiohttp", "pydantic", "python-dotenv"],
    lifespan=app_lifespan
)
