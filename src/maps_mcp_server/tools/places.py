from typing import Annotated, Any, Dict, Optional

from mcp.server.fastmcp import Context
from pydantic import Field

from maps_mcp_server.instance import mcp
from maps_mcp_server.models import LocationQuery
from maps_mcp_server.tools.params import SearchCenter


@mcp.tool()
async def search_nearby(
    center: SearchCenter,
    ctx: Context,
    keyword: Optional[str] = None,
    radius: float = 1000,
    openNow: bool = False,
    minRating: Annotated[Optional[float], Field(ge=0, le=5)] = None
) -> Dict[str, Any]:
    """
    Search for nearby places around an address, landmark, or coordinate pair.

    The center is geocoded first unless it is flagged as raw coordinates. The
    resolved center is returned next to the results so the caller can see
    what a free-text location actually resolved to.

    Args:
        center: Search center point. value is an address, landmark name or
                "lat,lng"; set isCoordinates when value is a coordinate pair.
        keyword: Place type to search for (e.g., "restaurant", "cafe",
                 "tourist_attraction"). Free-form phrases are rejected upstream.
        radius: Search radius in meters (defaults to 1000m)
        openNow: Only return places that are open right now
        minRating: Minimum rating requirement (0-5). Places without a rating
                   are dropped when this is set.

    Returns:
        Envelope with:
        - success flag
        - data: up to 20 places (name, place_id, address, location, rating,
          total_ratings, open_now)
        - location: the resolved center
        - error: message when success is false
    """
    searcher = ctx.request_context.lifespan_context.searcher
    await ctx.info(f"Searching near '{center.value}' within {radius}m")
    result = await searcher.search_nearby(
        LocationQuery(value=center.value, is_coordinates=center.isCoordinates),
        keyword=keyword,
        radius=radius,
        open_now=openNow,
        min_rating=minRating,
    )
    if not result["success"]:
        await ctx.warning(f"search_nearby failed: {result['error']}")
    return result


@mcp.tool()
async def get_place_details(placeId: str, ctx: Context) -> Dict[str, Any]:
    """
    Get detailed information about a specific place.

    Args:
        placeId: Google Maps Place ID (e.g., "ChIJ2eUgeAK6j4ARbn5u_wAGqWA")

    Returns:
        Envelope whose data holds name, address, location, rating,
        total_ratings, open_now, phone, website, price_level (0-4) and
        reviews (rating, text, time, author_name).
    """
    searcher = ctx.request_context.lifespan_context.searcher
    return await searcher.get_place_details(placeId)
