from typing import Any, Dict

from mcp.server.fastmcp import Context

from maps_mcp_server.instance import mcp


@mcp.tool()
async def maps_geocode(address: str, ctx: Context) -> Dict[str, Any]:
    """
    Convert an address or landmark name to coordinates.

    Only the top-ranked match is returned.

    Args:
        address: Address or landmark name to convert
                 (e.g., "1600 Amphitheatre Parkway, Mountain View, CA")

    Returns:
        Envelope whose data holds location {lat, lng}, formatted_address
        and place_id.
    """
    searcher = ctx.request_context.lifespan_context.searcher
    await ctx.info(f"Geocoding '{address}'")
    return await searcher.geocode(address)


@mcp.tool()
async def maps_reverse_geocode(latitude: float, longitude: float, ctx: Context) -> Dict[str, Any]:
    """
    Convert coordinates to an address.

    Args:
        latitude: Latitude (decimal degrees, WGS84)
        longitude: Longitude (decimal degrees, WGS84)

    Returns:
        Envelope whose data holds formatted_address, place_id and
        address_components (long_name, short_name, types), e.g. the
        component typed "postal_code".
    """
    searcher = ctx.request_context.lifespan_context.searcher
    await ctx.info(f"Reverse geocoding ({latitude}, {longitude})")
    return await searcher.reverse_geocode(latitude, longitude)
