from typing import Any, Dict, List

from mcp.server.fastmcp import Context

from maps_mcp_server.instance import mcp
from maps_mcp_server.tools.params import Coordinate


@mcp.tool()
async def maps_elevation(locations: List[Coordinate], ctx: Context) -> Dict[str, Any]:
    """
    Get elevation data for locations.

    Args:
        locations: List of {latitude, longitude} points

    Returns:
        Envelope whose data lists one {elevation, location, resolution}
        sample per input point, in input order. Elevation is in meters.
    """
    searcher = ctx.request_context.lifespan_context.searcher
    await ctx.info(f"Looking up elevation for {len(locations)} location(s)")
    return await searcher.get_elevation([location.model_dump() for location in locations])
