from typing import Any, Dict, List, Union

from mcp.server.fastmcp import Context

from maps_mcp_server.instance import mcp
from maps_mcp_server.tools.params import TravelMode


@mcp.tool()
async def maps_distance_matrix(
    origins: Union[List[str], str],
    destinations: Union[List[str], str],
    ctx: Context,
    mode: TravelMode = "driving"
) -> Dict[str, Any]:
    """
    Calculate distance and travel time between multiple origins and destinations.

    Args:
        origins: List of origin addresses or coordinates (a single
                 pipe-delimited string is accepted too)
        destinations: List of destination addresses or coordinates
        mode: Travel mode ("driving", "walking", "bicycling", "transit")

    Returns:
        Envelope whose data holds distances and durations as
        origins x destinations matrices of {value, text}, plus the provider's
        origin_addresses and destination_addresses. A null cell means no
        route exists for that pair; the call itself still succeeds.
    """
    searcher = ctx.request_context.lifespan_context.searcher
    await ctx.info(f"Calculating {mode} distance matrix")
    return await searcher.calculate_distance_matrix(origins, destinations, mode)


@mcp.tool()
async def maps_directions(
    origin: str,
    destination: str,
    ctx: Context,
    mode: TravelMode = "driving"
) -> Dict[str, Any]:
    """
    Get directions between two points.

    Waypoints are sent to the routing backend as addresses. Raw coordinate
    strings may be rejected; prefer place names or street addresses.

    Args:
        origin: Origin address or coordinates
        destination: Destination address or coordinates
        mode: Travel mode ("driving", "walking", "bicycling", "transit")

    Returns:
        Envelope whose data holds routes (legs with distance, duration and
        start/end coordinates), summary, total_distance and total_duration.
    """
    searcher = ctx.request_context.lifespan_context.searcher
    await ctx.info(f"Calculating {mode} route from '{origin}' to '{destination}'")
    result = await searcher.get_directions(origin, destination, mode)
    if not result["success"]:
        await ctx.warning(f"maps_directions failed: {result['error']}")
    return result
