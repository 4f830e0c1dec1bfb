import json
from maps_mcp_server.catalog import get_examples, list_tools
from maps_mcp_server.instance import mcp

# Expose the tool catalog so agents can discover call shapes before invoking
@mcp.resource("maps://tools")
async def get_tool_catalog() -> str:
    """
    List every maps tool with its description.

    Returns:
        JSON string with a list of {name, description}
    """
    return json.dumps(list_tools())

@mcp.resource("maps://examples/{tool_name}")
async def get_tool_examples(tool_name: str) -> str:
    """
    Get example invocations for a maps tool.

    Args:
        tool_name: Tool name, e.g. "search_nearby" or "maps_directions"

    Returns:
        JSON string with a list of example argument objects
    """
    return json.dumps(get_examples(tool_name))
