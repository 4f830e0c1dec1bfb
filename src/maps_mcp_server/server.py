import logging
import sys

from dotenv import load_dotenv

from maps_mcp_server.config import Settings
from maps_mcp_server.errors import ConfigError
from maps_mcp_server.instance import configure, mcp
from maps_mcp_server.utils import setup_logging

# Import tools to register them
import maps_mcp_server.tools.places
import maps_mcp_server.tools.geocoding
import maps_mcp_server.tools.routing
import maps_mcp_server.tools.elevation

# Import resources
import maps_mcp_server.resources

logger = logging.getLogger(__name__)


def main():
    load_dotenv()
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    try:
        settings.require_api_key()
    except ConfigError as e:
        logger.error("Cannot start: %s", e)
        sys.exit(1)
    configure(settings)

    logger.info("Starting Google Maps MCP server (%s transport)", settings.transport)
    mcp.run(transport=settings.transport)


if __name__ == "__main__":
    main()
