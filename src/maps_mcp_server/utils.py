import logging
import math
import sys
from typing import Optional, Tuple

from maps_mcp_server.errors import InvalidInput

COORDINATE_FORMAT_ERROR = "Invalid coordinate format. Please use 'latitude,longitude' format"


def setup_logging(level: str = "INFO") -> None:
    """Send log records to stderr so stdout stays free for the stdio transport."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def check_lat_lng(lat: float, lng: float) -> None:
    if not -90.0 <= lat <= 90.0:
        raise InvalidInput(f"Latitude out of range: {lat}")
    if not -180.0 <= lng <= 180.0:
        raise InvalidInput(f"Longitude out of range: {lng}")


def parse_coordinates(text: str) -> Tuple[float, float]:
    """Parse a 'lat,lng' string into a float pair without touching the network."""
    tokens = [token.strip() for token in (text or "").split(",")]
    if len(tokens) != 2:
        raise InvalidInput(COORDINATE_FORMAT_ERROR)
    try:
        lat, lng = float(tokens[0]), float(tokens[1])
    except ValueError:
        raise InvalidInput(COORDINATE_FORMAT_ERROR) from None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidInput(COORDINATE_FORMAT_ERROR)
    check_lat_lng(lat, lng)
    return lat, lng


def looks_like_coordinates(text: str) -> bool:
    try:
        parse_coordinates(text)
    except InvalidInput:
        return False
    return True


def parse_duration(raw: Optional[str]) -> Optional[int]:
    """Convert a protobuf duration string such as '1234s' or '12.5s' to whole seconds."""
    if raw is None:
        return None
    digits = str(raw).strip().rstrip("s")
    try:
        return int(round(float(digits)))
    except ValueError:
        return None


def format_distance(meters: Optional[int]) -> str:
    if meters is None:
        return ""
    if meters < 1000:
        return f"{meters} m"
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: Optional[int]) -> str:
    if seconds is None:
        return ""
    minutes = int(round(seconds / 60))
    if minutes < 1:
        return f"{seconds} secs" if seconds != 1 else "1 sec"
    days, minutes = divmod(minutes, 60 * 24)
    hours, minutes = divmod(minutes, 60)
    parts = []
    if days:
        parts.append(f"{days} day" + ("s" if days != 1 else ""))
    if hours:
        parts.append(f"{hours} hour" + ("s" if hours != 1 else ""))
    if minutes:
        parts.append(f"{minutes} min" + ("s" if minutes != 1 else ""))
    return " ".join(parts)
