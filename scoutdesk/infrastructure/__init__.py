"""Infrastructure layer exports."""

from .scouting_api import ScoutingAPIClient, ScoutingAPIError, configure_api_client, get_api_client

__all__ = [
    "ScoutingAPIClient",
    "ScoutingAPIError",
    "configure_api_client",
    "get_api_client",
]
