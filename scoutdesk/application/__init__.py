"""Application services."""

from .scouting import (
    ScoutingService,
    UnknownWatchError,
    configure_scouting_service,
    get_scouting_service,
    reset_scouting_state,
)

__all__ = [
    "ScoutingService",
    "UnknownWatchError",
    "configure_scouting_service",
    "get_scouting_service",
    "reset_scouting_state",
]
