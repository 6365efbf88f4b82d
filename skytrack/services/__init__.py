"""Service-layer components for SkyTrack."""

from .recent_searches import RecentSearchStore, push_recent
from .resolver import PositionResolver, estimate_position, route_metrics
from .scheduler import SchedulerMode, TrackingScheduler
from .session import TrackingSession
from .tracker import FlightTracker

__all__ = [
    "FlightTracker",
    "PositionResolver",
    "RecentSearchStore",
    "SchedulerMode",
    "TrackingScheduler",
    "TrackingSession",
    "estimate_position",
    "push_recent",
    "route_metrics",
]
