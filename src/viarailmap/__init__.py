"""viarailmap - Live VIA Rail train positions and schedule progress."""

__version__ = "0.1.0"

from .exceptions import FeedUnavailableError, FeedValidationError, ViaRailError
from .models import (
    DelaySeverity,
    IntermediateStationTime,
    StationMarker,
    StopProgress,
    TerminalStationTime,
    TimeEstimate,
    Train,
    TrainAlert,
    TrainStatus,
    TrainTimeline,
    ViaRailData,
)
from .normalizer import normalize_feed, normalize_train, to_payload
from .progress import (
    active_timeline_index,
    has_arrived,
    has_departed,
    is_completed,
    delay_severity,
    station_marker,
    train_status,
)
from .train_tracker import ViaRailTracker
from .via_client import ViaRailClient, build_proxy_payload

__all__ = [
    "ViaRailTracker",
    "ViaRailClient",
    "build_proxy_payload",
    "normalize_feed",
    "normalize_train",
    "to_payload",
    "has_departed",
    "has_arrived",
    "is_completed",
    "active_timeline_index",
    "train_status",
    "station_marker",
    "delay_severity",
    "TimeEstimate",
    "IntermediateStationTime",
    "TerminalStationTime",
    "Train",
    "TrainAlert",
    "ViaRailData",
    "TrainStatus",
    "StationMarker",
    "DelaySeverity",
    "StopProgress",
    "TrainTimeline",
    "ViaRailError",
    "FeedValidationError",
    "FeedUnavailableError",
]
