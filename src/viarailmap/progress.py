"""Per-station completion and itinerary progress for a train."""

import logging
from datetime import datetime
from typing import List, Optional, Union

from .models import (
    DelaySeverity,
    IntermediateStationTime,
    StationMarker,
    StopProgress,
    TerminalStationTime,
    Train,
    TrainStatus,
)
from .timeutils import is_reached, utc_now

logger = logging.getLogger(__name__)

AnyStationTime = Union[IntermediateStationTime, TerminalStationTime]


def has_departed(station_time: AnyStationTime, now: Optional[datetime] = None) -> bool:
    """
    Check whether the train has left a station.

    Only the live departure estimate counts. A stop without a departure
    object, or without an estimate yet, has not been departed.
    """
    now = now or utc_now()
    departure = station_time.departure
    if departure is None:
        return False
    return is_reached(departure.estimated, now)


def has_arrived(station_time: AnyStationTime, now: Optional[datetime] = None) -> bool:
    """
    Check whether the train has reached a station.

    Terminal stops are read from their ``arrival`` object; intermediate
    stops from the record's own top-level estimate. Without a live
    estimate the stop is never considered reached.
    """
    now = now or utc_now()
    if isinstance(station_time, TerminalStationTime):
        return is_reached(station_time.arrival.estimated, now)
    return is_reached(station_time.estimated, now)


def is_completed(
    station_time: AnyStationTime,
    index: int,
    total_stations: int,
    now: Optional[datetime] = None,
) -> bool:
    """A stop is completed once it has been arrived at, wherever it sits in the itinerary."""
    return has_arrived(station_time, now)


def active_timeline_index(train: Train, now: Optional[datetime] = None) -> int:
    """
    Index of the train's current position within its itinerary.

    Args:
        train: Train record from a feed snapshot.
        now: Reference time. Defaults to the current UTC time.

    Returns:
        0 before departure, the last index after arrival, otherwise the
        highest index of a completed stop (0 if none). Estimates are not
        guaranteed to be monotonic, so a completed later stop wins over an
        incomplete earlier one.
    """
    if not train.departed:
        return 0
    if train.arrived:
        return max(len(train.times) - 1, 0)

    now = now or utc_now()
    total = len(train.times)
    current = 0
    for index, station_time in enumerate(train.times):
        if is_completed(station_time, index, total, now):
            current = index

    logger.debug(f"Train {train.instance} at timeline index {current} of {total}")
    return current


def train_status(train: Train) -> TrainStatus:
    """Train-level state from the feed's own departed/arrived flags."""
    if train.arrived:
        return TrainStatus.ARRIVED
    if train.departed:
        return TrainStatus.EN_ROUTE
    return TrainStatus.NOT_DEPARTED


def station_marker(
    station_time: AnyStationTime,
    index: int,
    total_stations: int,
    now: Optional[datetime] = None,
) -> StationMarker:
    """
    Icon state for a stop.

    The origin is done once departed, every other stop once arrived at.
    Origin and destination keep a distinct pending state.
    """
    now = now or utc_now()

    # Origin
    if index == 0:
        if has_departed(station_time, now):
            return StationMarker.COMPLETED
        return StationMarker.PENDING_TERMINAL

    # Destination
    if index == total_stations - 1:
        if has_arrived(station_time, now):
            return StationMarker.COMPLETED
        return StationMarker.PENDING_TERMINAL

    if has_arrived(station_time, now):
        return StationMarker.COMPLETED
    return StationMarker.PENDING


def delay_severity(diff_min: Optional[float]) -> DelaySeverity:
    """Classify a stop's delay in minutes; zero or missing means no delay."""
    if not diff_min:
        return DelaySeverity.NONE
    if diff_min > 15:
        return DelaySeverity.SEVERE
    if diff_min > 5:
        return DelaySeverity.MODERATE
    return DelaySeverity.MINOR


def stop_progress(train: Train, now: Optional[datetime] = None) -> List[StopProgress]:
    """Derived state for every stop of a train at one reference time."""
    now = now or utc_now()
    total = len(train.times)
    return [
        StopProgress(
            index=index,
            station=station_time.station,
            code=station_time.code,
            departed=has_departed(station_time, now),
            arrived=has_arrived(station_time, now),
            marker=station_marker(station_time, index, total, now),
            diff_min=station_time.diff_min,
            delay=delay_severity(station_time.diff_min),
        )
        for index, station_time in enumerate(train.times)
    ]
