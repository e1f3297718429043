"""Main VIA Rail train tracker class."""

import logging
from datetime import datetime
from typing import List, Optional, Union

from .models import ActiveTrain, Train, TrainTimeline, ViaRailData
from .progress import active_timeline_index, stop_progress, train_status
from .timeutils import utc_now
from .via_client import ViaRailClient

logger = logging.getLogger(__name__)


def _train_id_sort_key(item: ActiveTrain):
    # Numeric ids in numeric order first, like JSON object key order, then the rest as text
    train_id = item[0]
    if train_id.isdigit():
        return (0, int(train_id), train_id)
    return (1, 0, train_id)


class ViaRailTracker:
    """
    Tracks live VIA Rail trains and their progress along their itineraries.

    This class provides methods to:
    - List trains currently reporting a position
    - Look up a train by its id
    - Build the station timeline for a selected train
    """

    def __init__(self, client: Optional[ViaRailClient] = None):
        """
        Initialize the tracker.

        Args:
            client: Feed client to use. A default ViaRailClient is created if omitted.
        """
        self.client = client or ViaRailClient()

    def get_trains(self) -> ViaRailData:
        """Fetch a fresh snapshot of every train in the feed."""
        return self.client.get_train_data()

    def get_active_trains(self, data: Optional[ViaRailData] = None) -> List[ActiveTrain]:
        """
        Get trains that currently report a map position.

        Args:
            data: Snapshot to filter. Fetched from the feed if omitted.

        Returns:
            List of (train_id, Train) tuples, numeric ids in numeric order.
        """
        if data is None:
            data = self.get_trains()

        active = [(str(train_id), train) for train_id, train in data.items() if train.has_position]
        active.sort(key=_train_id_sort_key)
        logger.debug(f"{len(active)} of {len(data)} trains report a position")
        return active

    def get_train(self, train_id: Union[str, int], data: Optional[ViaRailData] = None) -> Train:
        """
        Get a train by id.

        Args:
            train_id: Feed key of the train (e.g., "60").
            data: Snapshot to search. Fetched from the feed if omitted.

        Returns:
            Train object.

        Raises:
            ValueError: If the train is not in the feed.
        """
        if data is None:
            data = self.get_trains()

        # Feed keys are strings in JSON but may be numeric when built in code
        for key in (train_id, str(train_id)):
            if key in data:
                return data[key]
        if isinstance(train_id, str) and train_id.isdigit() and int(train_id) in data:
            return data[int(train_id)]

        raise ValueError(f"No train found with id '{train_id}'")

    def get_timeline(
        self,
        train_id: Union[str, int],
        now: Optional[datetime] = None,
        data: Optional[ViaRailData] = None,
    ) -> TrainTimeline:
        """
        Get the station timeline for a train.

        Args:
            train_id: Feed key of the train.
            now: Reference time. Defaults to the current UTC time.
            data: Snapshot to use. Fetched from the feed if omitted.

        Returns:
            TrainTimeline with the train's status, current index and per-stop state.
        """
        train = self.get_train(train_id, data)
        now = now or utc_now()

        return TrainTimeline(
            train_id=str(train_id),
            train=train,
            status=train_status(train),
            active_index=active_timeline_index(train, now),
            stops=stop_progress(train, now),
        )

    def cleanup(self) -> None:
        """Release resources and clear caches."""
        if self.client:
            self.client.clear_cache()
            self.client.close()
        logger.info("Cleaned up tracker resources")
