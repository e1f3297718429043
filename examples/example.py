"""Example usage of ViaRailTracker."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import viarailmap
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from viarailmap import FeedUnavailableError, FeedValidationError, StationMarker, ViaRailTracker

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

MARKERS = {
    StationMarker.COMPLETED: "✓",
    StationMarker.PENDING_TERMINAL: "◎",
    StationMarker.PENDING: "○",
}


def print_active_trains(tracker: ViaRailTracker):
    """List every train currently reporting a position."""
    active = tracker.get_active_trains()
    if not active:
        print("No trains currently active")
        return

    print(f"{'='*70}")
    print(f"ACTIVE TRAINS ({len(active)})")
    print(f"{'='*70}")
    for train_id, train in active:
        print(f"  Train {train_id:>5s}: {train.from_} → {train.to}")


def print_timeline(tracker: ViaRailTracker, train_id: str):
    """
    Display the station timeline for one train.

    Args:
        tracker: Tracker to query.
        train_id: Feed key of the train (e.g., "60").
    """
    timeline = tracker.get_timeline(train_id)
    train = timeline.train

    print(f"\n{'='*70}")
    print(f"Train {timeline.train_id}: {train.from_} → {train.to}  [{timeline.status.value}]")
    print(f"{'='*70}\n")

    for alert in train.alerts or []:
        print(f"⚠️  {alert.header.en}")
        print(f"   {alert.description.en}\n")

    for stop in timeline.stops:
        current = "→" if stop.index == timeline.active_index else " "
        delay = f" +{stop.diff_min}m" if stop.diff_min else ""
        print(f" {current} {MARKERS[stop.marker]} {stop.station} ({stop.code}){delay}")

    print(f"\n{'='*70}\n")


if __name__ == "__main__":
    tracker = ViaRailTracker()
    try:
        if len(sys.argv) > 1:
            print_timeline(tracker, sys.argv[1])
        else:
            print_active_trains(tracker)
    except (FeedUnavailableError, FeedValidationError) as e:
        logger.error(f"Failed to load train data: {e}")
        print("Train data is temporarily unavailable")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        tracker.cleanup()
