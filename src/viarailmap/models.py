"""Data models for the VIA Rail live train feed."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    RootModel,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    Tag,
    field_validator,
)

Number = Union[StrictInt, StrictFloat]
TrainId = Union[StrictStr, StrictInt]


def _not_null(value: Any) -> Any:
    # Optional feed fields may be omitted, but only direction may be null
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


class FeedModel(BaseModel):
    """Base for all feed records: immutable, wire names kept via aliases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TimeEstimate(FeedModel):
    """A scheduled arrival or departure with its live estimate, if any."""
    scheduled: StrictStr
    estimated: Optional[StrictStr] = None


class BilingualText(FeedModel):
    en: StrictStr
    fr: StrictStr


class TrainAlert(FeedModel):
    """Service alert attached to a train."""
    header: BilingualText
    description: BilingualText
    url: BilingualText


class StationTimeBase(FeedModel):
    """Fields shared by every stop in an itinerary.

    The top-level ``scheduled``/``estimated`` pair is the arrival time for
    intermediate stops. Terminal stops carry an explicit ``arrival`` instead.
    """
    station: StrictStr
    code: StrictStr
    scheduled: StrictStr
    estimated: Optional[StrictStr] = None
    eta: StrictStr
    diff: Optional[StrictStr] = None
    diff_min: Optional[Number] = Field(default=None, alias="diffMin")

    @field_validator("diff", "diff_min", mode="before")
    @classmethod
    def reject_null_delay(cls, value: Any) -> Any:
        return _not_null(value)


class IntermediateStationTime(StationTimeBase):
    """A stop without an ``arrival`` object; arrival is the top-level pair."""
    departure: TimeEstimate


class TerminalStationTime(StationTimeBase):
    """Origin or destination stop carrying an explicit ``arrival`` object."""
    arrival: TimeEstimate
    departure: Optional[TimeEstimate] = None

    @field_validator("departure", mode="before")
    @classmethod
    def reject_null_departure(cls, value: Any) -> Any:
        return _not_null(value)


def _station_time_kind(value: Any) -> str:
    # Presence of the arrival key decides the variant, even alongside departure
    if isinstance(value, dict):
        return "terminal" if "arrival" in value else "intermediate"
    if isinstance(value, TerminalStationTime):
        return "terminal"
    return "intermediate"


StationTime = Annotated[
    Union[
        Annotated[IntermediateStationTime, Tag("intermediate")],
        Annotated[TerminalStationTime, Tag("terminal")],
    ],
    Discriminator(_station_time_kind),
]


class Train(FeedModel):
    """One train as reported by the feed."""
    departed: StrictBool
    arrived: StrictBool
    from_: StrictStr = Field(alias="from")
    to: StrictStr
    instance: StrictStr
    times: Tuple[StationTime, ...]
    lat: Optional[Number] = None
    lng: Optional[Number] = None
    speed: Optional[Number] = None
    direction: Optional[Number] = None  # null means heading unknown
    poll: Optional[StrictStr] = None
    poll_min: Optional[Number] = Field(default=None, alias="pollMin")
    alerts: Optional[Tuple[TrainAlert, ...]] = None

    @field_validator("lat", "lng", "speed", "poll", "poll_min", "alerts", mode="before")
    @classmethod
    def reject_null_live_fields(cls, value: Any) -> Any:
        return _not_null(value)

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lng is not None


class ViaRailData(RootModel[Dict[TrainId, Train]]):
    """Snapshot of every train in one feed poll, keyed by train id.

    Each Train is immutable; the mapping is rebuilt on every poll and is not
    meant to be edited in place.
    """

    model_config = ConfigDict(frozen=True)

    def __getitem__(self, train_id: Union[str, int]) -> Train:
        return self.root[train_id]

    def __contains__(self, train_id: object) -> bool:
        return train_id in self.root

    def __iter__(self) -> Iterator[Union[str, int]]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def keys(self):
        return self.root.keys()

    def items(self):
        return self.root.items()

    def get(self, train_id: Union[str, int], default: Optional[Train] = None) -> Optional[Train]:
        return self.root.get(train_id, default)


class TrainStatus(str, Enum):
    """Train-level display state driven by the feed's departed/arrived flags."""
    NOT_DEPARTED = "not_departed"
    EN_ROUTE = "en_route"
    ARRIVED = "arrived"


class StationMarker(str, Enum):
    """Icon state for a stop on the timeline."""
    COMPLETED = "completed"
    PENDING_TERMINAL = "pending_terminal"  # origin/destination not yet reached
    PENDING = "pending"


class DelaySeverity(str, Enum):
    """How late a stop is running, from its delay in minutes."""
    NONE = "none"  # no delay reported
    MINOR = "minor"  # up to 5 minutes
    MODERATE = "moderate"  # more than 5
    SEVERE = "severe"  # more than 15


@dataclass
class StopProgress:
    """Derived state of one stop at a reference time."""
    index: int
    station: str
    code: str
    departed: bool
    arrived: bool
    marker: StationMarker
    diff_min: Optional[float] = None
    delay: DelaySeverity = DelaySeverity.NONE


@dataclass
class TrainTimeline:
    """Complete timeline for a selected train."""
    train_id: str
    train: Train
    status: TrainStatus
    active_index: int
    stops: List[StopProgress] = field(default_factory=list)

    @property
    def current_stop(self) -> Optional[StopProgress]:
        if not self.stops:
            return None
        return self.stops[self.active_index]


ActiveTrain = Tuple[str, Train]
