"""Domain models for photographer assignment."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Literal

from shoot_dashboard.domain.shoots import Location

DistanceOrigin = Literal["home", "previous_shoot"]
SortBy = Literal["distance", "name"]


@dataclass(frozen=True)
class Coordinates:
    """Latitude and longitude in decimal degrees."""

    lat: float
    lon: float


@dataclass(frozen=True)
class TimeSlot:
    """An availability window on the shoot date, as HH:MM strings."""

    start_time: str
    end_time: str


@dataclass(frozen=True)
class PhotographerCandidate:
    """A photographer considered for a shoot, recomputed per dialog session."""

    id: str
    name: str
    email: str = ""
    avatar: str | None = None
    origin_address: Location = Location()
    distance_from: DistanceOrigin = "home"
    previous_shoot_id: str | None = None
    distance: float | None = None
    availability_slots: tuple[TimeSlot, ...] = ()
    booked_slots: tuple[TimeSlot, ...] = ()
    net_available_slots: tuple[TimeSlot, ...] = ()
    is_available_at_time: bool = False
    shoots_count_today: int = 0

    def with_distance(self, distance: float | None) -> "PhotographerCandidate":
        """Return a copy with the distance replaced."""
        return replace(self, distance=distance)


@dataclass(frozen=True)
class RankingRequest:
    """Inputs for ranking photographers against a shoot."""

    key: str
    shoot_date: date
    location: Location
    time: str | None = None
    photographer_ids: tuple[str, ...] = ()
    sort_by: SortBy = "distance"
    search_query: str = ""


@dataclass(frozen=True)
class RankedPhotographer:
    """A ranked candidate with its free/busy strip."""

    candidate: PhotographerCandidate
    segments: tuple[bool, ...]
    availability_summary: str
