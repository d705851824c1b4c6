"""Photographer ranking by travel distance and availability."""

import asyncio
import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from shoot_dashboard.adapters.geocoding_client import Geocoder
from shoot_dashboard.domain.auth import AuthSession
from shoot_dashboard.domain.photographers import (
    Coordinates,
    PhotographerCandidate,
    RankedPhotographer,
    RankingRequest,
    SortBy,
    TimeSlot,
)
from shoot_dashboard.domain.shoots import Location
from shoot_dashboard.services.cache import Cache

EARTH_RADIUS_MILES = 3958.8
DAY_START_HOUR = 8
DAY_END_HOUR = 20
SUMMARY_SLOT_LIMIT = 3

_logger = logging.getLogger(__name__)


class AvailabilitySource(Protocol):
    """Backend interface providing roster and availability for a booking."""

    async def list_photographers(
        self, session: AuthSession
    ) -> list[PhotographerCandidate]:
        """Return the photographer roster."""

    async def photographer_availability_for_booking(
        self, session: AuthSession, request: RankingRequest
    ) -> list[PhotographerCandidate]:
        """Return candidates with origin address and availability for a shoot."""


def haversine_miles(origin: Coordinates, destination: Coordinates) -> float:
    """Return the great-circle distance between two points in miles."""
    lat1 = math.radians(origin.lat)
    lat2 = math.radians(destination.lat)
    d_lat = lat2 - lat1
    d_lon = math.radians(destination.lon - origin.lon)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_MILES * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def filter_candidates(
    candidates: Iterable[PhotographerCandidate], search_query: str
) -> list[PhotographerCandidate]:
    """Keep candidates whose name, email, city or state contain the query."""
    query = search_query.strip().lower()
    if not query:
        return list(candidates)
    return [
        candidate
        for candidate in candidates
        if any(
            query in (value or "").lower()
            for value in (
                candidate.name,
                candidate.email,
                candidate.origin_address.city,
                candidate.origin_address.state,
            )
        )
    ]


def sort_candidates(
    candidates: Iterable[PhotographerCandidate], sort_by: SortBy
) -> list[PhotographerCandidate]:
    """Sort by distance with unknown distances last, or by name."""
    if sort_by == "name":
        return sorted(candidates, key=lambda c: c.name.casefold())
    return sorted(
        candidates,
        key=lambda c: (c.distance is None, c.distance if c.distance is not None else 0),
    )


def rank_photographers(
    candidates: Iterable[PhotographerCandidate],
    sort_by: SortBy = "distance",
    search_query: str = "",
) -> list[PhotographerCandidate]:
    """Filter candidates by the search query, then sort them."""
    return sort_candidates(filter_candidates(candidates, search_query), sort_by)


def time_to_minutes(value: str) -> int:
    """Convert an HH:MM string to minutes after midnight."""
    hours_raw, _, minutes_raw = value.partition(":")
    try:
        hours = int(hours_raw)
    except ValueError:
        return 0
    try:
        minutes = int(minutes_raw[:2]) if minutes_raw else 0
    except ValueError:
        minutes = 0
    return hours * 60 + minutes


def build_availability_segments(
    slots: Sequence[TimeSlot],
    start_hour: int = DAY_START_HOUR,
    end_hour: int = DAY_END_HOUR,
) -> tuple[bool, ...]:
    """Mark each hour of the working day free when any slot overlaps it."""
    spans = [
        (time_to_minutes(s.start_time), time_to_minutes(s.end_time)) for s in slots
    ]
    segments = []
    for hour in range(start_hour, end_hour):
        segment_start = hour * 60
        segment_end = segment_start + 60
        segments.append(
            any(
                slot_start < segment_end and slot_end > segment_start
                for slot_start, slot_end in spans
            )
        )
    return tuple(segments)


def to_12_hour(value: str) -> str:
    """Format an HH:MM string as a 12-hour clock time."""
    minutes = time_to_minutes(value)
    hours, minute = divmod(minutes, 60)
    suffix = "AM" if hours % 24 < 12 else "PM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def format_availability_summary(slots: Sequence[TimeSlot]) -> str:
    """Summarise the first few free slots for display."""
    return ", ".join(
        f"{to_12_hour(slot.start_time)}-{to_12_hour(slot.end_time)}"
        for slot in slots[:SUMMARY_SLOT_LIMIT]
    )


@dataclass
class PhotographerRankingService:
    """Fetches availability, measures travel distance and ranks photographers."""

    source: AvailabilitySource
    geocoder: Geocoder
    cache: Cache
    geocode_ttl_seconds: int = 86400
    _generations: dict[str, int] = field(default_factory=dict)
    _sequence: int = 0

    async def rank(
        self, session: AuthSession, request: RankingRequest
    ) -> list[RankedPhotographer] | None:
        """Rank candidates for a shoot, or return None once superseded."""
        self._sequence += 1
        generation = self._sequence
        self._generations[request.key] = generation

        candidates = await self._load_candidates(session, request)
        candidates = await self._with_distances(request.location, candidates)

        if self._generations.get(request.key) != generation:
            _logger.info("Discarding stale ranking for %s", request.key)
            return None
        del self._generations[request.key]

        ranked = rank_photographers(candidates, request.sort_by, request.search_query)
        return [
            RankedPhotographer(
                candidate=candidate,
                segments=build_availability_segments(candidate.net_available_slots),
                availability_summary=format_availability_summary(
                    candidate.net_available_slots
                ),
            )
            for candidate in ranked
        ]

    async def _load_candidates(
        self, session: AuthSession, request: RankingRequest
    ) -> list[PhotographerCandidate]:
        try:
            return await self.source.photographer_availability_for_booking(
                session, request
            )
        except Exception:
            _logger.exception(
                "Availability lookup failed for %s, falling back to roster",
                request.key,
            )
        roster = await self.source.list_photographers(session)
        if request.photographer_ids:
            wanted = set(request.photographer_ids)
            roster = [candidate for candidate in roster if candidate.id in wanted]
        return roster

    async def _with_distances(
        self, location: Location, candidates: list[PhotographerCandidate]
    ) -> list[PhotographerCandidate]:
        pending = [c for c in candidates if c.distance is None]
        if not pending or not location.is_locatable:
            return candidates
        shoot_coords = await self._geocode(location)
        if shoot_coords is None:
            return candidates

        async def measure(candidate: PhotographerCandidate) -> PhotographerCandidate:
            origin = candidate.origin_address
            if not origin.is_locatable:
                return candidate
            origin_coords = await self._geocode(origin)
            if origin_coords is None:
                return candidate
            distance = haversine_miles(shoot_coords, origin_coords)
            return candidate.with_distance(round(distance, 1))

        measured = await asyncio.gather(*(measure(c) for c in pending))
        by_id = {candidate.id: candidate for candidate in measured}
        return [by_id.get(candidate.id, candidate) for candidate in candidates]

    async def _geocode(self, location: Location) -> Coordinates | None:
        if location.lat is not None and location.lon is not None:
            return Coordinates(lat=location.lat, lon=location.lon)
        query = location.full_address()
        cache_key = f"geocode:{query.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Coordinates):
            return cached
        try:
            coords = await self.geocoder.geocode(query)
        except Exception as exc:
            _logger.warning("Geocoding failed for %r: %s", query, exc)
            return None
        if coords is not None:
            self.cache.set(cache_key, coords, ttl_seconds=self.geocode_ttl_seconds)
        return coords
