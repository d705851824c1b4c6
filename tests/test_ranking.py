"""Tests for photographer ranking."""

import asyncio
from dataclasses import dataclass
from datetime import date

import pytest

from shoot_dashboard.domain.photographers import (
    Coordinates,
    PhotographerCandidate,
    RankedPhotographer,
    RankingRequest,
    TimeSlot,
)
from shoot_dashboard.domain.shoots import Location
from shoot_dashboard.services.cache import InMemoryCache
from shoot_dashboard.services.ranking import (
    PhotographerRankingService,
    build_availability_segments,
    filter_candidates,
    format_availability_summary,
    haversine_miles,
    rank_photographers,
    sort_candidates,
    to_12_hour,
)
from tests.conftest import SESSION, FakeGeocoder, InMemoryDashboardBackend

SHOOT_LOCATION = Location(address="1 Main St", city="Austin", state="TX", zip="78701")
SHOOT_COORDS = Coordinates(lat=30.2672, lon=-97.7431)
OAK_STREET = Location(address="10 Oak St", city="Austin", state="TX", zip="78702")
OAK_COORDS = Coordinates(lat=30.5, lon=-97.7431)


def _candidate(
    candidate_id: str, name: str = "", distance: float | None = None, **kwargs
) -> PhotographerCandidate:
    return PhotographerCandidate(
        id=candidate_id, name=name or candidate_id, distance=distance, **kwargs
    )


def _request(key: str = "shoot:1", **kwargs) -> RankingRequest:
    return RankingRequest(
        key=key, shoot_date=date(2026, 5, 4), location=SHOOT_LOCATION, **kwargs
    )


def test_haversine_between_new_york_and_los_angeles() -> None:
    new_york = Coordinates(lat=40.7128, lon=-74.0060)
    los_angeles = Coordinates(lat=34.0522, lon=-118.2437)

    assert haversine_miles(new_york, los_angeles) == pytest.approx(2445, abs=10)
    assert haversine_miles(new_york, new_york) == 0


def test_unknown_distances_sort_last_and_keep_order() -> None:
    candidates = [
        _candidate("a"),
        _candidate("b", distance=5.0),
        _candidate("c", distance=2.5),
        _candidate("d"),
    ]

    ranked = sort_candidates(candidates, "distance")

    assert [c.id for c in ranked] == ["c", "b", "a", "d"]


def test_name_sort_is_case_insensitive() -> None:
    candidates = [
        _candidate("1", "bob"),
        _candidate("2", "Alice"),
        _candidate("3", "carol"),
    ]

    ranked = sort_candidates(candidates, "name")

    assert [c.name for c in ranked] == ["Alice", "bob", "carol"]


def test_search_matches_name_email_city_and_state() -> None:
    candidates = [
        _candidate("1", "Dana Reyes", email="dana@example.com"),
        _candidate("2", "Sam Lee", origin_address=OAK_STREET),
        _candidate("3", "Kim Park", origin_address=Location(state="NM")),
    ]

    assert [c.id for c in filter_candidates(candidates, "EXAMPLE.com")] == ["1"]
    assert [c.id for c in filter_candidates(candidates, "austin")] == ["2"]
    assert [c.id for c in filter_candidates(candidates, "nm")] == ["3"]
    assert len(filter_candidates(candidates, "   ")) == 3


def test_rank_filters_before_sorting() -> None:
    candidates = [
        _candidate("1", "Dana", distance=9.0),
        _candidate("2", "Dave", distance=1.0),
        _candidate("3", "Kim", distance=0.5),
    ]

    ranked = rank_photographers(candidates, "distance", "da")

    assert [c.id for c in ranked] == ["2", "1"]


def test_segments_for_a_morning_slot() -> None:
    segments = build_availability_segments([TimeSlot("09:00", "11:00")])

    assert len(segments) == 12
    assert segments == (False, True, True) + (False,) * 9


def test_segments_mark_partial_overlap_free() -> None:
    segments = build_availability_segments([TimeSlot("08:30", "09:15")])

    assert segments[:3] == (True, True, False)


def test_segments_without_slots_are_all_busy() -> None:
    assert not any(build_availability_segments([]))


def test_availability_summary_lists_first_three_slots() -> None:
    slots = [
        TimeSlot("09:00", "11:00"),
        TimeSlot("13:00", "14:30"),
        TimeSlot("15:00", "16:00"),
        TimeSlot("17:00", "18:00"),
    ]

    assert format_availability_summary(slots) == (
        "9:00 AM-11:00 AM, 1:00 PM-2:30 PM, 3:00 PM-4:00 PM"
    )


def test_twelve_hour_clock_edges() -> None:
    assert to_12_hour("00:15") == "12:15 AM"
    assert to_12_hour("12:00") == "12:00 PM"


def _service(
    backend: InMemoryDashboardBackend, geocoder: FakeGeocoder
) -> PhotographerRankingService:
    return PhotographerRankingService(
        source=backend, geocoder=geocoder, cache=InMemoryCache()
    )


def test_rank_measures_distance_and_sorts_unknown_last(
    backend: InMemoryDashboardBackend, geocoder: FakeGeocoder
) -> None:
    geocoder.coordinates = {
        SHOOT_LOCATION.full_address(): SHOOT_COORDS,
        OAK_STREET.full_address(): OAK_COORDS,
    }
    backend.availability = [
        _candidate("far", origin_address=OAK_STREET),
        _candidate("unknown", origin_address=Location(city="Austin")),
        _candidate(
            "near",
            distance=3.2,
            net_available_slots=(TimeSlot("09:00", "11:00"),),
        ),
    ]

    ranked = asyncio.run(_service(backend, geocoder).rank(SESSION, _request()))

    assert ranked is not None
    assert [r.candidate.id for r in ranked] == ["near", "far", "unknown"]
    expected = round(haversine_miles(SHOOT_COORDS, OAK_COORDS), 1)
    assert ranked[1].candidate.distance == expected
    assert ranked[0].segments[1] is True
    assert ranked[0].availability_summary == "9:00 AM-11:00 AM"


def test_geocode_failure_leaves_distance_unknown(
    backend: InMemoryDashboardBackend, geocoder: FakeGeocoder
) -> None:
    broken = Location(address="99 Elm St", city="Austin", state="TX")
    geocoder.coordinates = {
        SHOOT_LOCATION.full_address(): SHOOT_COORDS,
        OAK_STREET.full_address(): OAK_COORDS,
    }
    geocoder.failing = {broken.full_address()}
    backend.availability = [
        _candidate("broken", origin_address=broken),
        _candidate("ok", origin_address=OAK_STREET),
    ]

    ranked = asyncio.run(_service(backend, geocoder).rank(SESSION, _request()))

    assert ranked is not None
    by_id = {r.candidate.id: r.candidate for r in ranked}
    assert by_id["broken"].distance is None
    assert by_id["ok"].distance is not None


def test_availability_failure_falls_back_to_roster(
    backend: InMemoryDashboardBackend, geocoder: FakeGeocoder
) -> None:
    backend.availability_error = True
    backend.roster = [_candidate("1", "Ana"), _candidate("2", "Ben")]

    ranked = asyncio.run(
        _service(backend, geocoder).rank(
            SESSION, _request(photographer_ids=("2",), sort_by="name")
        )
    )

    assert ranked is not None
    assert [r.candidate.id for r in ranked] == ["2"]
    assert ranked[0].segments == (False,) * 12


def test_geocodes_are_cached_between_requests(
    backend: InMemoryDashboardBackend, geocoder: FakeGeocoder
) -> None:
    geocoder.coordinates = {
        SHOOT_LOCATION.full_address(): SHOOT_COORDS,
        OAK_STREET.full_address(): OAK_COORDS,
    }
    backend.availability = [_candidate("far", origin_address=OAK_STREET)]
    service = _service(backend, geocoder)

    asyncio.run(service.rank(SESSION, _request()))
    asyncio.run(service.rank(SESSION, _request()))

    assert len(geocoder.calls) == 2


@dataclass
class _GatedGeocoder(FakeGeocoder):
    """Blocks its first lookup until released."""

    gate: asyncio.Event | None = None

    async def geocode(self, address: str) -> Coordinates | None:
        self.calls.append(address)
        if len(self.calls) == 1 and self.gate is not None:
            await self.gate.wait()
        return self.coordinates.get(address)


def test_superseded_request_result_is_discarded(
    backend: InMemoryDashboardBackend,
) -> None:
    origin = Location(
        address="5 Pine St", city="Austin", state="TX", lat=30.3, lon=-97.7
    )
    backend.availability = [_candidate("1", origin_address=origin)]
    geocoder = _GatedGeocoder(
        coordinates={SHOOT_LOCATION.full_address(): SHOOT_COORDS}
    )
    service = _service(backend, geocoder)

    async def scenario() -> tuple[list[RankedPhotographer] | None, ...]:
        geocoder.gate = asyncio.Event()
        first = asyncio.create_task(service.rank(SESSION, _request()))
        await asyncio.sleep(0)
        second = await service.rank(SESSION, _request(sort_by="name"))
        geocoder.gate.set()
        return await first, second

    first_result, second_result = asyncio.run(scenario())

    assert first_result is None
    assert second_result is not None
    assert second_result[0].candidate.distance is not None
    assert service._generations == {}


def test_origin_with_coordinates_only_is_measured(
    backend: InMemoryDashboardBackend, geocoder: FakeGeocoder
) -> None:
    geocoder.coordinates = {SHOOT_LOCATION.full_address(): SHOOT_COORDS}
    pinned = Location(lat=OAK_COORDS.lat, lon=OAK_COORDS.lon)
    backend.availability = [_candidate("pinned", origin_address=pinned)]

    ranked = asyncio.run(_service(backend, geocoder).rank(SESSION, _request()))

    assert ranked is not None
    expected = round(haversine_miles(SHOOT_COORDS, OAK_COORDS), 1)
    assert ranked[0].candidate.distance == expected
    assert geocoder.calls == [SHOOT_LOCATION.full_address()]


def test_finished_requests_release_their_key(
    backend: InMemoryDashboardBackend, geocoder: FakeGeocoder
) -> None:
    service = _service(backend, geocoder)

    asyncio.run(service.rank(SESSION, _request("shoot:1")))
    asyncio.run(service.rank(SESSION, _request("shoot:2")))

    assert service._generations == {}
