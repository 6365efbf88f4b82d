import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from skytrack.models import AircraftImage, TrackingState, WeatherSnapshot
from skytrack.providers import InputError, NotFoundError, UpstreamError
from skytrack.services import (
    FlightTracker,
    PositionResolver,
    SchedulerMode,
    TrackingScheduler,
    push_recent,
)

AS_OF = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class ManualScheduler(TrackingScheduler):
    """Scheduler whose timer never fires; tests drive ticks with ``refresh``."""

    async def _run(self, interval, tick, generation):
        return None


class FakeScheduleProvider:
    def __init__(self, records=None, gates=None):
        self.records = records or {}
        self.gates = gates or {}
        self.calls: list[str] = []

    async def lookup(self, code):
        self.calls.append(code)
        gate = self.gates.get(code)
        if gate is not None:
            await gate.wait()
        result = self.records[code]
        if isinstance(result, Exception):
            raise result
        return result


class FakeLiveProvider:
    def __init__(self, samples=None, error=None, gate=None):
        self.samples = list(samples or [])
        self.error = error
        self.gate = gate
        self.calls = 0

    async def get_position(self, icao24):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.samples.pop(0) if self.samples else None


class FakeWeatherProvider:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls: list[tuple[float, float]] = []

    async def get_weather(self, lat, lon):
        self.calls.append((lat, lon))
        if self.fail:
            raise UpstreamError("weather down")
        return WeatherSnapshot(
            latitude=lat, longitude=lon, as_of=AS_OF, temperature_c=18.0, condition="clear sky"
        )


class FakeImageProvider:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls: list[str] = []

    async def get_image(self, registration):
        self.calls.append(registration)
        if self.fail:
            raise UpstreamError("images down")
        return AircraftImage(url=f"https://img.example/{registration}.jpg")


class FakeRecentSearches:
    def __init__(self):
        self.items: list[str] = []

    def add(self, code):
        self.items = push_recent(self.items, code)
        return self.items


@pytest.fixture
def clock(t0):
    state = {"now": t0 + timedelta(hours=1)}

    def _now():
        return state["now"]

    _now.state = state
    return _now


def build_tracker(clock, *, records, live=None, weather=None, images=None, gates=None):
    return FlightTracker(
        schedule_provider=FakeScheduleProvider(records, gates),
        live_provider=live or FakeLiveProvider(),
        weather_provider=weather or FakeWeatherProvider(),
        image_provider=images or FakeImageProvider(),
        resolver=PositionResolver(),
        scheduler=ManualScheduler(live_interval=60, animation_interval=60),
        recent_searches=FakeRecentSearches(),
        clock=clock,
    )


@pytest.mark.anyio
async def test_search_with_icao24_starts_live_polling(make_flight, make_sample, clock):
    live = FakeLiveProvider(samples=[make_sample()])
    tracker = build_tracker(
        clock, records={"BA117": make_flight(icao24="abc123", code="BA117")}, live=live
    )

    session = await tracker.search(" ba117 ")

    assert tracker.scheduler.mode is SchedulerMode.LIVE
    assert tracker.scheduler.key == "abc123"
    assert tracker.recent_searches.items == ["BA117"]

    await tracker.refresh()

    assert session.state is TrackingState.LIVE_TRACKED
    assert session.resolved.is_estimated is False
    assert session.trail == [(0.0, 5.0)]
    assert live.calls == 1
    tracker.close()


@pytest.mark.anyio
async def test_empty_live_lookup_keeps_previous_position(make_flight, make_sample, clock):
    live = FakeLiveProvider(samples=[make_sample(), None])
    tracker = build_tracker(clock, records={"BA117": make_flight(icao24="abc123")}, live=live)

    session = await tracker.search("BA117")
    await tracker.refresh()
    first = session.resolved
    await tracker.refresh()

    assert live.calls == 2
    assert session.resolved is first
    assert len(session.trail) == 1


@pytest.mark.anyio
async def test_live_lookup_failure_keeps_previous_position(make_flight, make_sample, clock):
    live = FakeLiveProvider(samples=[make_sample()])
    tracker = build_tracker(clock, records={"BA117": make_flight(icao24="abc123")}, live=live)

    session = await tracker.search("BA117")
    await tracker.refresh()
    first = session.resolved
    live.error = UpstreamError("Failed to fetch location data")
    await tracker.refresh()

    assert session.resolved is first
    assert session.error is None


@pytest.mark.anyio
async def test_icao24_without_samples_never_falls_back_to_estimate(make_flight, clock):
    tracker = build_tracker(clock, records={"BA117": make_flight(icao24="abc123")})

    session = await tracker.search("BA117")
    await tracker.refresh()

    assert session.state is TrackingState.NO_DATA
    assert tracker.scheduler.mode is SchedulerMode.LIVE


@pytest.mark.anyio
async def test_schedule_only_flight_is_animated(make_flight, clock):
    tracker = build_tracker(clock, records={"TS100": make_flight()})

    session = await tracker.search("TS100")
    assert tracker.scheduler.mode is SchedulerMode.ESTIMATION

    await tracker.refresh()
    assert session.state is TrackingState.ESTIMATED
    assert session.resolved.position.longitude == pytest.approx(5.0)

    clock.state["now"] += timedelta(minutes=30)
    await tracker.refresh()
    assert session.resolved.position.longitude == pytest.approx(7.5)
    assert len(session.trail) == 2


@pytest.mark.anyio
async def test_live_hint_is_used_once(make_flight, make_sample, clock):
    flight = make_flight(live_hint=make_sample(lon=3.0))
    tracker = build_tracker(clock, records={"TS100": flight})

    session = await tracker.search("TS100")

    assert session.state is TrackingState.LIVE_TRACKED
    assert session.resolved.position.longitude == 3.0
    assert tracker.scheduler.mode is SchedulerMode.IDLE


@pytest.mark.anyio
async def test_flight_without_any_position_source_waits(make_flight, clock):
    tracker = build_tracker(clock, records={"TS100": make_flight(dep=None, arr=None)})

    session = await tracker.search("TS100")

    assert session.state is TrackingState.NO_DATA
    assert session.error is None
    assert tracker.scheduler.mode is SchedulerMode.IDLE


@pytest.mark.anyio
async def test_failed_search_records_error(clock):
    tracker = build_tracker(clock, records={"XX999": NotFoundError("Flight not found")})

    session = await tracker.search("XX999")

    assert session.error == "Flight not found"
    assert session.flight is None
    assert tracker.recent_searches.items == []
    assert tracker.scheduler.mode is SchedulerMode.IDLE


@pytest.mark.anyio
async def test_search_requires_a_code(clock):
    tracker = build_tracker(clock, records={})

    with pytest.raises(InputError):
        await tracker.search("   ")


@pytest.mark.anyio
async def test_enrichment_fetches_weather_and_photo(make_flight, clock):
    weather = FakeWeatherProvider()
    images = FakeImageProvider()
    tracker = build_tracker(
        clock,
        records={"TS100": make_flight(registration="G-XWBA")},
        weather=weather,
        images=images,
    )

    session = await tracker.search("TS100")

    assert sorted(weather.calls) == [(0.0, 0.0), (0.0, 10.0)]
    assert session.weather["departure"].longitude == 0.0
    assert session.weather["arrival"].longitude == 10.0
    assert session.aircraft_image.url == "https://img.example/G-XWBA.jpg"


@pytest.mark.anyio
async def test_enrichment_failures_do_not_block_tracking(make_flight, clock):
    tracker = build_tracker(
        clock,
        records={"TS100": make_flight(registration="G-XWBA")},
        weather=FakeWeatherProvider(fail=True),
        images=FakeImageProvider(fail=True),
    )

    session = await tracker.search("TS100")
    await tracker.refresh()

    assert session.error is None
    assert session.weather == {}
    assert session.aircraft_image is None
    assert session.state is TrackingState.ESTIMATED


@pytest.mark.anyio
async def test_superseded_search_result_is_discarded(make_flight, clock):
    gate = asyncio.Event()
    tracker = build_tracker(
        clock,
        records={
            "OLD1": make_flight(code="OLD1", icao24="aaaaaa"),
            "NEW2": make_flight(code="NEW2"),
        },
        gates={"OLD1": gate},
    )

    pending = asyncio.create_task(tracker.search("OLD1"))
    await asyncio.sleep(0)
    await tracker.search("NEW2")
    gate.set()
    await pending

    assert tracker.session.flight_code == "NEW2"
    assert tracker.session.flight.flight_code == "NEW2"
    assert tracker.scheduler.mode is SchedulerMode.ESTIMATION
    assert tracker.recent_searches.items == ["NEW2"]


@pytest.mark.anyio
async def test_stale_live_response_is_discarded(make_flight, make_sample, clock):
    gate = asyncio.Event()
    live = FakeLiveProvider(samples=[make_sample()], gate=gate)
    tracker = build_tracker(
        clock,
        records={
            "BA117": make_flight(code="BA117", icao24="abc123"),
            "LH400": make_flight(code="LH400", dep=None, arr=None),
        },
        live=live,
    )

    await tracker.search("BA117")
    in_flight = asyncio.create_task(tracker.refresh())
    await asyncio.sleep(0)
    await tracker.search("LH400")
    gate.set()
    await in_flight

    assert live.calls == 1
    assert tracker.session.flight_code == "LH400"
    assert tracker.session.resolved is None
    assert tracker.session.trail == []


@pytest.mark.anyio
async def test_listeners_see_updates(make_flight, clock):
    tracker = build_tracker(clock, records={"TS100": make_flight()})
    seen: list[str] = []
    tracker.subscribe(lambda session: seen.append(session.state.value))

    await tracker.search("TS100")
    await tracker.refresh()

    assert seen[0] == "NO_DATA"
    assert seen[-1] == "ESTIMATED"


@pytest.mark.anyio
async def test_timer_drives_estimation_ticks(make_flight, clock):
    tracker = FlightTracker(
        schedule_provider=FakeScheduleProvider({"TS100": make_flight()}),
        live_provider=FakeLiveProvider(),
        weather_provider=FakeWeatherProvider(),
        image_provider=FakeImageProvider(),
        scheduler=TrackingScheduler(live_interval=0.01, animation_interval=0.01),
        recent_searches=FakeRecentSearches(),
        clock=clock,
    )

    session = await tracker.search("TS100")
    await asyncio.sleep(0.05)
    tracker.close()
    await tracker.scheduler.drain()

    assert session.state is TrackingState.ESTIMATED
    assert len(session.trail) >= 2
