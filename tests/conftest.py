from datetime import datetime, timedelta, timezone

import pytest

from skytrack.models import AircraftInfo, AirportLeg, FlightRecord, FlightStatus, PositionSample

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def make_flight():
    """Two-hour flight from (0, 0) to (0, 10) departing at T0."""

    def _make(
        status: str = "active",
        dep: tuple[float, float] | None = (0.0, 0.0),
        arr: tuple[float, float] | None = (0.0, 10.0),
        icao24: str | None = None,
        registration: str | None = None,
        live_hint: PositionSample | None = None,
        code: str = "TS100",
        duration: timedelta = timedelta(hours=2),
    ) -> FlightRecord:
        return FlightRecord(
            flight_code=code,
            departure=AirportLeg(
                iata_code="AAA",
                scheduled_time=T0,
                latitude=dep[0] if dep else None,
                longitude=dep[1] if dep else None,
            ),
            arrival=AirportLeg(
                iata_code="BBB",
                scheduled_time=T0 + duration,
                latitude=arr[0] if arr else None,
                longitude=arr[1] if arr else None,
            ),
            aircraft=AircraftInfo(icao24_hex=icao24, registration=registration),
            flight_status=FlightStatus.parse(status),
            live_hint=live_hint,
        )

    return _make


@pytest.fixture
def make_sample():
    def _make(
        lat: float = 0.0,
        lon: float = 5.0,
        altitude_ft: float = 36000.0,
        speed_mps: float = 250.0,
        heading: float | None = 90.0,
    ) -> PositionSample:
        return PositionSample(
            latitude=lat,
            longitude=lon,
            altitude_ft=altitude_ft,
            ground_speed_mps=speed_mps,
            heading=heading,
            on_ground=False,
            timestamp=T0,
        )

    return _make


@pytest.fixture
def anyio_backend() -> str:
    # The code under test is built on asyncio primitives.
    return "asyncio"
