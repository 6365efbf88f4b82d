from datetime import timedelta, timezone

import pytest

from skytrack.models import AircraftImage, Airline, ResolvedState, TrackingState, WeatherSnapshot
from skytrack.presentation import (
    airline_logo_url,
    arrival_countdown,
    boarding_status,
    delay_status,
    format_airport_time,
    leave_time,
    render_panel,
    route_progress_pct,
    share_text,
)
from skytrack.services import PositionResolver, TrackingSession


def _resolved(make_sample, t0, *, remaining, total=1000.0, speed=250.0, eta="13:00"):
    return ResolvedState(
        state=TrackingState.LIVE_TRACKED,
        position=make_sample(speed_mps=speed),
        is_estimated=False,
        total_route_km=total,
        distance_traveled_km=total - remaining,
        distance_remaining_km=remaining,
        eta_local_time=eta,
        effective_speed_mps=speed,
        resolved_at=t0,
    )


@pytest.mark.parametrize(
    "offset, expected",
    [
        (timedelta(minutes=20), "Delayed +20m"),
        (timedelta(minutes=-10), "Early 10m"),
        (timedelta(minutes=3), "On Time"),
        (timedelta(minutes=6, seconds=30), "Delayed +7m"),
        (timedelta(minutes=-6, seconds=-30), "Early 7m"),
        (None, "On Time"),
    ],
)
def test_delay_status(make_flight, offset, expected):
    flight = make_flight()
    if offset is not None:
        flight.arrival.estimated_time = flight.arrival.scheduled_time + offset

    assert delay_status(flight) == expected


@pytest.mark.parametrize(
    "minutes_before, expected",
    [
        (60, "Not Boarding Yet"),
        (45, "Boarding Soon"),
        (30, "Boarding Soon"),
        (15, "Boarding Now"),
        (5, "Final Call"),
        (0, "Departed"),
        (-30, "Departed"),
    ],
)
def test_boarding_status(make_flight, t0, minutes_before, expected):
    assert boarding_status(make_flight(), t0 - timedelta(minutes=minutes_before)) == expected


def test_leave_time(make_flight, t0):
    flight = make_flight()

    assert leave_time(flight, t0 - timedelta(hours=3), timezone.utc) == "10:30"
    assert leave_time(flight, t0 + timedelta(minutes=1), timezone.utc) == "departed"


def test_format_airport_time_uses_airport_zone(t0):
    assert format_airport_time(t0, "Asia/Tokyo") == "21:00"
    assert format_airport_time(t0, "Not/AZone", timezone.utc) == "12:00"
    assert format_airport_time(None, "Asia/Tokyo") == "--:--"


def test_progress_and_countdown(make_sample, t0):
    cruising = _resolved(make_sample, t0, remaining=900.0, total=1800.0)
    assert route_progress_pct(cruising) == pytest.approx(50.0)
    assert arrival_countdown(cruising) == "1h 0m"

    assert arrival_countdown(_resolved(make_sample, t0, remaining=12.0)) == "On Final Approach"
    assert arrival_countdown(_resolved(make_sample, t0, remaining=0.0, speed=0.0)) == "Landed"
    assert arrival_countdown(_resolved(make_sample, t0, remaining=0.0, speed=8.0)) == "Taxiing"
    assert (
        arrival_countdown(_resolved(make_sample, t0, remaining=500.0, speed=5.0, eta="--:--"))
        == "--"
    )
    assert arrival_countdown(None) == "--"


def test_share_text_and_logo(make_flight):
    flight = make_flight(code="BA117")
    flight.airline = Airline(iata="BA", name="British Airways")

    assert share_text(flight) == "Track BA117: AAA → BBB, arriving at 2024-05-01T14:00:00+00:00"
    assert airline_logo_url(flight) == "https://pics.avs.io/200/200/BA.png"
    assert airline_logo_url(make_flight()) is None


def test_render_panel_for_estimated_flight(make_flight, t0):
    session = TrackingSession()
    session.reset("TS100")
    session.flight = make_flight(registration="G-XWBA")
    now = t0 + timedelta(hours=1)
    session.apply(PositionResolver(display_tz=timezone.utc).resolve(session.flight, now=now))
    session.weather["arrival"] = WeatherSnapshot(
        latitude=0.0, longitude=10.0, as_of=now, temperature_c=27.4, condition="few clouds"
    )
    session.aircraft_image = AircraftImage(url="https://img.test/g-xwba.jpg")

    panel = render_panel(session, now, timezone.utc)

    assert "TS100 [ESTIMATED]" in panel
    assert "AAA 12:00  ->  BBB 14:00" in panel
    assert "Estimated position: real-time tracking unavailable" in panel
    assert "ETA 14:00" in panel
    assert "Arrival: 27°C few clouds" in panel
    assert "Aircraft photo: https://img.test/g-xwba.jpg" in panel
    assert "Leave for the airport" not in panel


def test_render_panel_without_position(make_flight, t0):
    session = TrackingSession()
    session.reset("TS100")
    session.flight = make_flight(icao24="abc123")

    panel = render_panel(session, t0 - timedelta(hours=3), timezone.utc)

    assert "[WAITING FOR SIGNAL]" in panel
    assert "Waiting for signal..." in panel
    assert "Leave for the airport by 10:30" in panel


def test_render_panel_error_and_idle_states(t0):
    session = TrackingSession()
    assert render_panel(session, t0) == "Ready to track. Enter a flight number."

    session.reset("XX1")
    assert render_panel(session, t0) == "Searching for XX1..."

    session.error = "Flight not found"
    assert render_panel(session, t0) == "XX1 error: Flight not found"
