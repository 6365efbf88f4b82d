"""Read-only formatting of a tracking session for display."""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
import math
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from skytrack.models.flight import AirportLeg, FlightRecord
from skytrack.models.tracking import ETA_UNAVAILABLE, ResolvedState, TrackingState
from skytrack.models.weather import WeatherSnapshot
from skytrack.services.session import TrackingSession

LEAVE_FOR_AIRPORT_BUFFER = timedelta(minutes=90)
DELAY_TOLERANCE_MINUTES = 5
FINAL_APPROACH_KM = 20


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_time(moment: Optional[datetime], tz: tzinfo | None = None) -> str:
    if moment is None:
        return ETA_UNAVAILABLE
    return moment.astimezone(tz).strftime("%H:%M")


def format_airport_time(
    moment: Optional[datetime], tz_name: Optional[str], fallback_tz: tzinfo | None = None
) -> str:
    """``HH:MM`` in the airport's own zone, or the viewer's when the zone is unusable."""

    if moment is None or not tz_name:
        return ETA_UNAVAILABLE
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return format_time(moment, fallback_tz)
    return format_time(moment, zone)


def delay_status(flight: FlightRecord) -> str:
    scheduled = flight.arrival.scheduled_time
    estimated = flight.arrival.estimated_time
    if scheduled is None or estimated is None:
        return "On Time"

    diff_minutes = (estimated - scheduled).total_seconds() / 60
    if diff_minutes > DELAY_TOLERANCE_MINUTES:
        return f"Delayed +{_round_half_up(diff_minutes)}m"
    if diff_minutes < -DELAY_TOLERANCE_MINUTES:
        return f"Early {_round_half_up(abs(diff_minutes))}m"
    return "On Time"


def boarding_status(flight: FlightRecord, now: datetime) -> str:
    scheduled = flight.departure.scheduled_time
    if scheduled is None:
        return "Unknown"

    minutes = math.floor((scheduled - now).total_seconds() / 60)
    if minutes > 45:
        return "Not Boarding Yet"
    if minutes > 25:
        return "Boarding Soon"
    if minutes > 10:
        return "Boarding Now"
    if minutes > 0:
        return "Final Call"
    return "Departed"


def leave_time(flight: FlightRecord, now: datetime, tz: tzinfo | None = None) -> Optional[str]:
    """When to leave for the airport; ``"departed"`` once the flight has left."""

    scheduled = flight.departure.scheduled_time
    if scheduled is None:
        return None
    if now > scheduled:
        return "departed"
    return format_time(scheduled - LEAVE_FOR_AIRPORT_BUFFER, tz)


def route_progress_pct(resolved: Optional[ResolvedState]) -> float:
    if resolved is None or not resolved.total_route_km:
        return 0.0
    traveled = resolved.distance_traveled_km or 0.0
    return min(100.0, max(0.0, traveled / resolved.total_route_km * 100))


def arrival_countdown(resolved: Optional[ResolvedState]) -> str:
    if resolved is None or resolved.distance_remaining_km is None:
        return "--"

    remaining = resolved.distance_remaining_km
    speed = resolved.effective_speed_mps or 0.0
    progress = route_progress_pct(resolved)

    if 0 < remaining < FINAL_APPROACH_KM:
        return "On Final Approach"
    if speed < 1 and progress > 90:
        return "Landed"
    if speed < 150 and progress > 90:
        return "Taxiing"
    if resolved.eta_local_time == ETA_UNAVAILABLE or speed <= 0:
        return "--"

    speed_kmh = speed * 3.6
    if speed_kmh < 50:
        return "--"
    total_hours = remaining / speed_kmh
    hours = math.floor(total_hours)
    minutes = _round_half_up((total_hours - hours) * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0
    return f"{hours}h {minutes}m"


def share_text(flight: FlightRecord) -> str:
    arrival_time = flight.arrival_time
    return "Track {code}: {dep} → {arr}, arriving at {when}".format(
        code=flight.flight_code or "Unknown",
        dep=flight.departure.iata_code or "Unknown",
        arr=flight.arrival.iata_code or "Unknown",
        when=arrival_time.isoformat() if arrival_time else "Unknown",
    )


def airline_logo_url(flight: FlightRecord) -> Optional[str]:
    if flight.airline is None or not flight.airline.iata:
        return None
    return f"https://pics.avs.io/200/200/{flight.airline.iata}.png"


def _leg_line(leg: AirportLeg, moment: Optional[datetime], tz: tzinfo | None) -> str:
    if leg.timezone:
        when = format_airport_time(moment, leg.timezone, tz)
    else:
        when = format_time(moment, tz)
    parts = [leg.iata_code or "???", when]
    extras = []
    if leg.terminal:
        extras.append(f"Terminal {leg.terminal}")
    if leg.gate:
        extras.append(f"Gate {leg.gate}")
    if extras:
        parts.append(f"({', '.join(extras)})")
    return " ".join(parts)


def _weather_line(side: str, snapshot: WeatherSnapshot) -> str:
    temperature = (
        f"{snapshot.temperature_c:.0f}°C" if snapshot.temperature_c is not None else "--"
    )
    return f"{side}: {temperature} {snapshot.condition or ''}".rstrip()


def render_panel(
    session: TrackingSession, now: datetime, tz: tzinfo | None = None
) -> str:
    """Multi-line text summary of the session."""

    if session.error:
        return f"{session.flight_code or ''} error: {session.error}".strip()
    flight = session.flight
    if flight is None:
        if session.flight_code:
            return f"Searching for {session.flight_code}..."
        return "Ready to track. Enter a flight number."

    resolved = session.resolved
    badge = {
        TrackingState.LIVE_TRACKED: "LIVE",
        TrackingState.ESTIMATED: "ESTIMATED",
        TrackingState.NO_DATA: "WAITING FOR SIGNAL",
    }[session.state]
    airline = flight.airline.name if flight.airline and flight.airline.name else ""

    lines = [
        " ".join(part for part in (flight.flight_code, airline, f"[{badge}]") if part),
        "{dep}  ->  {arr}".format(
            dep=_leg_line(flight.departure, flight.departure_time, tz),
            arr=_leg_line(flight.arrival, flight.arrival_time, tz),
        ),
        "Status: {status} | {delay} | {boarding}".format(
            status=flight.flight_status.value,
            delay=delay_status(flight),
            boarding=boarding_status(flight, now),
        ),
    ]

    leave = leave_time(flight, now, tz)
    if leave and leave != "departed":
        lines.append(f"Leave for the airport by {leave}")

    if resolved is not None:
        position = resolved.position
        heading = f"{position.heading:.0f}°" if position.heading is not None else "--"
        lines.append(
            "Position: {lat:.4f}, {lon:.4f} | Alt {alt:,.0f} ft | "
            "Speed {speed:.0f} km/h | Heading {heading}".format(
                lat=position.latitude,
                lon=position.longitude,
                alt=position.altitude_ft,
                speed=position.ground_speed_kmh,
                heading=heading,
            )
        )
        if resolved.has_route_metrics:
            lines.append(
                "Route: {done:.0f} km flown, {left:.0f} km to go ({pct:.0f}%) | "
                "ETA {eta} | {countdown}".format(
                    done=resolved.distance_traveled_km,
                    left=resolved.distance_remaining_km,
                    pct=route_progress_pct(resolved),
                    eta=resolved.eta_local_time,
                    countdown=arrival_countdown(resolved),
                )
            )
        if resolved.is_estimated:
            lines.append("Estimated position: real-time tracking unavailable")
    else:
        lines.append("Waiting for signal...")

    for side in ("departure", "arrival"):
        snapshot = session.weather.get(side)
        if snapshot is not None:
            lines.append(_weather_line(side.capitalize(), snapshot))
    if session.aircraft_image is not None:
        lines.append(f"Aircraft photo: {session.aircraft_image.url}")
    logo = airline_logo_url(flight)
    if logo:
        lines.append(f"Airline logo: {logo}")
    lines.append(f"Share: {share_text(flight)}")

    return "\n".join(lines)


__all__ = [
    "airline_logo_url",
    "arrival_countdown",
    "boarding_status",
    "delay_status",
    "format_airport_time",
    "format_time",
    "leave_time",
    "render_panel",
    "route_progress_pct",
    "share_text",
]
