"""Decide what position to show for the tracked flight.

Rules, evaluated once per tick:

1. An ICAO24 address is known and the live lookup returned a sample: use it.
2. No address, but the schedule carried a provider live hint: use it once.
3. Both airports have coordinates and the schedule has times: interpolate.
4. Otherwise there is nothing to show.

Schedule interpolation runs along the straight lat/lon chord between the
airports, not the great circle, so long or high-latitude routes are drawn
off the true track.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from enum import Enum
import logging
import math
from typing import Optional

from skytrack.geo import distance_km, initial_bearing_deg, interpolate
from skytrack.models.flight import FlightRecord
from skytrack.models.tracking import (
    ETA_UNAVAILABLE,
    PositionSample,
    ResolvedState,
    TrackingState,
)

logger = logging.getLogger("skytrack.resolver")

# Placeholders for estimated positions; these are not measurements
CRUISE_ALTITUDE_FT = 35000.0
CRUISE_SPEED_KMH = 800.0
CRUISE_SPEED_MPS = CRUISE_SPEED_KMH / 3.6

ACTIVE_PROGRESS_CAP = 0.95
MIN_ETA_SPEED_KMH = 50.0


class FlightPhase(str, Enum):
    AT_GATE = "at_gate"
    IN_FLIGHT = "in_flight"
    ARRIVED = "arrived"


@dataclass
class ScheduleEstimate:
    """Interpolated position and the phase that produced it."""

    sample: PositionSample
    phase: FlightPhase
    progress: float


@dataclass
class RouteMetrics:
    total_route_km: float
    distance_traveled_km: float
    distance_remaining_km: float


def format_clock(moment: datetime, tz: tzinfo | None = None) -> str:
    """Render ``HH:MM`` in ``tz``, or in the system local zone when ``tz`` is None."""

    return moment.astimezone(tz).strftime("%H:%M")


def _stationary(lat: float, lon: float, now: datetime) -> PositionSample:
    return PositionSample(
        latitude=lat,
        longitude=lon,
        altitude_ft=0.0,
        ground_speed_mps=0.0,
        heading=0.0,
        on_ground=True,
        timestamp=now,
    )


def estimate_position(flight: FlightRecord, now: datetime) -> Optional[ScheduleEstimate]:
    """Place the aircraft on its route from the schedule alone.

    Returns None when either airport lacks coordinates, a schedule time is
    missing, or the arrival is not after the departure.
    """

    if not flight.has_route_coordinates:
        return None
    dep_time = flight.departure_time
    arr_time = flight.arrival_time
    if dep_time is None or arr_time is None:
        return None

    duration = (arr_time - dep_time).total_seconds()
    if duration <= 0:
        logger.debug(
            "Cannot estimate %s: arrival %s is not after departure %s",
            flight.flight_code,
            arr_time,
            dep_time,
        )
        return None

    dep_lat, dep_lon = flight.departure.latitude, flight.departure.longitude
    arr_lat, arr_lon = flight.arrival.latitude, flight.arrival.longitude
    status = flight.flight_status

    if now < dep_time:
        return ScheduleEstimate(
            sample=_stationary(dep_lat, dep_lon, now),
            phase=FlightPhase.AT_GATE,
            progress=0.0,
        )

    if status.has_landed or (now > arr_time and not status.is_still_active):
        return ScheduleEstimate(
            sample=_stationary(arr_lat, arr_lon, now),
            phase=FlightPhase.ARRIVED,
            progress=1.0,
        )

    progress = (now - dep_time).total_seconds() / duration
    progress = min(max(progress, 0.0), 1.0)
    if status.is_still_active and progress > ACTIVE_PROGRESS_CAP:
        # Real arrival unknown; keep the marker short of the destination
        progress = ACTIVE_PROGRESS_CAP

    lat, lon = interpolate(dep_lat, dep_lon, arr_lat, arr_lon, progress)
    heading = initial_bearing_deg(lat, lon, arr_lat, arr_lon)
    if math.isnan(heading):
        heading = initial_bearing_deg(dep_lat, dep_lon, arr_lat, arr_lon)
    if math.isnan(heading):
        heading = 0.0

    return ScheduleEstimate(
        sample=PositionSample(
            latitude=lat,
            longitude=lon,
            altitude_ft=CRUISE_ALTITUDE_FT,
            ground_speed_mps=CRUISE_SPEED_MPS,
            heading=heading,
            on_ground=False,
            timestamp=now,
        ),
        phase=FlightPhase.IN_FLIGHT,
        progress=progress,
    )


def route_metrics(flight: FlightRecord, position: PositionSample) -> Optional[RouteMetrics]:
    if not flight.has_route_coordinates:
        return None
    origin = (flight.departure.latitude, flight.departure.longitude)
    destination = (flight.arrival.latitude, flight.arrival.longitude)
    current = (position.latitude, position.longitude)
    return RouteMetrics(
        total_route_km=distance_km(*origin, *destination),
        distance_traveled_km=distance_km(*origin, *current),
        distance_remaining_km=distance_km(*current, *destination),
    )


def speed_based_eta(
    remaining_km: float, speed_mps: float, now: datetime, tz: tzinfo | None = None
) -> str:
    """Project arrival from current speed; slow or stopped aircraft get ``--:--``."""

    speed_kmh = (speed_mps or 0.0) * 3.6
    if speed_kmh <= MIN_ETA_SPEED_KMH:
        return ETA_UNAVAILABLE
    seconds_remaining = remaining_km / speed_kmh * 3600
    return format_clock(now + timedelta(seconds=seconds_remaining), tz)


def schedule_based_eta(
    flight: FlightRecord, remaining_km: float, now: datetime, tz: tzinfo | None = None
) -> tuple[str, float]:
    """ETA from the scheduled arrival plus the speed needed to make it (m/s)."""

    arr_time = flight.arrival_time
    if arr_time is None:
        return ETA_UNAVAILABLE, 0.0
    hours_left = (arr_time - now).total_seconds() / 3600
    if hours_left <= 0:
        return ETA_UNAVAILABLE, 0.0

    speed_kmh = remaining_km / hours_left
    if speed_kmh <= MIN_ETA_SPEED_KMH:
        return ETA_UNAVAILABLE, speed_kmh / 3.6
    return format_clock(arr_time, tz), speed_kmh / 3.6


class PositionResolver:
    """Fuse live samples and schedule estimates into a :class:`ResolvedState`."""

    def __init__(self, *, display_tz: tzinfo | None = None) -> None:
        self.display_tz = display_tz

    def resolve(
        self,
        flight: FlightRecord,
        *,
        now: datetime,
        live_sample: PositionSample | None = None,
        use_live_hint: bool = True,
    ) -> Optional[ResolvedState]:
        """Apply the resolution rules for one tick.

        None means no new position this tick. With an ICAO24 address that
        includes an empty live lookup: the caller keeps whatever it showed
        before rather than falling back to an estimate.
        """

        if flight.aircraft.icao24_hex:
            if live_sample is None:
                return None
            return self.resolve_live(flight, live_sample, now=now)

        if live_sample is not None:
            return self.resolve_live(flight, live_sample, now=now)

        if use_live_hint and flight.live_hint is not None:
            return self.resolve_live(flight, flight.live_hint, now=now)

        return self.resolve_estimated(flight, now=now)

    def resolve_live(
        self, flight: FlightRecord, sample: PositionSample, *, now: datetime
    ) -> ResolvedState:
        metrics = route_metrics(flight, sample)
        eta = ETA_UNAVAILABLE
        if metrics is not None:
            eta = speed_based_eta(
                metrics.distance_remaining_km, sample.ground_speed_mps, now, self.display_tz
            )

        return ResolvedState(
            state=TrackingState.LIVE_TRACKED,
            position=sample,
            is_estimated=False,
            total_route_km=metrics.total_route_km if metrics else None,
            distance_traveled_km=metrics.distance_traveled_km if metrics else None,
            distance_remaining_km=metrics.distance_remaining_km if metrics else None,
            eta_local_time=eta,
            effective_speed_mps=sample.ground_speed_mps,
            resolved_at=now,
        )

    def resolve_estimated(
        self, flight: FlightRecord, *, now: datetime
    ) -> Optional[ResolvedState]:
        estimate = estimate_position(flight, now)
        if estimate is None:
            return None

        # Route coordinates are guaranteed once an estimate exists
        metrics = route_metrics(flight, estimate.sample)
        eta, speed_mps = schedule_based_eta(
            flight, metrics.distance_remaining_km, now, self.display_tz
        )
        logger.debug(
            "Estimated %s: phase=%s progress=%.3f",
            flight.flight_code,
            estimate.phase.value,
            estimate.progress,
        )

        return ResolvedState(
            state=TrackingState.ESTIMATED,
            position=estimate.sample,
            is_estimated=True,
            total_route_km=metrics.total_route_km,
            distance_traveled_km=metrics.distance_traveled_km,
            distance_remaining_km=metrics.distance_remaining_km,
            eta_local_time=eta,
            effective_speed_mps=speed_mps,
            progress=estimate.progress,
            resolved_at=now,
        )


__all__ = [
    "ACTIVE_PROGRESS_CAP",
    "CRUISE_ALTITUDE_FT",
    "CRUISE_SPEED_KMH",
    "CRUISE_SPEED_MPS",
    "FlightPhase",
    "MIN_ETA_SPEED_KMH",
    "PositionResolver",
    "RouteMetrics",
    "ScheduleEstimate",
    "estimate_position",
    "format_clock",
    "route_metrics",
    "schedule_based_eta",
    "speed_based_eta",
]
