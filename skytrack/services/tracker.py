"""Tracking controller: search, enrich, and keep the position fresh."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from functools import partial
import logging
from typing import Callable, Optional

from skytrack.models.flight import AirportLeg, FlightRecord
from skytrack.models.tracking import ResolvedState
from skytrack.providers import (
    AircraftImageProvider,
    InputError,
    LivePositionProvider,
    ProviderError,
    ScheduleProvider,
    WeatherProvider,
)
from skytrack.services.recent_searches import RecentSearchStore
from skytrack.services.resolver import PositionResolver
from skytrack.services.scheduler import TrackingScheduler
from skytrack.services.session import TrackingSession

logger = logging.getLogger("skytrack.tracker")

SessionListener = Callable[[TrackingSession], None]


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class FlightTracker:
    """Orchestrates one tracked flight at a time.

    Every upstream response is checked against the session epoch it was
    requested under; anything that arrives after a newer search started is
    discarded.
    """

    def __init__(
        self,
        *,
        schedule_provider: Optional[ScheduleProvider] = None,
        live_provider: Optional[LivePositionProvider] = None,
        weather_provider: Optional[WeatherProvider] = None,
        image_provider: Optional[AircraftImageProvider] = None,
        resolver: Optional[PositionResolver] = None,
        scheduler: Optional[TrackingScheduler] = None,
        session: Optional[TrackingSession] = None,
        recent_searches: Optional[RecentSearchStore] = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.schedule_provider = schedule_provider or ScheduleProvider()
        self.live_provider = live_provider or LivePositionProvider()
        self.weather_provider = weather_provider or WeatherProvider()
        self.image_provider = image_provider or AircraftImageProvider()
        self.resolver = resolver or PositionResolver()
        self.scheduler = scheduler or TrackingScheduler()
        self.session = session or TrackingSession()
        self.recent_searches = recent_searches or RecentSearchStore()
        self.clock = clock or _utcnow
        self._listeners: list[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    async def search(self, flight_code: str) -> TrackingSession:
        code = (flight_code or "").strip().upper()
        if not code:
            raise InputError("Flight number is required")

        self.scheduler.stop()
        epoch = self.session.reset(code)
        self._notify()

        try:
            flight = await self.schedule_provider.lookup(code)
        except ProviderError as exc:
            if self.session.is_current(epoch, code):
                self.session.error = exc.message
                logger.warning("Search for %s failed: %s", code, exc.message)
                self._notify()
            return self.session

        if not self.session.is_current(epoch, code):
            logger.debug("Discarding schedule for superseded search %s", code)
            return self.session

        self.session.flight = flight
        self.recent_searches.add(code)
        self._start_tracking(epoch, flight)
        self._notify()

        await self._enrich(epoch, flight)
        return self.session

    async def refresh(self) -> None:
        """Run one tick of the active mode now."""

        await self.scheduler.trigger()

    def close(self) -> None:
        self.scheduler.stop()

    def _start_tracking(self, epoch: int, flight: FlightRecord) -> None:
        icao24 = flight.aircraft.icao24_hex
        if icao24:
            logger.info("Tracking %s via ICAO24 %s", flight.flight_code, icao24)
            self.scheduler.start_live(icao24, partial(self._live_tick, epoch, icao24))
        elif flight.live_hint is not None:
            # Single fix; nothing polls a hint again
            logger.info("Using provider live data for %s", flight.flight_code)
            self._publish(epoch, self.resolver.resolve(flight, now=self.clock()))
        elif flight.has_route_coordinates:
            logger.warning(
                "Estimated position for %s; real-time tracking unavailable",
                flight.flight_code,
            )
            self.scheduler.start_estimation_animation(partial(self._estimation_tick, epoch))
        else:
            logger.info("No position source for %s; waiting for signal", flight.flight_code)

    async def _live_tick(self, epoch: int, icao24: str, generation: int) -> None:
        try:
            sample = await self.live_provider.get_position(icao24)
        except ProviderError as exc:
            logger.warning("Live position lookup failed for %s: %s", icao24, exc.message)
            return

        if not self._accepts(epoch, generation):
            logger.debug("Discarding stale live position for %s", icao24)
            return
        if sample is None:
            return

        resolved = self.resolver.resolve(
            self.session.flight, live_sample=sample, now=self.clock()
        )
        self._publish(epoch, resolved)

    async def _estimation_tick(self, epoch: int, generation: int) -> None:
        if not self._accepts(epoch, generation):
            return
        if self.session.live_sample_seen:
            self.scheduler.stop()
            return
        resolved = self.resolver.resolve_estimated(self.session.flight, now=self.clock())
        self._publish(epoch, resolved)

    def _accepts(self, epoch: int, generation: int) -> bool:
        return self.session.is_current(epoch) and self.scheduler.is_current(generation)

    def _publish(self, epoch: int, resolved: ResolvedState | None) -> None:
        if resolved is None or not self.session.is_current(epoch):
            return
        self.session.apply(resolved)
        self._notify()

    async def _enrich(self, epoch: int, flight: FlightRecord) -> None:
        await asyncio.gather(
            self._fetch_weather(epoch, "departure", flight.departure),
            self._fetch_weather(epoch, "arrival", flight.arrival),
            self._fetch_image(epoch, flight.aircraft.registration),
        )

    async def _fetch_weather(self, epoch: int, side: str, leg: AirportLeg) -> None:
        if not leg.has_coordinates:
            logger.debug("Missing coordinates for %s weather", side)
            return
        try:
            snapshot = await self.weather_provider.get_weather(leg.latitude, leg.longitude)
        except ProviderError as exc:
            logger.warning("%s weather unavailable: %s", side.capitalize(), exc.message)
            return
        if self.session.is_current(epoch):
            self.session.weather[side] = snapshot
            self._notify()

    async def _fetch_image(self, epoch: int, registration: str | None) -> None:
        if not registration:
            return
        try:
            image = await self.image_provider.get_image(registration)
        except ProviderError as exc:
            logger.warning("Aircraft image unavailable: %s", exc.message)
            return
        if image is not None and self.session.is_current(epoch):
            self.session.aircraft_image = image
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.session)
            except Exception as exc:
                logger.warning("Session listener failed: %s", exc)


__all__ = ["FlightTracker", "SessionListener"]
