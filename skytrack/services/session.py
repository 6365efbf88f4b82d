"""Per-search tracking state owned by the tracker."""

from __future__ import annotations

from collections import deque
import logging
from typing import Any, Optional

from skytrack.models.aircraft import AircraftImage
from skytrack.models.flight import FlightRecord
from skytrack.models.tracking import AltitudePoint, ResolvedState, TrackingState
from skytrack.models.weather import WeatherSnapshot

logger = logging.getLogger("skytrack.session")

ALTITUDE_HISTORY_LIMIT = 20


class TrackingSession:
    """Everything shown for the currently tracked flight.

    A new search calls :meth:`reset`, which bumps ``epoch``. Responses tagged
    with an older epoch belong to a superseded search and must be dropped.
    """

    def __init__(self) -> None:
        self.epoch = 0
        self.reset()

    def reset(self, flight_code: str | None = None) -> int:
        self.epoch += 1
        self.flight_code: Optional[str] = flight_code
        self.flight: Optional[FlightRecord] = None
        self.resolved: Optional[ResolvedState] = None
        self.trail: list[tuple[float, float]] = []
        self.altitude_history: deque[AltitudePoint] = deque(maxlen=ALTITUDE_HISTORY_LIMIT)
        self.weather: dict[str, WeatherSnapshot] = {}
        self.aircraft_image: Optional[AircraftImage] = None
        self.error: Optional[str] = None
        self.live_sample_seen = False
        logger.debug("Session reset for %s (epoch %s)", flight_code, self.epoch)
        return self.epoch

    @property
    def state(self) -> TrackingState:
        if self.resolved is None:
            return TrackingState.NO_DATA
        return self.resolved.state

    def is_current(self, epoch: int, flight_code: str | None = None) -> bool:
        if epoch != self.epoch:
            return False
        return flight_code is None or flight_code == self.flight_code

    def apply(self, resolved: ResolvedState) -> None:
        """Replace the resolved slot and extend trail and altitude history."""

        self.resolved = resolved
        if not resolved.is_estimated:
            self.live_sample_seen = True

        position = resolved.position
        self.trail.append((position.latitude, position.longitude))
        if position.altitude_ft:
            self.altitude_history.append(
                AltitudePoint(time=resolved.resolved_at, altitude_ft=position.altitude_ft)
            )

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready view of the session."""

        return {
            "flight_code": self.flight_code,
            "state": self.state.value,
            "error": self.error,
            "flight": self.flight.model_dump(mode="json") if self.flight else None,
            "resolved": self.resolved.model_dump(mode="json") if self.resolved else None,
            "trail": [list(point) for point in self.trail],
            "altitude_history": [
                point.model_dump(mode="json") for point in self.altitude_history
            ],
            "weather": {
                side: snapshot.model_dump(mode="json")
                for side, snapshot in self.weather.items()
            },
            "aircraft_image": (
                self.aircraft_image.model_dump(mode="json") if self.aircraft_image else None
            ),
        }


__all__ = ["ALTITUDE_HISTORY_LIMIT", "TrackingSession"]
