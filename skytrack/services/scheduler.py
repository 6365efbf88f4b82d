"""Single-timer driver for live polling and estimate animation."""

from __future__ import annotations

import asyncio
from enum import Enum
import logging
from typing import Awaitable, Callable, Optional

from skytrack.config import settings

logger = logging.getLogger("skytrack.scheduler")

TickCallback = Callable[[int], Awaitable[None]]


class SchedulerMode(str, Enum):
    IDLE = "idle"
    LIVE = "live"
    ESTIMATION = "estimation"


class TrackingScheduler:
    """Own at most one repeating timer per tracking session.

    Each start bumps ``generation`` and the tick callback receives the value it
    was started with, so a tick that completes after a restart can tell it is
    stale. Ticks are spawned as their own tasks: a slow fetch does not delay
    the next tick, and :meth:`stop` ends the timer without cancelling fetches
    already in flight.
    """

    def __init__(
        self,
        *,
        live_interval: float | None = None,
        animation_interval: float | None = None,
    ) -> None:
        self.live_interval = live_interval or settings.live_poll_seconds
        self.animation_interval = animation_interval or settings.estimate_animation_seconds
        self.mode = SchedulerMode.IDLE
        self.key: Optional[str] = None
        self.generation = 0
        self._tick: Optional[TickCallback] = None
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()
        self._first_tick: Optional[asyncio.Event] = None

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start_live(self, key: str, tick: TickCallback) -> int:
        """Poll live telemetry for ``key`` every ``live_interval`` seconds."""
        return self._start(SchedulerMode.LIVE, self.live_interval, tick, key=key)

    def start_estimation_animation(self, tick: TickCallback) -> int:
        """Recompute the schedule estimate every ``animation_interval`` seconds."""
        return self._start(SchedulerMode.ESTIMATION, self.animation_interval, tick)

    def stop(self) -> None:
        self.generation += 1
        if self._first_tick is not None:
            # Release anyone waiting on a mode that will never tick again
            self._first_tick.set()
            self._first_tick = None
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.info("Stopped %s timer", self.mode.value)
        self.mode = SchedulerMode.IDLE
        self.key = None
        self._tick = None

    def is_current(self, generation: int) -> bool:
        return generation == self.generation and self.mode is not SchedulerMode.IDLE

    async def trigger(self) -> None:
        """Run one tick of the active mode immediately and wait for it."""

        if self._tick is None:
            return
        await self._tick(self.generation)

    async def wait_for_first_tick(self) -> None:
        """Wait until the active mode has finished its first scheduled tick.

        Returns at once when idle, and early if the mode is stopped first.
        """

        if self._first_tick is None:
            return
        await self._first_tick.wait()

    async def drain(self) -> None:
        """Wait for ticks that are still in flight."""

        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def _start(
        self,
        mode: SchedulerMode,
        interval: float,
        tick: TickCallback,
        *,
        key: str | None = None,
    ) -> int:
        self.stop()
        self.mode = mode
        self.key = key
        self._tick = tick
        self._first_tick = asyncio.Event()
        generation = self.generation
        self._timer = asyncio.create_task(
            self._run(interval, tick, generation), name=f"skytrack-{mode.value}-timer"
        )
        logger.info(
            "Started %s timer (every %.1fs)%s",
            mode.value,
            interval,
            f" for {key}" if key else "",
        )
        return generation

    async def _run(self, interval: float, tick: TickCallback, generation: int) -> None:
        while generation == self.generation:
            task = asyncio.create_task(self._guarded(tick, generation))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            await asyncio.sleep(interval)

    async def _guarded(self, tick: TickCallback, generation: int) -> None:
        try:
            await tick(generation)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Scheduler tick failed: %s", exc)
        finally:
            if generation == self.generation and self._first_tick is not None:
                self._first_tick.set()


__all__ = ["SchedulerMode", "TickCallback", "TrackingScheduler"]
