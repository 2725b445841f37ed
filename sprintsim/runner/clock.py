"""
Fixed-timestep clock.

Turns variable host frame times into a deterministic number of simulation
ticks. Host time accumulates; every full tick interval in the accumulator
runs one tick. The accumulator is capped so a long stall (backgrounded tab,
debugger pause) replays at most `max_catchup_ticks` ticks on the next frame.

The clock only ticks while the phase is tickable (planning or active). If a
tick moves the phase out of that set (sprint closed, shipped early) the
rest of the backlog is dropped.

Frame scheduling is injected:
- ManualFrameScheduler: host pushes timestamps (tests, headless hosts)
- AsyncioFrameScheduler: re-arms itself on an asyncio loop
"""

import asyncio
import logging
from typing import Callable, Optional

from sprintsim.lib import constants
from sprintsim.workflow.state_machine import Phase, is_tickable

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class ManualFrameScheduler:
    """Scheduler driven by explicit timestamps.

    request_frame() only records the pending callback; fire(t) delivers it.
    """

    def __init__(self):
        self._pending: Optional[FrameCallback] = None
        self.requests = 0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def request_frame(self, callback: FrameCallback) -> None:
        self._pending = callback
        self.requests += 1

    def cancel(self) -> None:
        self._pending = None

    def fire(self, timestamp_ms: float) -> bool:
        """Deliver the pending frame. Returns False if none was requested."""
        callback = self._pending
        if callback is None:
            return False
        self._pending = None
        callback(timestamp_ms)
        return True


class AsyncioFrameScheduler:
    """Scheduler that delivers frames on an asyncio event loop.

    Timestamps are the loop's monotonic time in milliseconds.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, frame_interval_ms: float = 16.0):
        self.loop = loop
        self.frame_interval_ms = frame_interval_ms
        self._handle: Optional[asyncio.TimerHandle] = None

    def request_frame(self, callback: FrameCallback) -> None:
        self.cancel()
        self._handle = self.loop.call_later(
            self.frame_interval_ms / 1000.0,
            self._deliver,
            callback,
        )

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _deliver(self, callback: FrameCallback) -> None:
        self._handle = None
        callback(self.loop.time() * 1000.0)


class FixedTimestepClock:
    """Accumulator clock that runs the tick callback at a fixed interval."""

    def __init__(
        self,
        tick: Callable[[], None],
        phase_provider: Callable[[], Phase],
        scheduler,
        tick_interval_ms: float = constants.TICK_INTERVAL_MS,
        max_catchup_ticks: int = constants.MAX_CATCHUP_TICKS,
    ):
        """
        Args:
            tick: Runs one simulation tick
            phase_provider: Returns the current phase
            scheduler: Object with request_frame(callback) and cancel()
            tick_interval_ms: Simulated time per tick
            max_catchup_ticks: Most ticks a single frame may run
        """
        if tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {tick_interval_ms}")
        if max_catchup_ticks < 1:
            raise ValueError(f"max_catchup_ticks must be at least 1, got {max_catchup_ticks}")

        self.tick = tick
        self.phase_provider = phase_provider
        self.scheduler = scheduler
        self.tick_interval_ms = tick_interval_ms
        self.max_catchup_ticks = max_catchup_ticks

        self.accumulator = 0.0
        self.last_timestamp: Optional[float] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self.accumulator = 0.0
        self.last_timestamp = None
        logger.debug("[CLOCK] started")
        self.scheduler.request_frame(self.on_frame)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self.scheduler.cancel()
        self.accumulator = 0.0
        self.last_timestamp = None
        logger.debug("[CLOCK] stopped")

    def on_frame(self, timestamp_ms: float) -> int:
        """Handle one host frame. Returns the number of ticks run."""
        if not self._running:
            return 0

        if self.last_timestamp is None:
            # First frame only seeds the timestamp
            self.last_timestamp = timestamp_ms
            self.scheduler.request_frame(self.on_frame)
            return 0

        delta = max(0.0, timestamp_ms - self.last_timestamp)
        self.last_timestamp = timestamp_ms
        cap = self.max_catchup_ticks * self.tick_interval_ms
        self.accumulator = min(self.accumulator + delta, cap)

        ticks = 0
        if is_tickable(self.phase_provider()):
            while self.accumulator >= self.tick_interval_ms:
                self.accumulator -= self.tick_interval_ms
                self.tick()
                ticks += 1
                if not is_tickable(self.phase_provider()):
                    self.accumulator = 0.0
                    break
        else:
            self.accumulator = 0.0

        if ticks > 1:
            logger.debug(f"[CLOCK] caught up {ticks} ticks in one frame")

        # The tick may have stopped the clock (sprint review)
        if self._running:
            self.scheduler.request_frame(self.on_frame)
        return ticks
