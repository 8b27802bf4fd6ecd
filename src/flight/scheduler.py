"""
Fixed-rate periodic tasks.

Each control loop runs as an asyncio task that computes, then waits for its
next deadline. Stopping is cooperative through an event the loop checks
every tick, and a stop request wakes a sleeping loop at once.
"""

import asyncio
import time
from typing import Callable, Optional

import structlog

logger = structlog.get_logger()


class PeriodicTask:
    """
    Runs a callback at a fixed rate.

    The callback receives the real time elapsed since its previous call in
    seconds. A tick that overruns its period is followed immediately by the
    next one. Exceptions raised by the callback are logged and the loop
    carries on with the next tick.
    """

    def __init__(
        self,
        name: str,
        callback: Callable[[float], object],
        update_rate_hz: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize periodic task.

        Args:
            name: Name used in log messages
            callback: Called with the elapsed seconds every tick
            update_rate_hz: Tick frequency
            clock: Monotonic time source
        """
        if update_rate_hz <= 0:
            raise ValueError(f"Update rate must be positive: {update_rate_hz}")

        self.name = name
        self.callback = callback
        self.update_rate_hz = update_rate_hz
        self.clock = clock

        self.tick_count = 0
        self.error_count = 0
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def period(self) -> float:
        """Get tick period in seconds."""
        return 1.0 / self.update_rate_hz

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_update_frequency(self, update_rate_hz: float) -> bool:
        """
        Change the tick frequency, effective from the next tick.

        Returns:
            False if the frequency was ignored (not positive)
        """
        if update_rate_hz <= 0:
            logger.warning("Update frequency ignored", task=self.name, hz=update_rate_hz)
            return False
        self.update_rate_hz = update_rate_hz
        logger.info("Update frequency changed", task=self.name, hz=update_rate_hz)
        return True

    def start(self) -> bool:
        """
        Start the loop on the running event loop.

        Returns:
            False if the task was already running
        """
        if self.is_running:
            logger.warning("Task already running", task=self.name)
            return False

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run())
        return True

    def request_stop(self) -> None:
        """Ask the loop to finish after the current tick."""
        if self._stop_event is not None:
            self._stop_event.set()

    async def stop(self) -> None:
        """Stop the loop and wait for it to finish."""
        self.request_stop()
        if self._task:
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run(self) -> None:
        """Tick until a stop is requested."""
        if self._stop_event is None:
            self._stop_event = asyncio.Event()

        logger.info("Task started", task=self.name, hz=self.update_rate_hz)

        last_tick = self.clock()
        next_deadline = last_tick

        while not self._stop_event.is_set():
            now = self.clock()
            time_elapsed = now - last_tick
            last_tick = now

            try:
                self.callback(time_elapsed)
            except Exception as e:
                self.error_count += 1
                logger.error("Tick failed", task=self.name, error=str(e))
            self.tick_count += 1

            next_deadline += self.period
            delay = next_deadline - self.clock()
            if delay <= 0:
                # overrun, restart the schedule from now
                next_deadline = self.clock()
                delay = 0.0

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

        logger.info("Task stopped", task=self.name, ticks=self.tick_count)
