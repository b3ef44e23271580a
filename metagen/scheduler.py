"""Debounced, serialized scheduling of manifest regenerations."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum


class SchedulerState(Enum):
    """Lifecycle state of a DebounceScheduler."""
    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"
    STOPPED = "stopped"


class CancellationToken:
    """Cooperative cancellation flag owned by one pending regeneration."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def sleep(self, seconds: float) -> None:
        """Wait for the given time, returning early once cancelled."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


class DebounceScheduler:
    """
    Coalesces change notifications into single, non-overlapping runs.

    Every notify() cancels the previously pending run and schedules a new
    one after the quiet period. A run that has already started is never
    interrupted; a notification arriving during it schedules a follow-up
    run that waits for the active one to finish.

    All methods must be called from the event loop thread.
    """

    def __init__(self, action: Callable[[], Awaitable[object]], quiet_period: float = 1.0) -> None:
        self.quiet_period = quiet_period
        self.logger = logging.getLogger(self.__class__.__name__)
        self._action = action
        self._run_lock = asyncio.Lock()
        self._token: CancellationToken | None = None
        self._tasks: set[asyncio.Task] = set()
        self._running = False
        self._stopped = False
        self._stop_task: asyncio.Task | None = None
        self.runs = 0

    @property
    def state(self) -> SchedulerState:
        if self._stopped:
            return SchedulerState.STOPPED
        if self._running:
            return SchedulerState.RUNNING
        if self._token is not None and not self._token.cancelled:
            return SchedulerState.PENDING
        return SchedulerState.IDLE

    def notify(self) -> asyncio.Task | None:
        """Replace any pending run with a fresh one after the quiet period."""
        if self._stopped:
            self.logger.debug("Ignoring notification after stop")
            return None

        # Cancel-and-replace has no await in between, so two pending
        # runs can never both pass their token check.
        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token

        task = asyncio.get_running_loop().create_task(self._run_after_quiet_period(token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self.logger.info("Queued regeneration task.")
        return task

    async def _run_after_quiet_period(self, token: CancellationToken) -> None:
        await token.sleep(self.quiet_period)

        async with self._run_lock:
            if token.cancelled:
                self.logger.info("Regeneration task cancellation requested.")
                return

            self._running = True
            try:
                await self._action()
            except Exception:
                self.logger.exception("Regeneration failed")
            finally:
                self._running = False
                self.runs += 1
                if self._token is token:
                    self._token = None

    async def stop(self) -> None:
        """Cancel pending runs and wait for an active run to finish.

        Every caller, including concurrent ones, returns only once the drain
        is complete.
        """
        if self._stop_task is None:
            self._stopped = True
            if self._token is not None:
                self._token.cancel()
                self._token = None
            self._stop_task = asyncio.get_running_loop().create_task(self._drain())
        await asyncio.shield(self._stop_task)

    async def _drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self.logger.debug("Scheduler stopped")
