"""Asyncio tick source that drives a BreakScheduler at a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from break_scheduler.timer.scheduler import BreakScheduler
from break_scheduler.timer.schemas import SchedulerSnapshot, TimerConfig

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[SchedulerSnapshot], Awaitable[None] | None]


class TimerDriver:
    """Runs the 1 Hz tick loop and serializes user commands behind it.

    Every tick and every command holds the same lock for its whole state
    change, then snapshots the scheduler and hands the snapshot to
    ``on_change`` if it differs from the last one handed out.

    Usage:
        driver = TimerDriver(scheduler, on_change=store.save_state)
        task = asyncio.create_task(driver.run())
        await driver.start()
        ...
        await driver.stop()
    """

    def __init__(
        self,
        scheduler: BreakScheduler,
        on_change: SnapshotCallback | None = None,
        interval: float = 1.0,
    ):
        self.scheduler = scheduler
        self.on_change = on_change
        self.on_phase_change: SnapshotCallback | None = None
        self.interval = interval
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._last_snapshot: SchedulerSnapshot | None = None

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self) -> None:
        """Tick until stopped."""
        self._task = asyncio.current_task()
        logger.info(f"Tick loop started ({self.interval}s interval)")
        try:
            while True:
                await asyncio.sleep(self.interval)
                await self.tick()
        except asyncio.CancelledError:
            logger.info("Tick loop stopped")
            raise

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def tick(self) -> None:
        async with self._lock:
            phase_changed = self.scheduler.tick()
            snapshot = await self._persist()

        if phase_changed and self.on_phase_change:
            await self._fire(self.on_phase_change, snapshot)

    async def publish(self) -> SchedulerSnapshot:
        """Run the snapshot-and-persist step without changing state."""
        async with self._lock:
            return await self._persist()

    # ----- Commands -----

    async def start(self) -> SchedulerSnapshot:
        return await self._command(self.scheduler.start)

    async def pause(self) -> SchedulerSnapshot:
        return await self._command(self.scheduler.pause)

    async def reset(self) -> SchedulerSnapshot:
        return await self._command(self.scheduler.reset)

    async def switch_mode(self) -> SchedulerSnapshot:
        return await self._command(self.scheduler.switch_mode)

    async def skip(self) -> SchedulerSnapshot:
        return await self._command(self.scheduler.skip)

    async def leave_break(self) -> SchedulerSnapshot:
        return await self._command(self.scheduler.leave_break)

    async def set_enforced(self, value: bool) -> SchedulerSnapshot:
        return await self._command(self.scheduler.set_enforced, value)

    async def configure(self, config: TimerConfig) -> SchedulerSnapshot:
        return await self._command(self.scheduler.configure, config)

    async def _command(self, action: Callable[..., object], *args: object) -> SchedulerSnapshot:
        async with self._lock:
            action(*args)
            return await self._persist()

    # ----- Snapshot and persist -----

    async def _persist(self) -> SchedulerSnapshot:
        snapshot = self.scheduler.snapshot()
        if snapshot != self._last_snapshot:
            self._last_snapshot = snapshot
            if self.on_change:
                await self._fire(self.on_change, snapshot)
        return snapshot

    async def _fire(self, callback: SnapshotCallback, snapshot: SchedulerSnapshot) -> None:
        try:
            result = callback(snapshot)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            logger.error(f"Error in snapshot callback: {e}")
