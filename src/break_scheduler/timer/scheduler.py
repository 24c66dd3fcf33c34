"""Break-cycle scheduler: the work/break countdown state machine."""

from __future__ import annotations

import logging

from break_scheduler.timer.schemas import SchedulerSnapshot, TimerConfig, TimerPhase

logger = logging.getLogger(__name__)


class BreakScheduler:
    """Work/break countdown with session and cycle bookkeeping.

    The phase and the running flag are independent, so the timer can be
    paused while working or while on a break. The scheduler is synchronous
    and does no I/O; a host drives ``tick()`` once per second and persists
    ``snapshot()`` after each tick or command.

    Usage:
        scheduler = BreakScheduler(TimerConfig())
        scheduler.start()
        scheduler.tick()          # once per elapsed second
        scheduler.skip()          # leave a break immediately
        scheduler.reset()         # back to work session 1

    Breaks start enforced. The break-enforcement surface reports through
    ``set_enforced()`` whether leaving is allowed; ``leave_break()`` honours
    it, while ``skip()`` and ``switch_mode()`` always override it.

    With ``total_cycles > 0`` the scheduler halts in the break that completes
    the last cycle: time left is 0, the timer is stopped and further ticks do
    nothing until ``reset()`` or a manual switch.
    """

    def __init__(self, config: TimerConfig):
        self._config = config
        self._phase = TimerPhase.WORKING
        self._time_left = config.work_duration
        self._current_session = 1
        self._completed_cycles = 0
        self._is_running = False
        self._enforced = False

    @classmethod
    def from_snapshot(cls, config: TimerConfig, snapshot: SchedulerSnapshot) -> BreakScheduler:
        """Rebuild a scheduler from a persisted snapshot.

        Time left is clamped to the configured phase duration. Breaks come
        back enforced since the flag is not part of the snapshot.
        """
        scheduler = cls(config)
        scheduler._phase = snapshot.phase
        scheduler._time_left = min(snapshot.time_left, config.duration_for(snapshot.phase))
        scheduler._current_session = snapshot.current_session
        scheduler._completed_cycles = snapshot.completed_cycles
        scheduler._is_running = snapshot.is_running and not scheduler.is_finished
        scheduler._enforced = snapshot.phase.is_break and not scheduler.is_finished
        return scheduler

    # ----- Read-only state -----

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def time_left(self) -> int:
        return self._time_left

    @property
    def current_session(self) -> int:
        return self._current_session

    @property
    def completed_cycles(self) -> int:
        return self._completed_cycles

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def enforced(self) -> bool:
        """Whether the current break forbids a non-override return to work."""
        return self._enforced and self._phase.is_break

    @property
    def is_break(self) -> bool:
        return self._phase.is_break

    @property
    def phase_duration(self) -> int:
        return self._config.duration_for(self._phase)

    @property
    def is_finished(self) -> bool:
        """True once the last configured cycle has run out its break."""
        return (
            self._config.is_bounded
            and self._completed_cycles >= self._config.total_cycles
            and self._phase.is_break
            and self._time_left == 0
        )

    def snapshot(self) -> SchedulerSnapshot:
        return SchedulerSnapshot(
            phase=self._phase,
            time_left=self._time_left,
            current_session=self._current_session,
            completed_cycles=self._completed_cycles,
            is_running=self._is_running,
        )

    # ----- Commands -----

    def start(self) -> None:
        """Start or resume the countdown. Does nothing once all cycles are done."""
        if self._is_running:
            return
        if self.is_finished:
            logger.info("All cycles completed, reset or switch to continue")
            return
        self._is_running = True
        logger.info(f"Timer started: {self._phase.value}, {self._time_left}s left")

    def pause(self) -> None:
        """Freeze the countdown at its current value."""
        if not self._is_running:
            return
        self._is_running = False
        logger.info(f"Timer paused: {self._phase.value}, {self._time_left}s left")

    def reset(self) -> None:
        """Return to work session 1. Completed cycles are kept."""
        self._phase = TimerPhase.WORKING
        self._current_session = 1
        self._time_left = self._config.work_duration
        self._is_running = False
        self._enforced = False
        logger.info(f"Timer reset ({self._completed_cycles} completed cycles kept)")

    def tick(self) -> bool:
        """Advance the countdown by one second.

        Returns:
            True if the phase changed (or the timer halted) on this tick.
        """
        if not self._is_running or self.is_finished:
            return False

        if self._time_left > 0:
            self._time_left -= 1

        if self._time_left > 0:
            return False

        if self._phase.is_break and self._reached_cycle_limit(after_increment=True):
            self._halt()
            return True

        self._transition()
        return True

    def switch_mode(self) -> None:
        """Move to the next phase immediately."""
        self._transition()

    def set_enforced(self, value: bool) -> None:
        """Record whether the break-enforcement surface still holds the break."""
        self._enforced = bool(value)

    def skip(self) -> None:
        """Override the break (or end the work session) right away.

        The flag is re-armed first so the next break starts enforced no
        matter what the surface reported for this one.
        """
        self._enforced = True
        self.switch_mode()

    def leave_break(self) -> bool:
        """Return to work early if the current break is no longer enforced."""
        if not self._phase.is_break:
            return False
        if self._enforced:
            logger.debug("Break is enforced, staying on break")
            return False
        self._transition()
        return True

    def configure(self, config: TimerConfig) -> None:
        """Apply a newly committed configuration.

        An untouched countdown picks up the new duration; one already in
        progress is only clamped to it.
        """
        untouched = self._time_left == self.phase_duration
        self._config = config
        if untouched:
            self._time_left = self.phase_duration
        else:
            self._time_left = min(self._time_left, self.phase_duration)

    # ----- Transitions -----

    def _reached_cycle_limit(self, after_increment: bool = False) -> bool:
        if not self._config.is_bounded:
            return False
        completed = self._completed_cycles + (1 if after_increment else 0)
        return completed >= self._config.total_cycles

    def _transition(self) -> None:
        completed_phase = self._phase

        if completed_phase == TimerPhase.WORKING:
            if self._current_session % self._config.sessions_before_long_break == 0:
                self._phase = TimerPhase.LONG_BREAK
            else:
                self._phase = TimerPhase.SHORT_BREAK
            self._enforced = True
            logger.info(
                f"Work session {self._current_session} complete! Starting {self._phase.value}"
            )
        else:
            if not self._reached_cycle_limit():
                self._completed_cycles += 1
            self._current_session += 1
            self._phase = TimerPhase.WORKING
            self._enforced = False
            logger.info(
                f"Break complete! Starting work session {self._current_session} "
                f"({self._completed_cycles} cycles completed)"
            )

        self._time_left = self.phase_duration

    def _halt(self) -> None:
        if not self._reached_cycle_limit():
            self._completed_cycles += 1
        self._time_left = 0
        self._is_running = False
        self._enforced = False
        logger.info(f"All {self._config.total_cycles} cycles completed, timer halted")
