"""Pure text projections of a scheduler snapshot for rendering."""

from __future__ import annotations

from break_scheduler.timer.schemas import SchedulerSnapshot, TimerConfig


def format_clock(seconds: int) -> str:
    """Format seconds as MM:SS, or HH:MM:SS from one hour up."""
    hours, remainder = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def phase_label(snapshot: SchedulerSnapshot) -> str:
    if snapshot.is_break:
        return "Long Break" if snapshot.is_long_break else "Short Break"
    return f"Work Session {snapshot.current_session}"


def window_title(snapshot: SchedulerSnapshot) -> str:
    """Title string shown in the window or tab, e.g. ``"23:59 - Work Session 1"``."""
    return f"{format_clock(snapshot.time_left)} - {phase_label(snapshot)}"


def cycles_label(snapshot: SchedulerSnapshot, config: TimerConfig) -> str:
    if config.is_bounded:
        return f"{snapshot.completed_cycles} / {config.total_cycles}"
    return str(snapshot.completed_cycles)
