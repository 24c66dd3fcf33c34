"""Break-cycle scheduler, duration expressions and their host-facing helpers."""

from break_scheduler.timer.display import cycles_label, format_clock, phase_label, window_title
from break_scheduler.timer.driver import TimerDriver
from break_scheduler.timer.durations import format_duration, parse_duration, parse_duration_edit
from break_scheduler.timer.editor import ConfigEditor
from break_scheduler.timer.errors import (
    BreakSchedulerError,
    DurationParseError,
    InvalidConfigurationError,
)
from break_scheduler.timer.scheduler import BreakScheduler
from break_scheduler.timer.schemas import RawInputs, SchedulerSnapshot, TimerConfig, TimerPhase

__all__ = [
    "BreakScheduler",
    "BreakSchedulerError",
    "ConfigEditor",
    "DurationParseError",
    "InvalidConfigurationError",
    "RawInputs",
    "SchedulerSnapshot",
    "TimerConfig",
    "TimerDriver",
    "TimerPhase",
    "cycles_label",
    "format_clock",
    "format_duration",
    "parse_duration",
    "parse_duration_edit",
    "phase_label",
    "window_title",
]
