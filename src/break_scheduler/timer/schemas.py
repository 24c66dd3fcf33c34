"""Pydantic models for timer configuration and scheduler snapshots."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from break_scheduler.timer.durations import format_duration, parse_duration
from break_scheduler.timer.errors import DurationParseError, InvalidConfigurationError

DURATION_FIELDS = ("work_duration", "short_break_duration", "long_break_duration")
CONFIG_FIELDS = DURATION_FIELDS + ("sessions_before_long_break", "total_cycles")


class TimerPhase(str, Enum):
    """Current phase of the break cycle."""

    WORKING = "working"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not TimerPhase.WORKING


class _Record(BaseModel):
    """Base for models persisted as camelCase JSON records."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    def to_record(self) -> dict[str, Any]:
        """Dump as a JSON-serializable record using camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class TimerConfig(_Record):
    """Durations (in seconds) and cycle settings for the scheduler.

    Instances are immutable; edits produce a new config via ``replace``.
    """

    work_duration: int = Field(default=24 * 60, ge=0, description="Work session length")
    short_break_duration: int = Field(default=5 * 60, ge=0, description="Short break length")
    long_break_duration: int = Field(default=15 * 60, ge=0, description="Long break length")
    sessions_before_long_break: int = Field(
        default=4, ge=1, description="Work sessions before the break is long"
    )
    total_cycles: int = Field(default=0, ge=0, description="Cycles to run, 0 for unbounded")

    @classmethod
    def create(cls, **values: Any) -> TimerConfig:
        """Build a config, raising InvalidConfigurationError on bad values."""
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise InvalidConfigurationError(_describe(e)) from e

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> TimerConfig:
        return cls.create(**record)

    def replace(self, field: str, value: Any) -> TimerConfig:
        """Return a copy with one field changed, validated."""
        if field not in CONFIG_FIELDS:
            raise InvalidConfigurationError(f"Unknown configuration field: {field}")
        values = self.model_dump()
        values[field] = value
        return self.create(**values)

    @property
    def is_bounded(self) -> bool:
        return self.total_cycles > 0

    def duration_for(self, phase: TimerPhase) -> int:
        """Configured length in seconds of the given phase."""
        if phase == TimerPhase.WORKING:
            return self.work_duration
        elif phase == TimerPhase.SHORT_BREAK:
            return self.short_break_duration
        else:
            return self.long_break_duration


class RawInputs(_Record):
    """Text shown in the duration edit fields."""

    work_duration: str = "24m"
    short_break_duration: str = "5m"
    long_break_duration: str = "15m"

    @classmethod
    def from_config(cls, config: TimerConfig) -> RawInputs:
        return cls(**{name: format_duration(getattr(config, name)) for name in DURATION_FIELDS})

    def replace(self, field: str, text: str) -> RawInputs:
        if field not in DURATION_FIELDS:
            raise InvalidConfigurationError(f"Not a duration field: {field}")
        return self.model_copy(update={field: text})

    def describes(self, config: TimerConfig) -> bool:
        """Whether every edit field parses to the duration stored in ``config``."""
        for name in DURATION_FIELDS:
            text = getattr(self, name)
            if not text.strip():
                return False
            try:
                if parse_duration(text, -1) != getattr(config, name):
                    return False
            except DurationParseError:
                return False
        return True


class SchedulerSnapshot(_Record):
    """Read-only view of the scheduler state, rendered and persisted by the host."""

    phase: TimerPhase = TimerPhase.WORKING
    time_left: int = Field(default=24 * 60, ge=0)
    current_session: int = Field(default=1, ge=1)
    completed_cycles: int = Field(default=0, ge=0)
    is_running: bool = False

    @property
    def is_break(self) -> bool:
        return self.phase.is_break

    @property
    def is_long_break(self) -> bool:
        return self.phase == TimerPhase.LONG_BREAK

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> SchedulerSnapshot:
        return cls.model_validate(record)


def _describe(error: ValidationError) -> str:
    """Flatten a ValidationError into a one-line message."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "config"
        messages.append(f"{location}: {item['msg']}")
    return "; ".join(messages)
