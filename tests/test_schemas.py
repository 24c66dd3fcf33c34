import pytest
from pydantic import ValidationError

from break_scheduler.timer.errors import InvalidConfigurationError
from break_scheduler.timer.schemas import RawInputs, SchedulerSnapshot, TimerConfig, TimerPhase


def test_defaults():
    config = TimerConfig()
    assert config.work_duration == 24 * 60
    assert config.short_break_duration == 5 * 60
    assert config.long_break_duration == 15 * 60
    assert config.sessions_before_long_break == 4
    assert config.total_cycles == 0
    assert not config.is_bounded


def test_config_record_uses_camel_case_keys():
    assert TimerConfig().to_record() == {
        "workDuration": 1440,
        "shortBreakDuration": 300,
        "longBreakDuration": 900,
        "sessionsBeforeLongBreak": 4,
        "totalCycles": 0,
    }


def test_config_from_record_round_trip():
    config = TimerConfig(work_duration=1500, total_cycles=3)
    assert TimerConfig.from_record(config.to_record()) == config


@pytest.mark.parametrize(
    "values",
    [
        {"work_duration": -1},
        {"short_break_duration": -60},
        {"sessions_before_long_break": 0},
        {"total_cycles": -2},
    ],
)
def test_invalid_configuration_rejected(values):
    with pytest.raises(InvalidConfigurationError):
        TimerConfig.create(**values)


def test_config_is_immutable():
    config = TimerConfig()
    with pytest.raises(ValidationError):
        config.work_duration = 10
    assert config.replace("work_duration", 10).work_duration == 10
    assert config.work_duration == 1440


def test_duration_for_phase():
    config = TimerConfig(work_duration=1, short_break_duration=2, long_break_duration=3)
    assert config.duration_for(TimerPhase.WORKING) == 1
    assert config.duration_for(TimerPhase.SHORT_BREAK) == 2
    assert config.duration_for(TimerPhase.LONG_BREAK) == 3


def test_snapshot_record():
    snapshot = SchedulerSnapshot(
        phase=TimerPhase.LONG_BREAK,
        time_left=42,
        current_session=4,
        completed_cycles=3,
        is_running=True,
    )
    record = snapshot.to_record()
    assert record == {
        "phase": "long_break",
        "timeLeft": 42,
        "currentSession": 4,
        "completedCycles": 3,
        "isRunning": True,
    }
    assert SchedulerSnapshot.from_record(record) == snapshot
    assert snapshot.is_break
    assert snapshot.is_long_break


def test_raw_inputs_describe_matching_config():
    config = TimerConfig(work_duration=1500, short_break_duration=90)
    assert RawInputs.from_config(config).describes(config)
    assert RawInputs(work_duration="25 m", short_break_duration="1m30s").describes(config)


@pytest.mark.parametrize(
    "work_text",
    ["10m", "", "+5m", "ten minutes"],
)
def test_raw_inputs_do_not_describe_other_config(work_text):
    config = TimerConfig(work_duration=1500)
    assert not RawInputs.from_config(config).replace("work_duration", work_text).describes(config)
