import json

import pytest

from break_scheduler.storage.state_store import CONFIG_KEY, RAW_INPUTS_KEY, STATE_KEY, StateStore
from break_scheduler.timer.schemas import RawInputs, SchedulerSnapshot, TimerConfig, TimerPhase


@pytest.fixture
def store(tmp_path):
    return StateStore(tmp_path / "state")


def test_missing_records_read_as_none(store):
    assert store.get(CONFIG_KEY) is None
    assert store.load_config() is None
    assert store.load_raw_inputs() is None
    assert store.load_state() is None


def test_default_config_written_on_first_load(store):
    default = TimerConfig(work_duration=600)
    assert store.load_config_or_default(default) == default
    assert store.get(CONFIG_KEY) == default.to_record()


def test_stored_config_wins_over_default(store):
    saved = TimerConfig(work_duration=1500)
    store.save_config(saved)
    assert store.load_config_or_default(TimerConfig()) == saved


def test_records_read_back_verbatim(store):
    config = TimerConfig(total_cycles=2)
    raw = RawInputs.from_config(config)
    snapshot = SchedulerSnapshot(
        phase=TimerPhase.SHORT_BREAK,
        time_left=17,
        current_session=2,
        completed_cycles=1,
        is_running=True,
    )

    store.save_config(config)
    store.save_raw_inputs(raw)
    store.save_state(snapshot)

    assert store.get(CONFIG_KEY) == config.to_record()
    assert store.get(RAW_INPUTS_KEY) == {
        "workDuration": "24m",
        "shortBreakDuration": "5m",
        "longBreakDuration": "15m",
    }
    assert store.get(STATE_KEY)["timeLeft"] == 17
    assert store.load_config() == config
    assert store.load_raw_inputs() == raw
    assert store.load_state() == snapshot


def test_each_record_is_its_own_file(store):
    store.save_config(TimerConfig())
    store.save_state(SchedulerSnapshot())
    assert store.path_for(CONFIG_KEY).exists()
    assert store.path_for(STATE_KEY).exists()
    assert not store.path_for(CONFIG_KEY).with_suffix(".json.tmp").exists()


def test_corrupt_record_falls_back_to_default(store):
    path = store.path_for(CONFIG_KEY)
    path.parent.mkdir(parents=True)
    path.write_text("{not json")

    assert store.load_config() is None
    assert store.load_config_or_default(TimerConfig()) == TimerConfig()
    assert json.loads(path.read_text()) == TimerConfig().to_record()


def test_undecodable_record_falls_back_to_default(store):
    path = store.path_for(CONFIG_KEY)
    path.parent.mkdir(parents=True)
    path.write_bytes(b'{"workDuration": "\xff\xfe"}')

    assert store.get(CONFIG_KEY) is None
    assert store.load_config_or_default(TimerConfig()) == TimerConfig()
    assert store.load_config() == TimerConfig()


def test_invalid_records_are_ignored(store):
    store.set(CONFIG_KEY, {"workDuration": 60, "sessionsBeforeLongBreak": 0})
    store.set(STATE_KEY, {"phase": "napping", "timeLeft": 5})
    store.set(RAW_INPUTS_KEY, ["not", "a", "record"])

    assert store.load_config() is None
    assert store.load_state() is None
    assert store.load_raw_inputs() is None


def test_delete(store):
    store.save_state(SchedulerSnapshot())
    store.delete(STATE_KEY)
    assert store.load_state() is None
    store.delete(STATE_KEY)
