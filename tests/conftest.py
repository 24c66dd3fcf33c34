import pytest

from break_scheduler.core.config import get_settings
from break_scheduler.timer.scheduler import BreakScheduler
from break_scheduler.timer.schemas import TimerConfig


@pytest.fixture
def config():
    return TimerConfig(
        work_duration=3,
        short_break_duration=2,
        long_break_duration=4,
        sessions_before_long_break=4,
    )


@pytest.fixture
def scheduler(config):
    return BreakScheduler(config)


@pytest.fixture
def settings_env(tmp_path, monkeypatch):
    """Point settings at a scratch directory for the duration of a test."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("BREAK_SCHEDULER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("BREAK_SCHEDULER_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("BREAK_SCHEDULER_CONFIG_DIR", str(tmp_path / "config"))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()