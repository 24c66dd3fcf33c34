import pytest
import yaml
from pydantic import ValidationError

from break_scheduler.core.config import Settings, get_settings


def test_defaults_follow_home(settings_env):
    settings = Settings.load()
    assert settings.data_dir == settings_env / "data"
    assert settings.state_dir == settings_env / "data" / "state"
    assert settings.control_file == settings_env / "data" / "control.json"
    assert settings.tick_interval_seconds == 1.0
    assert settings.defaults.work_duration == 24 * 60


def test_yaml_file_is_loaded(settings_env):
    path = settings_env / "custom.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "log_level": "DEBUG",
                "tick_interval_seconds": 0.5,
                "defaults": {"workDuration": 1500, "totalCycles": 4},
            }
        )
    )
    settings = Settings.load(path)
    assert settings.log_level == "DEBUG"
    assert settings.tick_interval_seconds == 0.5
    assert settings.defaults.work_duration == 1500
    assert settings.defaults.total_cycles == 4


def test_default_yaml_path_follows_config_dir(settings_env):
    config_dir = settings_env / "config"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(yaml.safe_dump({"control_poll_seconds": 2.0}))
    settings = Settings.load()
    assert settings.config_file == config_dir / "config.yaml"
    assert settings.control_poll_seconds == 2.0


def test_environment_overrides_yaml(settings_env, monkeypatch):
    path = settings_env / "custom.yaml"
    path.write_text(yaml.safe_dump({"log_level": "DEBUG", "tick_interval_seconds": 0.5}))
    monkeypatch.setenv("BREAK_SCHEDULER_LOG_LEVEL", "ERROR")
    settings = Settings.load(path)
    assert settings.log_level == "ERROR"
    assert settings.tick_interval_seconds == 0.5


def test_environment_overrides_defaults(settings_env, monkeypatch):
    monkeypatch.setenv("BREAK_SCHEDULER_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("BREAK_SCHEDULER_DEFAULTS__WORK_DURATION", "600")
    settings = get_settings()
    assert settings.log_level == "WARNING"
    assert settings.defaults.work_duration == 600
    assert get_settings() is settings


def test_save_and_reload(settings_env):
    settings = Settings.load()
    settings.save()
    assert settings.config_file.exists()
    assert Settings.load(settings.config_file) == settings


def test_ensure_directories(settings_env):
    settings = Settings.load()
    settings.ensure_directories()
    assert settings.state_dir.is_dir()
    assert settings.log_dir.is_dir()
    assert settings.config_dir.is_dir()


@pytest.mark.parametrize(
    "values",
    [
        {"log_level": "LOUD"},
        {"tick_interval_seconds": 0},
        {"defaults": {"sessions_before_long_break": 0}},
    ],
)
def test_invalid_settings_rejected(settings_env, values):
    with pytest.raises(ValidationError):
        Settings(**values)
