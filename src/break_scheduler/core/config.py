"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from break_scheduler.timer.schemas import TimerConfig


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BREAK_SCHEDULER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/break-scheduler")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".local/state/break-scheduler/logs")
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config/break-scheduler")

    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # Timing
    tick_interval_seconds: float = Field(default=1.0, gt=0, description="Seconds between ticks")
    control_poll_seconds: float = Field(default=0.5, gt=0, description="Control file poll interval")

    # Used when the store holds no configuration yet
    defaults: TimerConfig = Field(default_factory=TimerConfig)

    @property
    def state_dir(self) -> Path:
        """Directory holding the persisted records."""
        return self.data_dir / "state"

    @property
    def control_file(self) -> Path:
        """JSON file the running timer polls for commands."""
        return self.data_dir / "control.json"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "break_scheduler.log"

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / "config.yaml"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs and must not shadow the environment.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load(cls, config_path: Path | None = None) -> Settings:
        """Load settings from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

        Args:
            config_path: YAML file to read. Defaults to ``config.yaml`` in
                ``config_dir``, which itself may come from the environment.
        """
        config_path = config_path or cls().config_file

        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def save(self, config_path: Path | None = None) -> None:
        """Save current settings to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", exclude_none=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.load()
