"""JSON key-value store for the timer's persisted records."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from break_scheduler.timer.errors import InvalidConfigurationError
from break_scheduler.timer.schemas import RawInputs, SchedulerSnapshot, TimerConfig

logger = logging.getLogger(__name__)

CONFIG_KEY = "breakTimerConfig"
RAW_INPUTS_KEY = "breakTimerRawInputs"
STATE_KEY = "breakTimerState"


class StateStore:
    """Key-value store keeping one JSON file per record.

    Every write replaces a record's file as a whole (written to a temporary
    file, then renamed over the old one), so records never need merging or
    locking. Missing or corrupt records read back as None and callers fall
    back to defaults.
    """

    def __init__(self, directory: Path):
        self.directory = directory

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    # ----- Raw key-value access -----

    def get(self, key: str) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable record {path}: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(value, indent=2), encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)

    # ----- Typed records -----

    def load_config(self) -> TimerConfig | None:
        record = self.get(CONFIG_KEY)
        if not isinstance(record, dict):
            return None
        try:
            return TimerConfig.from_record(record)
        except InvalidConfigurationError as e:
            logger.warning(f"Ignoring stored configuration: {e}")
            return None

    def save_config(self, config: TimerConfig) -> None:
        self.set(CONFIG_KEY, config.to_record())

    def load_raw_inputs(self) -> RawInputs | None:
        record = self.get(RAW_INPUTS_KEY)
        if not isinstance(record, dict):
            return None
        try:
            return RawInputs.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Ignoring stored raw inputs: {e}")
            return None

    def save_raw_inputs(self, raw_inputs: RawInputs) -> None:
        self.set(RAW_INPUTS_KEY, raw_inputs.to_record())

    def load_state(self) -> SchedulerSnapshot | None:
        record = self.get(STATE_KEY)
        if not isinstance(record, dict):
            return None
        try:
            return SchedulerSnapshot.from_record(record)
        except ValidationError as e:
            logger.warning(f"Ignoring stored scheduler state: {e}")
            return None

    def save_state(self, snapshot: SchedulerSnapshot) -> None:
        self.set(STATE_KEY, snapshot.to_record())

    def load_config_or_default(self, default: TimerConfig) -> TimerConfig:
        """Stored configuration, or ``default`` (which is then written back)."""
        config = self.load_config()
        if config is None:
            config = default
            self.save_config(config)
        return config
