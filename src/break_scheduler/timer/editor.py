"""Configuration commit boundary between the host's edit fields and the scheduler."""

from __future__ import annotations

import logging
from typing import Callable

from break_scheduler.timer.durations import format_duration, parse_duration_edit
from break_scheduler.timer.errors import DurationParseError, InvalidConfigurationError
from break_scheduler.timer.schemas import DURATION_FIELDS, RawInputs, TimerConfig

logger = logging.getLogger(__name__)


class ConfigEditor:
    """Validates configuration edits before they reach the scheduler.

    Duration fields are edited as text (``"1m 30s"``, ``"+5m"``) and kept in a
    raw input mirror. Committing the text parses it against the current value;
    malformed or negative results are dropped and the mirror reverts to the
    last valid value. The counters (``sessions_before_long_break`` and
    ``total_cycles``) are committed as integers.

    Usage:
        editor = ConfigEditor(config, on_commit=scheduler.configure)
        editor.edit_text("work_duration", "+5m")
        editor.commit_text("work_duration", editor.raw_inputs.work_duration)
    """

    def __init__(
        self,
        config: TimerConfig,
        raw_inputs: RawInputs | None = None,
        on_commit: Callable[[TimerConfig], None] | None = None,
    ):
        self._config = config
        self._raw_inputs = raw_inputs or RawInputs.from_config(config)
        self.on_commit = on_commit

    @property
    def config(self) -> TimerConfig:
        return self._config

    @property
    def raw_inputs(self) -> RawInputs:
        return self._raw_inputs

    def edit_text(self, field: str, text: str) -> None:
        """Update the edit field without committing it."""
        self._raw_inputs = self._raw_inputs.replace(field, text)

    def revert(self, field: str) -> None:
        """Show the committed value again, discarding any pending edit."""
        self._raw_inputs = self._raw_inputs.replace(field, format_duration(getattr(self._config, field)))

    def commit_text(self, field: str, text: str) -> bool:
        """Parse and apply a duration edit.

        Returns:
            True if the edit was applied, False if it was rejected and the
            field reverted to the last valid value.
        """
        if field not in DURATION_FIELDS:
            raise InvalidConfigurationError(f"Not a duration field: {field}")

        current = getattr(self._config, field)
        try:
            seconds = parse_duration_edit(text, current)
        except DurationParseError as e:
            logger.debug(f"Rejected edit for {field}: {e}")
            self.revert(field)
            return False

        self._apply(self._config.replace(field, seconds))
        self.revert(field)
        return True

    def commit_value(self, field: str, value: int) -> TimerConfig:
        """Apply an integer edit to any configuration field.

        Raises:
            InvalidConfigurationError: If the value is out of range for the
                field or the field is unknown. The config is left unchanged.
        """
        config = self._config.replace(field, value)
        self._apply(config)
        if field in DURATION_FIELDS:
            self.revert(field)
        return config

    def _apply(self, config: TimerConfig) -> None:
        if config == self._config:
            return
        self._config = config
        logger.info(f"Configuration updated: {config.model_dump()}")
        if self.on_commit:
            self.on_commit(config)
