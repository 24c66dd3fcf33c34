"""Persistence for the timer's configuration and state records."""

from break_scheduler.storage.state_store import StateStore

__all__ = ["StateStore"]
