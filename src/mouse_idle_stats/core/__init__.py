"""Core data model, settings and scheduling."""

from mouse_idle_stats.core.config import ConfigManager
from mouse_idle_stats.core.log_handle import LogHandle, LogState
from mouse_idle_stats.core.models import (
    IdleAccumulator,
    IdleEpisode,
    PointerSample,
    format_duration,
)
from mouse_idle_stats.core.scheduler import Schedule, ScheduleKind, Scheduler

__all__ = [
    "ConfigManager",
    "LogHandle",
    "LogState",
    "IdleAccumulator",
    "IdleEpisode",
    "PointerSample",
    "format_duration",
    "Schedule",
    "ScheduleKind",
    "Scheduler",
]
