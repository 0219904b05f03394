"""Idle detection engine and process lifecycle."""

from mouse_idle_stats.monitor.detector import IdleDetector
from mouse_idle_stats.monitor.runner import MonitorRunner

__all__ = ["IdleDetector", "MonitorRunner"]
