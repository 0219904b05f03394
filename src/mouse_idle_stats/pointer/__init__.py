"""Pointer access and keep-alive jitter."""

from mouse_idle_stats.pointer.actuator import ActuatorError, PointerActuator
from mouse_idle_stats.pointer.keep_alive import Direction, KeepAliveDriver, SuppressedPoint
from mouse_idle_stats.pointer.source import PointerSource

__all__ = [
    "ActuatorError",
    "PointerActuator",
    "Direction",
    "KeepAliveDriver",
    "SuppressedPoint",
    "PointerSource",
]
