"""Move the physical pointer."""

import threading
from typing import Any


class ActuatorError(Exception):
    """Pointer move failed."""

    pass


class PointerActuator:
    """Serialized pointer mover.

    All instances share one lock, so two tasks never move the physical
    pointer at the same time.
    """

    _lock = threading.Lock()

    def move_to(self, x: int, y: int) -> None:
        """Move the pointer to an absolute coordinate.

        Raises:
            ActuatorError: If the backend fails to move the pointer
        """
        with self._lock:
            self._call("moveTo", x, y)

    def move_by(self, dx: int, dy: int) -> None:
        """Move the pointer relative to its current coordinate.

        Raises:
            ActuatorError: If the backend fails to move the pointer
        """
        with self._lock:
            self._call("moveRel", dx, dy)

    def _call(self, method: str, *args: Any) -> None:
        try:
            import pyautogui  # type: ignore[import-untyped]

            # A pointer parked in a screen corner must still be movable
            pyautogui.FAILSAFE = False
            getattr(pyautogui, method)(*args, _pause=False)
        except Exception as e:
            raise ActuatorError(f"Pointer {method}{args} failed: {e}") from e
