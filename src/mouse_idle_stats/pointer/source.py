"""Read the current pointer position."""

from typing import Tuple


class PointerSource:
    """Current pointer coordinate provider.

    Backed by pyautogui, which is imported on first use so the package can be
    imported on machines without a display.
    """

    def current_position(self) -> Tuple[int, int]:
        """Get the current pointer coordinate.

        Returns:
            (x, y) screen coordinate

        Raises:
            Exception: Whatever the platform backend raises; callers treat
                sampling failures as fatal
        """
        import pyautogui  # type: ignore[import-untyped]

        x, y = pyautogui.position()
        return int(x), int(y)
