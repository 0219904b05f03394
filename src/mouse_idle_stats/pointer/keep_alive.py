"""Keep the OS awake by jittering an idle pointer."""

import random
import threading
from enum import Enum
from typing import Callable, List, Optional, Tuple

from mouse_idle_stats.core.log_handle import LogHandle
from mouse_idle_stats.core.scheduler import Scheduler
from mouse_idle_stats.pointer.actuator import PointerActuator

Point = Tuple[int, int]


class Direction(Enum):
    """Jitter directions as unit screen offsets (y grows downwards)."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    def offset(self, point: Point, pixels: int) -> Point:
        """Coordinate ``pixels`` away from ``point`` in this direction."""
        dx, dy = self.value
        return point[0] + dx * pixels, point[1] + dy * pixels


class SuppressedPoint:
    """Coordinate the pointer is being held at, if any.

    Written by the idle detector and consumed by the keep-alive driver, both
    under the lock passed in (the detector's lock). Between a nudge and its
    restore the original coordinate is kept as :attr:`pending_restore`, so
    the detector can tell the driver's own moves from the user's.
    """

    def __init__(self, lock: Optional[threading.RLock] = None):
        self._lock = lock or threading.RLock()
        self._point: Optional[Point] = None
        self._pending_restore: Optional[Point] = None

    def offer(self, point: Point) -> None:
        with self._lock:
            self._point = point

    def take(self) -> Optional[Point]:
        """Return the held coordinate and clear it."""
        with self._lock:
            point, self._point = self._point, None
            return point

    def hold(self) -> Optional[Point]:
        """Take the held coordinate and mark it as awaiting restore."""
        with self._lock:
            point = self.take()
            if point is not None:
                self._pending_restore = point
            return point

    def release(self) -> None:
        """Mark the outstanding nudge as restored."""
        with self._lock:
            self._pending_restore = None

    def clear(self) -> None:
        with self._lock:
            self._point = None

    @property
    def is_set(self) -> bool:
        with self._lock:
            return self._point is not None

    @property
    def pending_restore(self) -> Optional[Point]:
        with self._lock:
            return self._pending_restore


class KeepAliveDriver:
    """Nudge the pointer while an idle episode is being suppressed.

    Every tick consumes the suppressed point. When one is present the pointer
    is moved a random distance in a random direction and a one-shot task puts
    it back on the exact original coordinate shortly after.
    """

    def __init__(
        self,
        suppressed: SuppressedPoint,
        actuator: Optional[PointerActuator] = None,
        interval: float = 0.5,
        min_pixels: int = 10,
        max_pixels: int = 99,
        restore_delay: float = 0.1,
        rng: Optional[random.Random] = None,
        schedule_once: Optional[Callable[[Callable[[], None], float], Optional[Scheduler]]] = None,
        log: Optional[LogHandle] = None,
    ):
        """Initialize keep-alive driver.

        Args:
            suppressed: Shared coordinate written by the detector
            actuator: Pointer mover
            interval: Tick period in seconds
            min_pixels: Smallest jitter distance
            max_pixels: Largest jitter distance (inclusive)
            restore_delay: Seconds before the pointer is put back
            rng: Random source for direction and distance
            schedule_once: Runs a callable once after a delay, returning a
                cancellable scheduler if it has one
            log: Log handle
        """
        self.suppressed = suppressed
        self.actuator = actuator or PointerActuator()
        self.min_pixels = min_pixels
        self.max_pixels = max_pixels
        self.restore_delay = restore_delay
        self.log = log or LogHandle().child("keep_alive")
        self._rng = rng or random.Random()
        self._schedule_once = schedule_once or self._default_schedule_once
        self._scheduler = Scheduler.periodic(self.jitter, interval, name="keep-alive", log=self.log)
        self._restores: List[Scheduler] = []
        self._restores_lock = threading.Lock()

    def start(self) -> None:
        self._scheduler.start()

    def stop(self) -> None:
        """Stop ticking and put the pointer back before returning.

        Pending restores are cancelled and the outstanding one (if any) is run
        right away, so the pointer is never left displaced.
        """
        self._scheduler.cancel()
        self.suppressed.clear()

        with self._restores_lock:
            restores, self._restores = self._restores, []
        for restore in restores:
            restore.cancel()

        point = self.suppressed.pending_restore
        if point is not None:
            self._restore(point)

    def pick_offset(self) -> Tuple[Direction, int]:
        """Choose a random direction and jitter distance."""
        direction = self._rng.choice(list(Direction))
        pixels = self._rng.randint(self.min_pixels, self.max_pixels)
        return direction, pixels

    def jitter(self) -> bool:
        """Run one keep-alive tick.

        Returns:
            True if the pointer was nudged
        """
        point = self.suppressed.hold()
        if point is None:
            return False

        direction, pixels = self.pick_offset()
        target = direction.offset(point, pixels)
        try:
            self.actuator.move_to(*target)
        except Exception as e:
            self.suppressed.release()
            self.log.warning(f"Keep-alive move failed: {e}")
            return False

        self.log.debug(f"Moved {direction.name.lower()} {pixels}px from {point}")
        restore = self._schedule_once(lambda: self._restore(point), self.restore_delay)
        if restore is not None:
            with self._restores_lock:
                self._restores = [r for r in self._restores if r.is_running]
                self._restores.append(restore)
        return True

    def _restore(self, point: Point) -> None:
        try:
            self.actuator.move_to(*point)
        except Exception as e:
            self.log.warning(f"Restoring pointer to {point} failed: {e}")
        finally:
            self.suppressed.release()

    def _default_schedule_once(self, task: Callable[[], None], delay: float) -> Scheduler:
        return Scheduler.one_shot(task, delay, name="keep-alive-restore", log=self.log)
