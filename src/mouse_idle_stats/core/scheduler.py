"""Periodic and one-shot task scheduling.

Each :class:`Scheduler` owns exactly one thread and one cancellation flag.
The kind of schedule is plain data (:class:`Schedule`), so periodic and
one-shot tasks share the same runner.

Example:
    >>> ticker = Scheduler.periodic(lambda: print("tick"), 5.0, name="ticker").start()
    >>> Scheduler.one_shot(lambda: print("once"), 10.0)
    >>> ticker.cancel()
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from mouse_idle_stats.core.log_handle import LogHandle


class ScheduleKind(Enum):
    """How a task is repeated."""

    PERIODIC = "periodic"
    ONE_SHOT = "one_shot"


@dataclass(frozen=True)
class Schedule:
    """Schedule configuration.

    Attributes:
        kind: Periodic or one-shot
        interval: Period (periodic) or delay (one-shot) in seconds
    """

    kind: ScheduleKind
    interval: float

    def __post_init__(self) -> None:
        if self.kind is ScheduleKind.PERIODIC and self.interval <= 0:
            raise ValueError("Periodic interval must be positive")
        if self.interval < 0:
            raise ValueError("Delay must not be negative")


def fixed_rate_delay(started: float, ticks: int, period: float, now: float) -> float:
    """Seconds to wait before the next fixed-rate tick.

    Tick N is due at ``started + N * period`` no matter how long earlier
    ticks took. A late tick is due immediately.

    Args:
        started: Monotonic time of the first tick
        ticks: Number of ticks already run
        period: Schedule period in seconds
        now: Current monotonic time

    Returns:
        Delay in seconds, never negative
    """
    return max(0.0, started + ticks * period - now)


class Scheduler:
    """Run a task once after a delay or repeatedly at a fixed rate."""

    def __init__(
        self,
        task: Callable[[], None],
        schedule: Schedule,
        name: Optional[str] = None,
        log: Optional[LogHandle] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize scheduler.

        Args:
            task: Callable to run
            schedule: When to run it
            name: Thread name (default: derived from the task)
            log: Log handle for task failures
            clock: Monotonic clock used for fixed-rate deadlines
        """
        self.task = task
        self.schedule = schedule
        self.name = name or getattr(task, "__name__", "task")
        self.log = log or LogHandle().child("scheduler")
        self._clock = clock
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def periodic(
        cls,
        task: Callable[[], None],
        period: float,
        name: Optional[str] = None,
        log: Optional[LogHandle] = None,
    ) -> "Scheduler":
        """Create a fixed-rate scheduler. Call :meth:`start` to run it.

        Args:
            task: Callable to run on every tick
            period: Seconds between tick deadlines
            name: Thread name
            log: Log handle for task failures

        Returns:
            Unstarted scheduler, used as the cancellation handle
        """
        return cls(task, Schedule(ScheduleKind.PERIODIC, period), name=name, log=log)

    @classmethod
    def one_shot(
        cls,
        task: Callable[[], None],
        delay: float,
        name: Optional[str] = None,
        log: Optional[LogHandle] = None,
    ) -> "Scheduler":
        """Run a task once after the given delay on its own thread.

        Returns:
            Started scheduler; cancelling it before the delay elapses drops the task
        """
        return cls(task, Schedule(ScheduleKind.ONE_SHOT, delay), name=name, log=log).start()

    @property
    def is_running(self) -> bool:
        """Check if the scheduler thread is alive and not cancelled."""
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._cancelled.is_set()
        )

    def start(self) -> "Scheduler":
        """Start the scheduler thread.

        Raises:
            RuntimeError: If already started
        """
        if self._thread is not None:
            raise RuntimeError(f"Scheduler {self.name} already started")

        if self.schedule.kind is ScheduleKind.PERIODIC:
            target = self._run_periodic
        else:
            target = self._run_once

        self._thread = threading.Thread(target=target, name=self.name, daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop issuing ticks.

        An in-flight tick is allowed to finish; once this returns no new tick
        will start.
        """
        self._cancelled.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run_periodic(self) -> None:
        started = self._clock()
        ticks = 0
        while not self._cancelled.is_set():
            self._invoke()
            ticks += 1
            delay = fixed_rate_delay(started, ticks, self.schedule.interval, self._clock())
            if delay > 0 and self._cancelled.wait(delay):
                break

    def _run_once(self) -> None:
        if not self._cancelled.wait(self.schedule.interval):
            self._invoke()

    def _invoke(self) -> None:
        try:
            self.task()
        except Exception:
            # One bad tick must not end the schedule
            self.log.exception(f"Task {self.name} failed")
