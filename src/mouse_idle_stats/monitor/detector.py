"""Pointer idle detection.

Two fixed-rate tasks sample the pointer:

- the *checker* runs every ``detector.checking_interval`` seconds and trips
  as soon as two consecutive samples share a coordinate;
- the *counter* runs every ``detector.counter_interval`` seconds, but only
  does work once the checker has tripped. It follows the episode closely
  until the pointer moves again, then hands control back to the checker.

Every closed episode is reported one checking interval longer than the
timestamps alone say, because the sample that tripped the checker was
already up to one interval old.
"""

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from mouse_idle_stats.core.config import ConfigManager
from mouse_idle_stats.core.log_handle import LogHandle
from mouse_idle_stats.core.models import IdleAccumulator, PointerSample, format_duration
from mouse_idle_stats.core.scheduler import Scheduler
from mouse_idle_stats.pointer.actuator import PointerActuator
from mouse_idle_stats.pointer.keep_alive import KeepAliveDriver, SuppressedPoint
from mouse_idle_stats.pointer.source import PointerSource


class IdleDetector:
    """Track pointer idle episodes and the lifetime idle total."""

    def __init__(
        self,
        on_fatal: Callable[[BaseException], None],
        config: Optional[ConfigManager] = None,
        pointer_source: Optional[PointerSource] = None,
        actuator: Optional[PointerActuator] = None,
        clock: Callable[[], datetime] = datetime.now,
        log: Optional[LogHandle] = None,
    ):
        """Initialize idle detector.

        Args:
            on_fatal: Called with the error when a tick fails; the owner is
                expected to shut the detector down and exit non-zero
            config: Monitor settings (default: built-in defaults)
            pointer_source: Pointer coordinate provider
            actuator: Pointer mover used by keep-alive
            clock: Wall clock for sample timestamps
            log: Log handle
        """
        self.config = config or ConfigManager()
        self.log = log or LogHandle().child("detector")
        self.checking_interval = timedelta(seconds=self.config.get("detector.checking_interval"))
        self.counter_interval = float(self.config.get("detector.counter_interval"))
        self.keep_alive = bool(self.config.get("keep_alive.enabled"))

        self._pointer = pointer_source or PointerSource()
        self._clock = clock
        self._on_fatal = on_fatal

        # Guards the sample state, the accumulator and the suppressed point
        self._lock = threading.RLock()
        self._last_sample: Optional[PointerSample] = None
        self._fast_poll_active = False
        self._accumulator = IdleAccumulator()
        self.suppressed = SuppressedPoint(self._lock)

        self._keep_alive_driver: Optional[KeepAliveDriver] = None
        if self.keep_alive:
            self._keep_alive_driver = KeepAliveDriver(
                self.suppressed,
                actuator=actuator,
                interval=self.config.jitter_interval,
                min_pixels=self.config.get("keep_alive.min_pixels"),
                max_pixels=self.config.get("keep_alive.max_pixels"),
                restore_delay=self.config.get("keep_alive.restore_delay"),
                log=self.log.child("keep_alive"),
            )

        self._checker = Scheduler.periodic(
            self.continuous_check,
            self.checking_interval.total_seconds(),
            name="idle-checker",
            log=self.log,
        )
        self._counter = Scheduler.periodic(
            self.counter_check, self.counter_interval, name="idle-counter", log=self.log
        )

        self._started = False
        self._stopped = False
        self._failed = False

    def start(self) -> None:
        """Start the checker and counter tasks (and keep-alive if enabled)."""
        if self._started:
            return
        self._started = True

        minutes = self.checking_interval.total_seconds() / 60
        self.log.info(f"Started (checking for {minutes:g} min of idle time)")
        if self.keep_alive:
            self.log.info("Keep OS alive during mouse idle checking")

        self._checker.start()
        self._counter.start()
        if self._keep_alive_driver:
            self._keep_alive_driver.start()

    def stop(self) -> None:
        """Stop sampling and close the open episode (if any) at the current time."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True

        self._counter.cancel()
        self._checker.cancel()
        if self._keep_alive_driver:
            self._keep_alive_driver.stop()

        with self._lock:
            self.suppressed.clear()
            self._close_episode(self._clock())
        self.log.info("Done")

    def continuous_check(self) -> None:
        """Checker tick: sample unless the counter is following an episode."""
        self._run_tick(continuous=True)

    def counter_check(self) -> None:
        """Counter tick: sample only while an episode is being followed."""
        self._run_tick(continuous=False)

    @property
    def total_idle(self) -> timedelta:
        """Sum of all closed episodes."""
        with self._lock:
            return self._accumulator.total_idle

    @property
    def is_idle(self) -> bool:
        """Check if an idle episode is open."""
        with self._lock:
            return self._accumulator.is_open

    @property
    def fast_poll_active(self) -> bool:
        """Check if the counter task is driving the episode."""
        with self._lock:
            return self._fast_poll_active

    @property
    def last_sample(self) -> Optional[PointerSample]:
        with self._lock:
            return self._last_sample

    @property
    def keep_alive_driver(self) -> Optional[KeepAliveDriver]:
        return self._keep_alive_driver

    def _run_tick(self, continuous: bool) -> None:
        if self._failed:
            return
        try:
            with self._lock:
                if self._stopped or self._failed:
                    return
                self._check_mouse_position(continuous)
        except Exception as e:
            # Idle state can no longer be trusted
            self._failed = True
            self.log.exception(f"Idle detection failed: {e}")
            self._on_fatal(e)

    def _check_mouse_position(self, continuous: bool) -> None:
        if continuous == self._fast_poll_active:
            return
        if self.suppressed.pending_restore is not None:
            # Pointer is displaced by keep-alive, not by the user
            self.log.debug("Keep-alive restore pending, sample skipped")
            return

        x, y = self._pointer.current_position()
        sample = PointerSample(x, y, self._clock())
        self.log.debug(f"{self._last_sample} - {sample}")

        if sample == self._last_sample:
            self._on_stationary(sample)
        else:
            self._on_movement(sample)
        self._last_sample = sample

    def _on_stationary(self, sample: PointerSample) -> None:
        if not self._fast_poll_active:
            if self._accumulator.open_episode(sample.observed_at):
                self.log.info("Starting counting idle time...")
            self._fast_poll_active = True
        elif self.keep_alive:
            self.suppressed.offer(sample.position)

    def _on_movement(self, sample: PointerSample) -> None:
        self._fast_poll_active = False
        self.suppressed.clear()
        self._close_episode(sample.observed_at)

    def _close_episode(self, closed_at: datetime) -> Optional[timedelta]:
        duration = self._accumulator.close_episode(closed_at, self.checking_interval)
        if duration is not None:
            self.log.info(f"End: {format_duration(duration)}")
            self.log.info(f"Total mouse idle time: {format_duration(self._accumulator.total_idle)}")
        return duration
