"""Process lifecycle for the idle monitor."""

import signal
import threading
from typing import Any, Optional

from mouse_idle_stats.core.config import ConfigManager
from mouse_idle_stats.core.log_handle import LogHandle
from mouse_idle_stats.monitor.detector import IdleDetector


class MonitorRunner:
    """Run the idle detector until a shutdown signal or a fatal error.

    Provides:
    - SIGINT/SIGTERM handling
    - Exit code 1 when idle detection fails
    - Ordered shutdown: detector first, log handle last
    """

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        log: Optional[LogHandle] = None,
        detector: Optional[IdleDetector] = None,
        poll_interval: float = 0.5,
    ):
        """Initialize runner.

        Args:
            config: Monitor settings
            log: Log handle, closed when the runner shuts down
            detector: Idle detector (default: built from config)
            poll_interval: How often the main thread re-checks the shutdown flag
        """
        self.config = config or ConfigManager()
        self.log = log or LogHandle()
        self.poll_interval = poll_interval
        self.exit_code = 0
        self.error: Optional[BaseException] = None
        self._shutdown_event = threading.Event()

        self.detector = detector or IdleDetector(
            config=self.config,
            on_fatal=self.fail,
            log=self.log.child("detector"),
        )

    def run(self, install_signal_handlers: bool = True) -> int:
        """Start the detector and block until shutdown.

        Args:
            install_signal_handlers: Register SIGINT/SIGTERM handlers

        Returns:
            Process exit code
        """
        if install_signal_handlers:
            self._setup_signal_handlers()

        self.detector.start()
        # Timed waits keep the main thread responsive to signals
        while not self._shutdown_event.wait(self.poll_interval):
            pass

        self.shutdown()
        return self.exit_code

    def request_stop(self) -> None:
        """Ask the runner to shut down normally."""
        self._shutdown_event.set()

    def fail(self, error: BaseException) -> None:
        """Shut down with exit code 1 after an unrecoverable detector error."""
        self.error = error
        self.exit_code = 1
        self._shutdown_event.set()

    def shutdown(self) -> None:
        """Stop the detector, then close the log handle."""
        self.log.begin_shutdown()
        try:
            self.detector.stop()
        finally:
            self.log.close()

    def _setup_signal_handlers(self) -> None:
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

    def _signal_handler(self, signum: int, frame: Any) -> None:
        """Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        self.log.info(f"Received signal {signum}, shutting down...")
        self.request_stop()
