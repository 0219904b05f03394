"""Logging handle with an explicit shutdown lifecycle.

Components receive a :class:`LogHandle` instead of reaching for a module
level logger. The handle stays writable while the process is shutting down
(``DRAINING``) so that ticks still completing can report their final lines,
and only stops emitting once :meth:`LogHandle.close` has been called.
"""

import logging
import threading
from enum import Enum
from typing import IO, Any, List, Optional

ROOT_LOGGER_NAME = "mouse_idle_stats"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] (%(name)s.%(funcName)s) %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogState(Enum):
    """Lifecycle of a log handle."""

    ACTIVE = "active"
    DRAINING = "draining"
    CLOSED = "closed"


class _Lifecycle:
    """State shared by a handle and all of its children."""

    def __init__(self, handlers: Optional[List[logging.Handler]] = None):
        self.state = LogState.ACTIVE
        self.handlers = list(handlers or [])
        self.lock = threading.RLock()


class LogHandle:
    """Injected logging handle.

    Example:
        >>> log = LogHandle.configure("INFO")
        >>> log.child("detector").info("Started")
        >>> log.begin_shutdown()
        >>> log.close()
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        _lifecycle: Optional[_Lifecycle] = None,
    ):
        """Initialize log handle.

        Args:
            logger: Logger to write to (default: the package logger)
        """
        self.logger = logger or logging.getLogger(ROOT_LOGGER_NAME)
        self._lifecycle = _lifecycle or _Lifecycle()

    @classmethod
    def configure(cls, level: str = "INFO", stream: Optional[IO[str]] = None) -> "LogHandle":
        """Attach a console handler to the package logger.

        Args:
            level: Log level name
            stream: Output stream (default: stderr)

        Returns:
            Handle owning the installed handler
        """
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.setLevel(level)

        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

        return cls(logger, _Lifecycle([handler]))

    def child(self, name: str) -> "LogHandle":
        """Get a handle for a sub-logger sharing this handle's lifecycle."""
        return LogHandle(self.logger.getChild(name), self._lifecycle)

    @property
    def state(self) -> LogState:
        """Current lifecycle state."""
        return self._lifecycle.state

    def begin_shutdown(self) -> None:
        """Enter the draining phase; messages are still written."""
        with self._lifecycle.lock:
            if self._lifecycle.state is LogState.ACTIVE:
                self._lifecycle.state = LogState.DRAINING

    def close(self) -> None:
        """Flush and detach handlers. Later log calls are no-ops."""
        with self._lifecycle.lock:
            if self._lifecycle.state is LogState.CLOSED:
                return
            self._lifecycle.state = LogState.CLOSED
            for handler in self._lifecycle.handlers:
                handler.flush()
                logging.getLogger(ROOT_LOGGER_NAME).removeHandler(handler)
                handler.close()
            self._lifecycle.handlers.clear()

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a message unless the handle is closed."""
        self._emit(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, *args, **kwargs)

    def _emit(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        # Held while emitting so close() cannot detach handlers mid-record
        with self._lifecycle.lock:
            if self._lifecycle.state is LogState.CLOSED:
                return
            # stacklevel points funcName at the component method, not this handle
            self.logger.log(level, msg, *args, stacklevel=3, **kwargs)
