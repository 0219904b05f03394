"""Pytest configuration and shared fixtures."""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

import pytest  # type: ignore[import-not-found]

from mouse_idle_stats.core.log_handle import LogHandle


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest."""
    config.addinivalue_line("markers", "slow: Tests that run real scheduler threads")


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakePointer:
    """Pointer source returning a settable coordinate."""

    def __init__(self, x: int = 5, y: int = 5):
        self.position = (x, y)
        self.error: Optional[Exception] = None
        self.calls = 0

    def current_position(self) -> Tuple[int, int]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.position


class FakeActuator:
    """Actuator recording every absolute move."""

    def __init__(self) -> None:
        self.moves: List[Tuple[int, int]] = []
        self.fail_on: Optional[int] = None

    def move_to(self, x: int, y: int) -> None:
        if self.fail_on is not None and len(self.moves) == self.fail_on:
            self.fail_on = None
            raise RuntimeError("pointer device unavailable")
        self.moves.append((x, y))

    def move_by(self, dx: int, dy: int) -> None:
        raise AssertionError("keep-alive uses absolute moves")


class LinkedActuator(FakeActuator):
    """Actuator that also moves the fake pointer it is attached to."""

    def __init__(self, pointer: FakePointer) -> None:
        super().__init__()
        self.pointer = pointer

    def move_to(self, x: int, y: int) -> None:
        super().move_to(x, y)
        self.pointer.position = (x, y)


@pytest.fixture
def clock() -> FakeClock:
    """Clock starting at a fixed time."""
    return FakeClock(datetime(2024, 11, 10, 14, 0, 0))


@pytest.fixture
def pointer() -> FakePointer:
    """Stationary pointer at (5, 5)."""
    return FakePointer()


@pytest.fixture
def actuator() -> FakeActuator:
    """Recording actuator."""
    return FakeActuator()


@pytest.fixture
def linked_actuator(pointer: FakePointer) -> LinkedActuator:
    """Actuator driving the shared fake pointer."""
    return LinkedActuator(pointer)


@pytest.fixture
def log(caplog: pytest.LogCaptureFixture) -> LogHandle:
    """Log handle whose records reach caplog."""
    caplog.set_level(logging.DEBUG, logger="tests")
    return LogHandle(logging.getLogger("tests"))
