"""Core data models for idle time accounting."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Tuple


@dataclass(frozen=True)
class PointerSample:
    """Pointer coordinate captured at a point in time.

    Attributes:
        x: Horizontal screen coordinate
        y: Vertical screen coordinate
        observed_at: When the coordinate was read

    Two samples are equal when they share the same coordinate, regardless of
    when they were observed.
    """

    x: int
    y: int
    observed_at: datetime = field(compare=False)

    @property
    def position(self) -> Tuple[int, int]:
        """Coordinate as an (x, y) tuple."""
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class IdleEpisode:
    """Contiguous span during which the pointer stayed still."""

    started_at: datetime

    def duration_until(self, closed_at: datetime, bias: timedelta) -> timedelta:
        """Calculate the episode duration when closed at the given time.

        Args:
            closed_at: Time of the sample that ended the episode
            bias: Fixed amount added to every episode (the checking interval)

        Returns:
            Episode duration
        """
        return (closed_at - self.started_at) + bias


@dataclass
class IdleAccumulator:
    """Process-lifetime idle total plus the currently open episode.

    Attributes:
        total_idle: Sum of every closed episode, never decreases
        current_episode: Episode in progress, None when the pointer is moving
    """

    total_idle: timedelta = field(default_factory=timedelta)
    current_episode: Optional[IdleEpisode] = None

    @property
    def is_open(self) -> bool:
        """Check if an idle episode is in progress."""
        return self.current_episode is not None

    def open_episode(self, started_at: datetime) -> bool:
        """Open an idle episode unless one is already in progress.

        Returns:
            True if a new episode was opened
        """
        if self.current_episode is not None:
            return False
        self.current_episode = IdleEpisode(started_at=started_at)
        return True

    def close_episode(self, closed_at: datetime, bias: timedelta) -> Optional[timedelta]:
        """Close the open episode and fold its duration into the total.

        Closing when no episode is open does nothing.

        Args:
            closed_at: Time of the sample that ended the episode
            bias: Fixed amount added to the episode duration

        Returns:
            Duration of the closed episode, or None if nothing was open
        """
        if self.current_episode is None:
            return None

        duration = self.current_episode.duration_until(closed_at, bias)
        # Clock stepped backwards: keep the total monotonic
        if duration < timedelta(0):
            duration = timedelta(0)

        self.total_idle += duration
        self.current_episode = None
        return duration


def format_duration(duration: timedelta) -> str:
    """Format a duration as HH:MM:SS (hours are not wrapped at 24)."""
    seconds = max(0, int(duration.total_seconds()))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
