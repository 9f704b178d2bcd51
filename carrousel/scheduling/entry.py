"""
Per-content schedule bookkeeping.

Each entry knows how long its content should wait between plays and when it
last left the screen. From that it derives an eligibility weight that is zero
right after a play and grows without bound the longer the content waits.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from carrousel.content import Content

# Less than this share of the interval elapsed => zero chance of showing up.
INELIGIBLE_FRACTION: float = 0.2


@dataclass(frozen=True)
class ScheduleEntry:
    """
    Schedule state for one catalog item.

    Attributes:
        content: The content this entry schedules
        interval: Target seconds between plays, fixed at construction
        last_played: When the content was last taken off screen
    """

    content: Content
    interval: float
    last_played: datetime

    def elapsed_fraction(self, current_time: datetime) -> float:
        """
        Share of the interval that has passed since the last play.

        A zero interval only happens for a single-item catalog, where the
        item is its own successor; it is always fully due.
        """
        if self.interval <= 0:
            return 1.0
        last_interval = (current_time - self.last_played).total_seconds()
        return last_interval / self.interval

    def time_adjusted_weight(self, current_time: datetime) -> float:
        """
        Weight of this entry at ``current_time``.

        Args:
            current_time: Time the next selection is made

        Returns:
            0 while less than 20% of the interval has elapsed, otherwise
            the elapsed fraction times the configured weight.
        """
        adjustment = self.elapsed_fraction(current_time)
        if adjustment < INELIGIBLE_FRACTION:
            return 0.0
        return adjustment * self.content.weight

    def with_last_played(self, last_played: datetime) -> "ScheduleEntry":
        """Return a copy of this entry played at ``last_played``."""
        return replace(self, last_played=last_played)

    @classmethod
    def unplayed_with_total_weight(
        cls,
        content: Content,
        total_weight: float,
        current_time: datetime,
    ) -> "ScheduleEntry":
        """
        Create an entry for content that has not been played yet.

        The interval is how long every other item needs, at its own share,
        before this content's turn comes around again. The entry starts with
        exactly one interval elapsed so every item is equally due at boot.

        Args:
            content: Content to schedule
            total_weight: Sum of the weights of the whole catalog
            current_time: Construction time

        Returns:
            New ScheduleEntry
        """
        # Same as total_weight * duration / weight - duration, but exactly
        # zero when the content is the whole catalog.
        interval = content.duration * (total_weight - content.weight) / content.weight
        return cls(
            content=content,
            interval=interval,
            last_played=current_time - timedelta(seconds=interval),
        )
