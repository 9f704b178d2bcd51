"""
Playlist state and weighted next-item selection.

A Playlist is an immutable snapshot: the schedule entries for the whole
catalog plus the index of the entry on screen. ``advance`` never modifies
the snapshot it is called on; it returns a new one together with the content
to show next.
"""

import logging
import math
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from carrousel.content import Content
from carrousel.errors import (
    ConfigurationError,
    DegenerateDistributionError,
    DistributionIntegrityError,
)
from carrousel.scheduling.entry import ScheduleEntry

logger = logging.getLogger(__name__)

# Allowed deviation of the cumulative probability mass from 1.
MASS_TOLERANCE: float = 0.01


def cumulative_distribution(weights: Sequence[float]) -> List[float]:
    """
    Build the cumulative selection probabilities for ``weights``.

    Args:
        weights: Non-negative weight per entry

    Returns:
        Running sum of ``weight / total`` per entry

    Raises:
        DegenerateDistributionError: If the weights add up to zero
        DistributionIntegrityError: If the final mass is not 1 +/- 0.01
    """
    sum_weights = sum(weights)
    if sum_weights == 0:
        raise DegenerateDistributionError(len(weights))

    running_sum = 0.0
    cumulative_probabilities = []
    for weight in weights:
        running_sum += weight / sum_weights
        cumulative_probabilities.append(running_sum)

    # Written so that a NaN mass fails the check too.
    if not abs(running_sum - 1.0) <= MASS_TOLERANCE:
        logger.error(
            f"Selection distribution is broken: weights={list(weights)}, "
            f"mass={running_sum!r}"
        )
        raise DistributionIntegrityError(running_sum, MASS_TOLERANCE)

    return cumulative_probabilities


def select_index(
    cumulative_probabilities: Sequence[float],
    weights: Sequence[float],
    rand: float,
) -> int:
    """
    Pick the first index whose cumulative probability exceeds ``rand``.

    Rounding can leave the last cumulative value just under a draw close to 1;
    the selection then falls back to the last entry with a positive weight.
    """
    for index, cumulative_prob in enumerate(cumulative_probabilities):
        if cumulative_prob > rand:
            return index

    for index in range(len(weights) - 1, -1, -1):
        if weights[index] > 0:
            return index
    return len(weights) - 1


@dataclass(frozen=True)
class Playlist:
    """
    Immutable schedule snapshot.

    Attributes:
        entries: One schedule entry per catalog item, in catalog order
        current_index: Entry currently on screen, None before the first advance
    """

    entries: Tuple[ScheduleEntry, ...]
    current_index: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, "entries", tuple(self.entries))
        if self.current_index is not None and not (
            0 <= self.current_index < len(self.entries)
        ):
            raise IndexError(
                f"current_index {self.current_index} out of range for "
                f"{len(self.entries)} entries"
            )

    @property
    def current_content(self) -> Optional[Content]:
        """Content on screen, if any."""
        if self.current_index is None:
            return None
        return self.entries[self.current_index].content

    def advance(
        self,
        current_time: datetime,
        draw: Callable[[], float] = random.random,
        strict: bool = False,
    ) -> Tuple["Playlist", Content]:
        """
        Choose the next content to display.

        The entry on screen is marked as played at ``current_time``, i.e. when
        its successor is chosen rather than when it leaves the screen.

        Args:
            current_time: Time of the transition
            draw: Source of uniform random numbers in [0, 1)
            strict: Raise instead of falling back when no entry is eligible

        Returns:
            Tuple of (new Playlist, content to display)

        Raises:
            DistributionIntegrityError: If the probabilities do not add up
            DegenerateDistributionError: If strict and nothing is eligible
        """
        entries = list(self.entries)
        if self.current_index is not None:
            entries[self.current_index] = entries[self.current_index].with_last_played(
                current_time
            )

        weights = [entry.time_adjusted_weight(current_time) for entry in entries]
        try:
            cumulative_probabilities = cumulative_distribution(weights)
        except DegenerateDistributionError:
            if strict:
                raise
            weights = self._fallback_weights(entries)
            logger.warning(
                f"No entry is eligible at {current_time.isoformat()}, "
                f"drawing from configured weights instead"
            )
            cumulative_probabilities = cumulative_distribution(weights)

        rand = draw()
        if not 0.0 <= rand < 1.0:
            raise ValueError(f"Random draw must be in [0, 1), got {rand!r}")

        index_to_play = select_index(cumulative_probabilities, weights, rand)
        content = entries[index_to_play].content
        logger.debug(
            f"Selected entry {index_to_play} ({content.type.value} {content.url}) "
            f"with r={rand:.4f}"
        )
        return Playlist(tuple(entries), index_to_play), content

    def _fallback_weights(self, entries: Sequence[ScheduleEntry]) -> List[float]:
        """Configured weights, without the entry just taken off screen."""
        weights = [entry.content.weight for entry in entries]
        if self.current_index is not None and len(entries) > 1:
            weights[self.current_index] = 0.0
        return weights

    @classmethod
    def initial(cls, catalog: Sequence[Content], current_time: datetime) -> "Playlist":
        """
        Build the startup playlist for ``catalog``.

        Args:
            catalog: Content to rotate, in display order
            current_time: Startup time

        Returns:
            Playlist with nothing on screen

        Raises:
            ConfigurationError: If the catalog is empty or an item has a
                non-positive or infinite weight or duration
        """
        if not catalog:
            raise ConfigurationError("Content catalog is empty")
        for position, content in enumerate(catalog):
            if not (content.weight > 0 and math.isfinite(content.weight)):
                raise ConfigurationError(
                    f"Catalog item {position} ({content.url}) needs a positive finite "
                    f"weight, got {content.weight!r}"
                )
            if not (content.duration > 0 and math.isfinite(content.duration)):
                raise ConfigurationError(
                    f"Catalog item {position} ({content.url}) needs a positive finite "
                    f"duration, got {content.duration!r}"
                )

        sum_weights = sum(content.weight for content in catalog)
        entries = tuple(
            ScheduleEntry.unplayed_with_total_weight(content, sum_weights, current_time)
            for content in catalog
        )
        logger.info(
            f"Initial playlist with {len(entries)} entries, total weight {sum_weights:g}"
        )
        return cls(entries, None)
