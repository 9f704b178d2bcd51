"""
Offline rotation simulation.

Runs the scheduling core against a virtual clock that moves forward by the
duration of every selected item, the same way the display driver's timer does.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from carrousel.content import Content
from carrousel.scheduling.playlist import Playlist
from carrousel.scheduling.stats import SelectionStats


@dataclass
class SimulationResult:
    """Outcome of a simulated rotation."""

    selections: List[int] = field(default_factory=list)
    stats: SelectionStats = field(default_factory=SelectionStats)
    playlist: Optional[Playlist] = None
    elapsed: timedelta = timedelta(0)


def simulate(
    catalog: Sequence[Content],
    steps: int,
    start: Optional[datetime] = None,
    draw: Callable[[], float] = random.random,
    strict: bool = False,
) -> SimulationResult:
    """
    Simulate ``steps`` transitions of a rotation.

    Args:
        catalog: Content to rotate
        steps: Number of selections to make
        start: Virtual start time (defaults to now)
        draw: Source of uniform random numbers in [0, 1)
        strict: Passed through to Playlist.advance

    Returns:
        SimulationResult with the selected indices and their statistics
    """
    start = start or datetime.now()
    current_time = start
    playlist = Playlist.initial(catalog, current_time)
    result = SimulationResult(stats=SelectionStats.for_catalog(catalog))

    for _ in range(steps):
        playlist, content = playlist.advance(current_time, draw, strict=strict)
        result.selections.append(playlist.current_index)
        result.stats.record_selection(playlist.current_index, content.duration)
        current_time += timedelta(seconds=content.duration)

    result.playlist = playlist
    result.elapsed = current_time - start
    return result
