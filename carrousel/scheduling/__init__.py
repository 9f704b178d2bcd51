"""
Carrousel Scheduling Module

Weighted, wait-aware selection of the next content to display.

Components:
- ScheduleEntry: Per-content interval and last-played bookkeeping
- Playlist: Immutable snapshot with the advance() transition
- SelectionStats: Target vs. actual selection distribution
- simulate: Offline rotation against a virtual clock
"""

from .entry import INELIGIBLE_FRACTION, ScheduleEntry
from .playlist import MASS_TOLERANCE, Playlist, cumulative_distribution, select_index
from .simulation import SimulationResult, simulate
from .stats import SelectionStats

__all__ = [
    # Entries
    "INELIGIBLE_FRACTION",
    "ScheduleEntry",
    # Playlist
    "MASS_TOLERANCE",
    "Playlist",
    "cumulative_distribution",
    "select_index",
    # Statistics
    "SelectionStats",
    # Simulation
    "SimulationResult",
    "simulate",
]
