"""
Selection statistics for a content catalog.

A weight asks for a share of screen time, not a share of plays, so every
selection is recorded together with how long it stays on screen. Imbalance
compares the screen time each entry actually got with its weight share.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from carrousel.content import Content


@dataclass
class SelectionStats:
    """Plays, screen time and starvation per catalog index."""

    target_share: Dict[int, float] = field(default_factory=dict)
    total_selections: int = 0
    selections_by_index: Dict[int, int] = field(default_factory=dict)
    seconds_by_index: Dict[int, float] = field(default_factory=dict)
    # Most selections of other entries between two plays of the same entry
    longest_gap: Dict[int, int] = field(default_factory=dict)
    _last_seen: Dict[int, int] = field(default_factory=dict, repr=False)

    @classmethod
    def for_catalog(cls, catalog: Sequence[Content]) -> "SelectionStats":
        """Create stats whose targets are the catalog's weight shares."""
        total_weight = sum(content.weight for content in catalog)
        if total_weight <= 0:
            return cls()

        return cls(
            target_share={
                index: content.weight / total_weight for index, content in enumerate(catalog)
            }
        )

    @property
    def total_seconds(self) -> float:
        return sum(self.seconds_by_index.values())

    def record_selection(self, index: int, duration: float) -> None:
        """Record that entry ``index`` went on screen for ``duration`` seconds."""
        position = self.total_selections
        self.total_selections += 1
        self.selections_by_index[index] = self.selections_by_index.get(index, 0) + 1
        self.seconds_by_index[index] = self.seconds_by_index.get(index, 0.0) + duration

        previous = self._last_seen.get(index)
        if previous is not None:
            self.longest_gap[index] = max(self.longest_gap.get(index, 0), position - previous)
        self._last_seen[index] = position

    def selection_share(self) -> Dict[int, float]:
        """Fraction of plays per entry."""
        if not self.total_selections:
            return {}
        return {
            index: count / self.total_selections
            for index, count in self.selections_by_index.items()
        }

    def screen_time_share(self) -> Dict[int, float]:
        """Fraction of screen time per entry."""
        total = self.total_seconds
        if total <= 0:
            return {}
        return {index: seconds / total for index, seconds in self.seconds_by_index.items()}

    def calculate_imbalance(self) -> Dict[int, float]:
        """Screen time share minus weight share, for every catalog entry."""
        actual = self.screen_time_share()
        return {index: actual.get(index, 0.0) - target for index, target in self.target_share.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_selections": self.total_selections,
            "total_seconds": self.total_seconds,
            "selections_by_index": dict(self.selections_by_index),
            "target_share": dict(self.target_share),
            "selection_share": self.selection_share(),
            "screen_time_share": self.screen_time_share(),
            "imbalance": self.calculate_imbalance(),
            "longest_gap": dict(self.longest_gap),
        }
