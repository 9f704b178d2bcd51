"""
Unit tests for schedule entries.
"""

from datetime import timedelta

import pytest

from carrousel.scheduling import INELIGIBLE_FRACTION, ScheduleEntry


@pytest.mark.unit
class TestUnplayedWithTotalWeight:
    """Tests for interval derivation."""

    def test_two_equal_items(self, make_content, now):
        """Two items of duration 10 and weight 1 wait 10s between plays."""
        content = make_content(duration=10, weight=1)

        entry = ScheduleEntry.unplayed_with_total_weight(content, 2, now)

        assert entry.interval == 10
        assert entry.last_played == now - timedelta(seconds=10)

    def test_single_item_has_zero_interval(self, make_content, now):
        """A one-item catalog never has to wait for anything else."""
        content = make_content(duration=5, weight=1)

        entry = ScheduleEntry.unplayed_with_total_weight(content, 1, now)

        assert entry.interval == 0
        assert entry.last_played == now

    def test_heavier_items_wait_less(self, make_content, now):
        """Higher weight means a shorter interval."""
        light = ScheduleEntry.unplayed_with_total_weight(
            make_content(duration=10, weight=1), 6, now
        )
        heavy = ScheduleEntry.unplayed_with_total_weight(
            make_content(duration=10, weight=3), 6, now
        )

        assert light.interval == 50
        assert heavy.interval == 10

    def test_longer_items_wait_longer(self, make_content, now):
        """Interval scales with the item's own duration."""
        short = ScheduleEntry.unplayed_with_total_weight(
            make_content(duration=10, weight=1), 4, now
        )
        long = ScheduleEntry.unplayed_with_total_weight(
            make_content(duration=40, weight=1), 4, now
        )

        assert long.interval == 4 * short.interval

    def test_starts_fully_due(self, make_content, now):
        """Every new entry has exactly one interval elapsed."""
        content = make_content(duration=10, weight=2)

        entry = ScheduleEntry.unplayed_with_total_weight(content, 5, now)

        assert entry.elapsed_fraction(now) == pytest.approx(1.0)
        assert entry.time_adjusted_weight(now) == pytest.approx(2.0)


@pytest.mark.unit
class TestTimeAdjustedWeight:
    """Tests for the decaying eligibility weight."""

    @pytest.fixture
    def entry(self, make_content, now):
        """Entry with a 50s interval and weight 2, played at ``now``."""
        return ScheduleEntry(make_content(duration=10, weight=2), 50.0, now)

    def test_zero_right_after_play(self, entry, now):
        """Just played content is not eligible."""
        assert entry.time_adjusted_weight(now) == 0
        assert entry.time_adjusted_weight(now + timedelta(milliseconds=1)) == 0

    def test_zero_until_threshold(self, entry, now):
        """Weight stays zero below 20% of the interval."""
        assert entry.time_adjusted_weight(now + timedelta(seconds=9.9)) == 0

    def test_eligible_at_threshold(self, entry, now):
        """At exactly 20% of the interval the entry becomes eligible."""
        weight = entry.time_adjusted_weight(now + timedelta(seconds=10))

        assert weight == pytest.approx(INELIGIBLE_FRACTION * 2)

    def test_grows_linearly_without_bound(self, entry, now):
        """Weight keeps growing the longer the entry waits."""
        one_interval = entry.time_adjusted_weight(now + timedelta(seconds=50))
        ten_intervals = entry.time_adjusted_weight(now + timedelta(seconds=500))

        assert one_interval == pytest.approx(2.0)
        assert ten_intervals == pytest.approx(20.0)

    def test_clock_going_backwards(self, entry, now):
        """Negative elapsed time counts as just played."""
        assert entry.time_adjusted_weight(now - timedelta(seconds=100)) == 0

    def test_zero_interval_always_full_weight(self, make_content, now):
        """A zero interval entry is always eligible at its configured weight."""
        entry = ScheduleEntry(make_content(duration=5, weight=1.5), 0.0, now)

        assert entry.time_adjusted_weight(now) == 1.5
        assert entry.time_adjusted_weight(now + timedelta(hours=3)) == 1.5


@pytest.mark.unit
class TestWithLastPlayed:
    """Tests for replaying an entry."""

    def test_returns_new_entry(self, make_content, now):
        """Only last_played changes and the original is untouched."""
        original = ScheduleEntry(make_content(), 10.0, now - timedelta(seconds=30))
        later = now + timedelta(seconds=5)

        replayed = original.with_last_played(later)

        assert replayed is not original
        assert replayed.last_played == later
        assert replayed.content == original.content
        assert replayed.interval == original.interval
        assert original.last_played == now - timedelta(seconds=30)

    def test_entries_are_immutable(self, make_content, now):
        """Entries cannot be modified in place."""
        entry = ScheduleEntry(make_content(), 10.0, now)

        with pytest.raises(AttributeError):
            entry.last_played = now
