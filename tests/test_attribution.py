"""Tests for attributing episode points to roster entries."""

from sfl.attribution import (
    attribute_points,
    credited_episodes,
    entry_points,
    is_credited,
    rosters_affected_by,
    total_points,
)
from sfl.models import RosterEntry


def dropped(castaway_id, added, dropped_week):
    return RosterEntry(castaway_id, status='dropped', added_week=added, dropped_week=dropped_week)


class TestAttributionWindow:
    """Tests for which episodes count toward a roster."""

    def test_drop_week_excluded(self):
        """Test the worked example: added week 0, dropped week 3 earns 2+5+1."""
        entry = dropped('c1', 0, 3)
        scores = {0: {'c1': 2}, 1: {'c1': 5}, 2: {'c1': 1}, 3: {'c1': 10}, 4: {'c1': 3}}
        assert entry_points(entry, scores) == 8
        assert credited_episodes(entry, scores) == [0, 1, 2]

    def test_added_week_included(self):
        """Test that the episode of the add week counts."""
        entry = RosterEntry('c1', added_week=2)
        assert not is_credited(entry, 1)
        assert is_credited(entry, 2)
        assert is_credited(entry, 9)

    def test_elimination_episode_counts(self):
        """Test that an eliminated entry earns through its elimination episode only."""
        entry = RosterEntry('c1', status='eliminated', eliminated_week=3)
        scores = {1: {'c1': 1}, 3: {'c1': 2}, 4: {'c1': 5}}
        assert entry_points(entry, scores) == 3

    def test_past_stints_still_count(self):
        """Test that a reactivated entry keeps credit for its earlier window."""
        entry = RosterEntry('c1', added_week=4, past_stints=[(0, 2)])
        scores = {n: {'c1': 1} for n in range(6)}
        assert credited_episodes(entry, scores) == [0, 1, 4, 5]
        assert entry_points(entry, scores) == 4

    def test_missing_scores_are_zero(self):
        """Test that episodes with no score for the castaway add nothing."""
        entry = RosterEntry('c1')
        assert entry_points(entry, {1: {'c2': 7}, 2: {}}) == 0


class TestTotalPoints:
    """Tests for whole-roster totals."""

    def test_negative_episode_not_floored(self):
        """Test that a vote-out episode subtracts 10 from the roster total."""
        entries = [RosterEntry('c1'), RosterEntry('c2')]
        scores = {1: {'c1': 6, 'c2': 1}, 4: {'c1': -10}}
        assert total_points(entries, scores) == -3

    def test_only_negative(self):
        """Test a roster whose only scoring episode is a vote-out."""
        assert total_points([RosterEntry('c1')], {4: {'c1': -10}}) == -10

    def test_idempotent(self):
        """Test that repeated calls give the same answer."""
        entries = [RosterEntry('c1'), dropped('c2', 0, 2), RosterEntry('c3', added_week=2)]
        scores = {1: {'c1': 3, 'c2': 5}, 2: {'c2': 4, 'c3': 1}, 3: {'c3': 6}}
        first = total_points(entries, scores)
        assert first == total_points(entries, scores)
        assert first == 3 + 5 + 1 + 6

    def test_empty_roster(self):
        assert total_points([], {1: {'c1': 5}}) == 0


class TestAttributePoints:
    """Tests for refreshing per-entry accumulated points."""

    def test_fills_accumulated_points(self):
        """Test accumulated points per entry."""
        entries = [RosterEntry('c1'), dropped('c2', 0, 2)]
        scores = {1: {'c1': 3, 'c2': 5}, 2: {'c2': 4}}
        refreshed = attribute_points(entries, scores)
        assert [e.accumulated_points for e in refreshed] == [3, 5]

    def test_inputs_not_mutated(self):
        """Test that the input entries are left alone."""
        entry = RosterEntry('c1', accumulated_points=99)
        attribute_points([entry], {1: {'c1': 1}})
        assert entry.accumulated_points == 99


class TestAffectedRosters:
    """Tests for finding rosters touched by an episode."""

    def test_dropped_entries_count(self):
        """Test that a roster which dropped the castaway is still affected."""
        rosters = {
            'alice': [RosterEntry('c1')],
            'bob': [dropped('c1', 0, 2), RosterEntry('c2')],
            'cara': [RosterEntry('c3')],
        }
        assert rosters_affected_by(rosters, ['c1']) == ['alice', 'bob']

    def test_none_affected(self):
        assert rosters_affected_by({'alice': [RosterEntry('c1')]}, ['c9']) == []
