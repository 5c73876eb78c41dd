"""Unit tests for the scoring event catalog."""

import pytest

from sfl.constants import ALL_EVENT_TYPES, SCORING_EVENT_POINTS, ScoringEventKind
from sfl.models import ScoringEvent
from sfl.scoring import get_event_description, get_event_label, point_value, points_from_events


class TestPointValues:
    """Tests for the default point table."""

    def test_default_values(self):
        """Test the headline event values."""
        assert point_value(ScoringEventKind.VOTED_OUT) == -10
        assert point_value(ScoringEventKind.SURVIVED_EPISODE) == 1
        assert point_value(ScoringEventKind.IMMUNITY_WIN) == 5
        assert point_value(ScoringEventKind.SEASON_WINNER) == 10

    def test_every_kind_has_a_value(self):
        """Test that the table covers the full catalog."""
        assert set(SCORING_EVENT_POINTS) == set(ALL_EVENT_TYPES)

    def test_string_kind_accepted(self):
        """Test lookup by the stored string value."""
        assert point_value('found_idol') == 5

    def test_unknown_kind_rejected(self):
        """Test that unknown kinds raise ValueError."""
        with pytest.raises(ValueError):
            point_value('won_the_lottery')

    def test_override_table(self):
        """Test per-league point overrides."""
        overrides = {ScoringEventKind.IMMUNITY_WIN: 8}
        assert point_value(ScoringEventKind.IMMUNITY_WIN, overrides) == 8

    def test_partial_override_falls_back(self):
        """Test that kinds missing from an override table use the defaults."""
        overrides = {ScoringEventKind.IMMUNITY_WIN: 8}
        assert point_value(ScoringEventKind.VOTED_OUT, overrides) == -10


class TestPointsFromEvents:
    """Tests for scoring a castaway's episode events."""

    def test_voted_out_is_negative(self):
        """Test that a vote-out alone scores -10, not floored at zero."""
        points, breakdown = points_from_events([ScoringEvent(ScoringEventKind.VOTED_OUT)])
        assert points == -10
        assert breakdown == {'voted_out': -10}

    def test_repeated_kinds_sum(self):
        """Test that counts multiply and repeated kinds accumulate."""
        events = [
            ScoringEvent(ScoringEventKind.VOTED_AT_TRIBAL, 2),
            ScoringEvent(ScoringEventKind.VOTED_AT_TRIBAL),
            ScoringEvent(ScoringEventKind.SURVIVED_EPISODE),
        ]
        points, breakdown = points_from_events(events)
        assert points == 10
        assert breakdown == {'voted_at_tribal': 9, 'survived_episode': 1}

    def test_zero_count_skipped(self):
        """Test that zero-count events leave no breakdown entry."""
        points, breakdown = points_from_events([ScoringEvent(ScoringEventKind.FOUND_IDOL, 0)])
        assert points == 0
        assert breakdown == {}

    def test_no_events(self):
        """Test an empty event list."""
        assert points_from_events([]) == (0, {})

    def test_overrides_applied(self):
        """Test that an injected point table changes the total."""
        events = [ScoringEvent(ScoringEventKind.IMMUNITY_WIN), ScoringEvent(ScoringEventKind.MADE_JURY)]
        points, _ = points_from_events(events, {ScoringEventKind.IMMUNITY_WIN: 1})
        assert points == 4

    def test_breakdown_sums_to_total(self):
        """Test breakdown consistency for a busy episode."""
        events = [
            ScoringEvent(ScoringEventKind.TEAM_CHALLENGE_WIN),
            ScoringEvent(ScoringEventKind.FOUND_IDOL),
            ScoringEvent(ScoringEventKind.USED_IDOL_SUCCESSFULLY),
            ScoringEvent(ScoringEventKind.SURVIVED_EPISODE),
        ]
        points, breakdown = points_from_events(events)
        assert points == 12
        assert sum(breakdown.values()) == points


class TestEventText:
    """Tests for labels and descriptions."""

    def test_label(self):
        assert get_event_label(ScoringEventKind.FIRE_MAKING_WIN)

    def test_positive_description(self):
        """Test that positive kinds state their value."""
        text = get_event_description(ScoringEventKind.IMMUNITY_WIN)
        assert text['title'] == get_event_label(ScoringEventKind.IMMUNITY_WIN)
        assert text['description'].endswith('Worth +5 points.')

    def test_negative_description(self):
        """Test that voted_out reads as a deduction."""
        text = get_event_description(ScoringEventKind.VOTED_OUT)
        assert text['description'].endswith('Deducts 10 points from their total.')
