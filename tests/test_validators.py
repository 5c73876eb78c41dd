"""Tests for roster and episode validators."""

from sfl.constants import ScoringEventKind
from sfl.models import EpisodeLedgerEntry, RosterEntry, ScoringEvent
from sfl.validators import (
    validate_castaway_score,
    validate_episode,
    validate_episode_events,
    validate_roster,
)


def episode(events):
    return EpisodeLedgerEntry(
        season=50,
        episode=3,
        events={
            castaway_id: [ScoringEvent(ScoringEventKind(kind), count) for kind, count in items]
            for castaway_id, items in events.items()
        },
    )


class TestValidateRoster:
    """Tests for roster consistency checks."""

    def test_valid_roster(self):
        roster = [RosterEntry(f'c{i}') for i in range(1, 6)]
        roster.append(RosterEntry('c6', status='dropped', dropped_week=2))
        assert validate_roster('alice', roster) == []

    def test_too_many_castaways(self):
        """Test that eliminated entries count against the roster size."""
        roster = [RosterEntry(f'c{i}') for i in range(1, 6)]
        roster.append(RosterEntry('c6', status='eliminated', eliminated_week=3))
        errors = validate_roster('alice', roster)
        assert len(errors) == 1
        assert 'holds 6 castaways' in errors[0]

    def test_duplicate_entries(self):
        roster = [RosterEntry('c1'), RosterEntry('c1', status='dropped', dropped_week=1)]
        errors = validate_roster('alice', roster)
        assert any('duplicate' in e for e in errors)

    def test_dropped_without_week(self):
        errors = validate_roster('alice', [RosterEntry('c1', status='dropped')])
        assert any('dropped_week=None' in e for e in errors)

    def test_dropped_before_added(self):
        roster = [RosterEntry('c1', status='dropped', added_week=4, dropped_week=2)]
        assert any('after being dropped' in e for e in validate_roster('alice', roster))

    def test_eliminated_week_on_active(self):
        roster = [RosterEntry('c1', eliminated_week=2)]
        assert any('eliminated_week' in e for e in validate_roster('alice', roster))


class TestValidateEpisodeEvents:
    """Tests for episode event checks."""

    def test_valid_episode(self):
        entry = episode({
            'c1': [('immunity_win', 1), ('voted_at_tribal', 1), ('survived_episode', 1)],
            'c2': [('voted_out', 1), ('made_jury', 1)],
        })
        assert validate_episode_events(entry, ['c1', 'c2']) == []

    def test_unknown_castaway(self):
        entry = episode({'c99': [('immunity_win', 1)]})
        errors = validate_episode_events(entry, ['c1', 'c2'])
        assert errors == ['Episode 3: unknown castaway c99']

    def test_no_catalog_skips_check(self):
        assert validate_episode_events(episode({'c99': [('immunity_win', 1)]})) == []

    def test_once_per_episode(self):
        """Test that a castaway cannot be voted out twice in one episode."""
        entry = episode({'c1': [('voted_out', 1), ('voted_out', 1)]})
        errors = validate_episode_events(entry)
        assert len(errors) == 1
        assert 'voted_out x2' in errors[0]

    def test_repeatable_kinds_allowed(self):
        entry = episode({'c1': [('found_idol', 2), ('team_challenge_win', 3)]})
        assert validate_episode_events(entry) == []

    def test_voted_out_and_survived(self):
        entry = episode({'c1': [('voted_out', 1), ('survived_episode', 1)]})
        errors = validate_episode_events(entry)
        assert any('both voted_out and survived_episode' in e for e in errors)


class TestValidateCastawayScore:
    """Tests for score sanity warnings."""

    def test_normal_score(self):
        assert validate_castaway_score('c1', 6, {'immunity_win': 5, 'survived_episode': 1}) == []

    def test_voted_out_not_flagged(self):
        assert validate_castaway_score('c1', -10, {'voted_out': -10}) == []

    def test_high_score(self):
        warnings = validate_castaway_score('c1', 45)
        assert 'unusually high' in warnings[0]

    def test_low_score(self):
        warnings = validate_castaway_score('c1', -20)
        assert 'unusually low' in warnings[0]

    def test_breakdown_mismatch(self):
        warnings = validate_castaway_score('c1', 6, {'immunity_win': 5})
        assert 'breakdown sum (5) != total (6)' in warnings[0]

    def test_invalid_type(self):
        warnings = validate_castaway_score('c1', 6.5)
        assert 'invalid score type' in warnings[0]


class TestValidateEpisode:
    """Tests for the combined episode check."""

    def test_errors_and_warnings(self):
        entry = episode({'c1': [('voted_out', 1), ('survived_episode', 1)]})
        scores = {'c1': (50, {'voted_out': -10, 'survived_episode': 1})}
        errors, warnings = validate_episode(entry, scores, ['c1'])
        assert len(errors) == 1
        assert len(warnings) == 2
