"""Tests for the episode event ledger."""

from datetime import date

import pytest

from sfl.constants import ScoringEventKind
from sfl.ledger import EpisodeLedger
from sfl.models import ScoringEvent
from sfl.store import MemoryStore


@pytest.fixture
def ledger():
    return EpisodeLedger(MemoryStore(), 'league-1')


class TestRecordingEpisodes:
    """Tests for saving and reading episode events."""

    def test_set_and_get(self, ledger):
        """Test a round trip through the store with mixed event inputs."""
        ledger.set_episode_events(
            50,
            1,
            {
                'c1': ['immunity_win', ('voted_at_tribal', 2)],
                'c2': [{'kind': 'found_idol'}, ScoringEvent(ScoringEventKind.SURVIVED_EPISODE)],
            },
            air_date=date(2026, 2, 25),
        )
        entry = ledger.get_episode(50, 1)
        assert entry.air_date == date(2026, 2, 25)
        assert entry.events['c1'] == [
            ScoringEvent(ScoringEventKind.IMMUNITY_WIN, 1),
            ScoringEvent(ScoringEventKind.VOTED_AT_TRIBAL, 2),
        ]
        assert len(entry.events['c2']) == 2

    def test_save_replaces_whole_episode(self, ledger):
        """Test that a re-save drops castaways missing from the new map."""
        ledger.set_episode_events(50, 1, {'c1': ['immunity_win'], 'c2': ['found_idol']})
        ledger.set_episode_events(50, 1, {'c2': ['survived_episode']})
        assert ledger.castaways_in_episode(50, 1) == {'c2'}
        assert ledger.points_for_castaway_episode(50, 1, 'c1') == 0

    def test_unknown_kind_rejected(self, ledger):
        with pytest.raises(ValueError):
            ledger.set_episode_events(50, 1, {'c1': ['won_a_car']})
        assert ledger.get_episode(50, 1) is None

    def test_missing_episode(self, ledger):
        assert ledger.get_episode(50, 7) is None
        assert ledger.castaway_breakdown(50, 7, 'c1') == (0, {})

    def test_recorded_episodes_numeric_order(self, ledger):
        for episode in (10, 2, 1):
            ledger.set_episode_events(50, episode, {'c1': ['survived_episode']})
        assert ledger.recorded_episodes(50) == [1, 2, 10]

    def test_scopes_are_separate(self):
        """Test that two leagues' ledgers do not see each other's episodes."""
        store = MemoryStore()
        EpisodeLedger(store, 'league-1').set_episode_events(50, 1, {'c1': ['immunity_win']})
        assert EpisodeLedger(store, 'league-2').get_episode(50, 1) is None


class TestLedgerScoring:
    """Tests for points derived from the ledger."""

    def test_voted_out_episode(self, ledger):
        """Test that a castaway voted out in episode 4 scores -10 there."""
        ledger.set_episode_events(50, 2, {'c3': ['immunity_win', 'survived_episode']})
        ledger.set_episode_events(50, 4, {'c3': ['voted_out']})
        assert ledger.points_for_castaway_episode(50, 4, 'c3') == -10
        assert ledger.points_for_castaway_season(50, 'c3') == -4

    def test_breakdown(self, ledger):
        ledger.set_episode_events(50, 1, {'c1': ['immunity_win', 'survived_episode']})
        assert ledger.castaway_breakdown(50, 1, 'c1') == (
            6,
            {'immunity_win': 5, 'survived_episode': 1},
        )

    def test_episode_scores(self, ledger):
        ledger.set_episode_events(50, 1, {'c1': ['immunity_win'], 'c2': ['voted_out']})
        ledger.set_episode_events(50, 2, {'c1': ['survived_episode']})
        assert ledger.episode_scores(50) == {1: {'c1': 5, 'c2': -10}, 2: {'c1': 1}}

    def test_point_overrides(self):
        """Test that a league's point table flows into ledger scores."""
        ledger = EpisodeLedger(MemoryStore(), 'league-1', {ScoringEventKind.IMMUNITY_WIN: 2})
        ledger.set_episode_events(50, 1, {'c1': ['immunity_win', 'survived_episode']})
        assert ledger.points_for_castaway_episode(50, 1, 'c1') == 3

    def test_resave_is_idempotent(self, ledger):
        """Test that saving the same events twice leaves the scores unchanged."""
        events = {'c1': ['immunity_win'], 'c2': ['voted_out']}
        ledger.set_episode_events(50, 1, events)
        before = ledger.episode_scores(50)
        ledger.set_episode_events(50, 1, events)
        assert ledger.episode_scores(50) == before
