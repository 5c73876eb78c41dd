"""Shared fixtures for SFL tests."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from sfl.league import LeagueManager
from sfl.schemas import Castaway, LeagueConfig
from sfl.store import MemoryStore
from sfl.week_clock import lock_time_for_week

PREMIERE = date(2026, 2, 25)  # a Wednesday
EASTERN = ZoneInfo('America/New_York')


@pytest.fixture
def league_config():
    """Season 50 config with a 12-castaway catalog (c1..c12)."""
    return LeagueConfig(
        current_season=50,
        premiere_date=PREMIERE,
        castaways=[Castaway(id=f'c{i}', name=f'Castaway {i}') for i in range(1, 13)],
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def manager(store, league_config):
    return LeagueManager(store, 'league-1', league_config)


@pytest.fixture
def week_at():
    """Return a function giving an instant inside the given season week."""

    def _week_at(week: int) -> datetime:
        if week == 0:
            return datetime(2026, 2, 24, 12, 0, tzinfo=EASTERN)
        return lock_time_for_week(PREMIERE, week - 1) + timedelta(hours=1)

    return _week_at
