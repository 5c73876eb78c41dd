"""League configuration management."""

from datetime import time
from functools import lru_cache
from pathlib import Path
from typing import Optional

from .constants import GLOBAL_SCOPE_KEY, SCOPE_GLOBAL, SCORING_EVENT_POINTS, ScoringEventKind
from .schemas import LeagueConfig
from .utils import load_json


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Load league configuration from data/league_config.json.

    Configuration is cached after first load for performance.

    Returns:
        LeagueConfig object with validated settings

    Raises:
        FileNotFoundError: If league_config.json doesn't exist
        ValueError: If config file has invalid structure

    Example:
        from sfl.config import get_config
        config = get_config()
        print(f"Premiere: {config.premiere_date}")
    """
    config_path = Path(__file__).parent.parent / 'data' / 'league_config.json'
    return load_json(config_path, schema=LeagueConfig)


def get_lock_schedule(config: Optional[LeagueConfig] = None) -> tuple[int, time, str]:
    """Get the weekly roster lock as (weekday, time of day, time zone name)."""
    config = config or get_config()
    hours, minutes = (int(part) for part in config.lock_time.split(':'))
    return config.lock_weekday, time(hours, minutes), config.timezone


def get_event_points(config: Optional[LeagueConfig] = None) -> dict[ScoringEventKind, int]:
    """Get the point table: defaults overlaid with per-league overrides."""
    points = dict(SCORING_EVENT_POINTS)
    points.update((config or get_config()).event_points)
    return points


def resolve_scope(league_id: str, mode: str) -> str:
    """
    Storage scope for league-or-global data.

    Args:
        league_id: League the caller is acting in
        mode: 'league' or 'global'

    Returns:
        The league ID, or the shared global scope key
    """
    return GLOBAL_SCOPE_KEY if mode == SCOPE_GLOBAL else league_id


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
