"""Episode event ledger: per-episode scoring events for each castaway."""

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from .constants import ScoringEventKind
from .models import EpisodeLedgerEntry, ScoringEvent
from .schemas import EpisodeEventsFile, ScoringEventRecord
from .scoring import points_from_events
from .store import DocumentStore
from .utils import utc_now_iso, validate_data

logger = logging.getLogger('sfl.ledger')

EPISODE_PREFIX = 'episode_'


def _to_event(item: Any) -> ScoringEvent:
    """Accept ScoringEvent, (kind, count) pairs, or {'kind': ..., 'count': ...} dicts."""
    if isinstance(item, ScoringEvent):
        return ScoringEvent(ScoringEventKind(item.kind), item.count)
    if isinstance(item, Mapping):
        return ScoringEvent(ScoringEventKind(item['kind']), int(item.get('count', 1)))
    if isinstance(item, (str, ScoringEventKind)):
        return ScoringEvent(ScoringEventKind(item), 1)
    kind, count = item
    return ScoringEvent(ScoringEventKind(kind), int(count))


class EpisodeLedger:
    """
    Scoring events recorded by the scoring administrator.

    One document per (scope, season, episode). Saving an episode replaces the
    whole document; nothing is merged. Saving does not touch roster totals,
    the league service runs the recompute sweep afterwards.
    """

    def __init__(
        self,
        store: DocumentStore,
        scope: str,
        event_points: Optional[Mapping[ScoringEventKind, int]] = None,
    ):
        self.store = store
        self.scope = scope
        self.event_points = event_points

    def _key(self, season: int, episode: int) -> tuple:
        return ('episodes', self.scope, season, f'{EPISODE_PREFIX}{episode}')

    @staticmethod
    def build_entry(
        season: int,
        episode: int,
        events_by_castaway: Mapping[str, Iterable[Any]],
        air_date: Optional[date] = None,
    ) -> EpisodeLedgerEntry:
        """Normalize raw events into a ledger entry without storing it."""
        return EpisodeLedgerEntry(
            season=season,
            episode=episode,
            air_date=air_date,
            events={
                castaway_id: [_to_event(item) for item in items]
                for castaway_id, items in events_by_castaway.items()
            },
        )

    def set_episode_events(
        self,
        season: int,
        episode: int,
        events_by_castaway: Mapping[str, Iterable[Any]],
        air_date: Optional[date] = None,
    ) -> EpisodeLedgerEntry:
        """
        Replace the full event map for an episode.

        Args:
            season: Season number
            episode: Episode number (episodes and weeks line up 1:1)
            events_by_castaway: castaway_id -> events
            air_date: Date the episode aired

        Returns:
            The stored ledger entry
        """
        events = self.build_entry(season, episode, events_by_castaway, air_date).events
        doc = validate_data(
            {
                'season': season,
                'episode': episode,
                'air_date': air_date,
                'events': {
                    castaway_id: [
                        ScoringEventRecord(kind=e.kind, count=e.count)
                        for e in castaway_events
                        if e.count
                    ]
                    for castaway_id, castaway_events in events.items()
                },
                'updated_at': utc_now_iso(),
            },
            EpisodeEventsFile,
            source=f'season {season} episode {episode}',
        )
        self.store.put(self._key(season, episode), doc)

        logger.info(
            f'Recorded season {season} episode {episode} events for '
            f'{len(doc.events)} castaways (scope {self.scope})'
        )
        return self._to_entry(doc)

    def get_episode(self, season: int, episode: int) -> Optional[EpisodeLedgerEntry]:
        """Ledger entry for an episode, or None if nothing was recorded."""
        data, _version = self.store.get(self._key(season, episode))
        if data is None:
            return None
        doc = validate_data(data, EpisodeEventsFile, source=f'season {season} episode {episode}')
        return self._to_entry(doc)

    def recorded_episodes(self, season: int) -> list[int]:
        """Episode numbers with a ledger document, ascending."""
        episodes = []
        for key in self.store.list_keys(('episodes', self.scope, season)):
            name = key[-1]
            if name.startswith(EPISODE_PREFIX) and name[len(EPISODE_PREFIX):].isdigit():
                episodes.append(int(name[len(EPISODE_PREFIX):]))
        return sorted(episodes)

    def castaway_breakdown(
        self, season: int, episode: int, castaway_id: str
    ) -> tuple[int, dict[str, int]]:
        """(points, breakdown by event kind) for one castaway in one episode."""
        entry = self.get_episode(season, episode)
        if entry is None:
            return 0, {}
        return points_from_events(entry.events.get(castaway_id, []), self.event_points)

    def points_for_castaway_episode(self, season: int, episode: int, castaway_id: str) -> int:
        """Points a castaway earned in one episode (0 if nothing recorded)."""
        points, _breakdown = self.castaway_breakdown(season, episode, castaway_id)
        return points

    def points_for_castaway_season(self, season: int, castaway_id: str) -> int:
        """Points a castaway earned across every recorded episode of the season."""
        return sum(
            scores.get(castaway_id, 0) for scores in self.episode_scores(season).values()
        )

    def episode_scores(self, season: int) -> dict[int, dict[str, int]]:
        """
        Per-episode point totals for every castaway.

        Returns:
            {episode_number: {castaway_id: points}}, the input the attribution
            calculator works from
        """
        scores: dict[int, dict[str, int]] = {}
        for episode in self.recorded_episodes(season):
            entry = self.get_episode(season, episode)
            if entry is None:
                continue
            scores[episode] = {
                castaway_id: points_from_events(events, self.event_points)[0]
                for castaway_id, events in entry.events.items()
            }
        return scores

    def castaways_in_episode(self, season: int, episode: int) -> set[str]:
        """Castaways with at least one recorded event in an episode."""
        entry = self.get_episode(season, episode)
        if entry is None:
            return set()
        return {castaway_id for castaway_id, events in entry.events.items() if events}

    @staticmethod
    def _to_entry(doc: EpisodeEventsFile) -> EpisodeLedgerEntry:
        return EpisodeLedgerEntry(
            season=doc.season,
            episode=doc.episode,
            air_date=doc.air_date,
            events={
                castaway_id: [ScoringEvent(r.kind, r.count) for r in records]
                for castaway_id, records in doc.events.items()
            },
        )
