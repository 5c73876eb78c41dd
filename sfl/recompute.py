"""Idempotent recompute sweep over league rosters.

Each roster is re-derived on its own: a failure on one roster is recorded and
logged and the sweep moves on. Because totals are recalculated from scratch,
a partially failed sweep can simply be run again.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .attribution import EpisodeScores, attribute_points, rosters_affected_by, total_points
from .exceptions import ConcurrentModificationError
from .roster import RosterTimeline, record_to_entry
from .schemas import StandingsFile
from .store import DocumentStore
from .utils import utc_now_iso

logger = logging.getLogger('sfl.recompute')


@dataclass
class RecomputeResult:
    """Outcome of a sweep: fresh totals and per-user failures."""
    league_id: str
    totals: dict[str, int] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class RecomputeJob:
    """Recompute roster totals for one league and publish its standings."""

    def __init__(
        self,
        store: DocumentStore,
        timeline: RosterTimeline,
        season: int,
        max_retries: int = 3,
    ):
        self.store = store
        self.timeline = timeline
        self.season = season
        self.max_retries = max_retries

    @property
    def league_id(self) -> str:
        return self.timeline.league_id

    def affected_users(self, castaway_ids: Iterable[str]) -> list[str]:
        """Users whose roster has ever held one of the castaways."""
        rosters = {}
        for user_id in self.timeline.list_users():
            doc, _version = self.timeline.load(user_id)
            if doc is not None:
                rosters[user_id] = [record_to_entry(r) for r in doc.roster]
        return rosters_affected_by(rosters, castaway_ids)

    def recompute_user(self, user_id: str, episode_scores: EpisodeScores) -> int:
        """
        Re-derive one roster's total and store it on the roster document.

        Retries when the roster changed between read and write.
        """
        for attempt in range(1, self.max_retries + 1):
            doc, version = self.timeline.load(user_id)
            if doc is None:
                return 0
            entries = attribute_points((record_to_entry(r) for r in doc.roster), episode_scores)
            total = total_points(entries, episode_scores)
            try:
                self.timeline.replace_live_roster(
                    user_id, entries, total_points=total, expected_version=version
                )
            except ConcurrentModificationError:
                logger.warning(
                    f'Roster for {user_id} changed during recompute '
                    f'(attempt {attempt}/{self.max_retries})'
                )
                if attempt == self.max_retries:
                    raise
                continue
            logger.debug(f'{user_id}: {total} points')
            return total
        return 0

    def run(
        self, episode_scores: EpisodeScores, user_ids: Optional[Iterable[str]] = None
    ) -> RecomputeResult:
        """
        Recompute rosters and rewrite the league standings.

        Args:
            episode_scores: {episode: {castaway_id: points}} from the ledger
            user_ids: Rosters to recompute (default: every roster in the league)

        Returns:
            RecomputeResult with totals for every user and any failures
        """
        result = RecomputeResult(league_id=self.league_id)
        all_users = self.timeline.list_users()
        targets = set(all_users if user_ids is None else user_ids)

        for user_id in all_users:
            if user_id not in targets:
                stored = self._stored_total(user_id)
                if stored is not None:
                    result.totals[user_id] = stored
                continue
            try:
                result.totals[user_id] = self.recompute_user(user_id, episode_scores)
            except Exception as e:
                logger.error(
                    f'Recompute failed for {user_id} in league {self.league_id}: {e}',
                    exc_info=True,
                )
                result.failures[user_id] = str(e)
                # Keep the user in the standings at their last stored total
                stored = self._stored_total(user_id)
                if stored is not None:
                    result.totals[user_id] = stored

        self.write_standings(result)
        logger.info(
            f'Recomputed {len(targets)} of {len(all_users)} rosters in league '
            f'{self.league_id} ({len(result.failures)} failed)'
        )
        return result

    def _stored_total(self, user_id: str) -> Optional[int]:
        try:
            return self.timeline.total_points(user_id)
        except Exception as e:
            logger.warning(f'No stored total for {user_id} in league {self.league_id}: {e}')
            return None

    def write_standings(self, result: RecomputeResult) -> None:
        standings = StandingsFile(
            league_id=self.league_id,
            season=self.season,
            standings=dict(sorted(result.totals.items(), key=lambda kv: (-kv[1], kv[0]))),
            failures=result.failures,
            updated_at=utc_now_iso(),
        )
        self.store.put(('standings', self.league_id), standings)
