"""League service: roster transactions and scoring for one league.

Ties the components to a document store:
    - draft / add-drop / reset go through the weekly change policy and are
      committed conditionally on the roster version that was validated
    - recording an episode writes the ledger first, then recomputes every
      roster that holds (or held) a castaway in that episode
    - eliminations update the registry, cascade onto rosters, and recompute
"""

import logging
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from .config import get_config, get_event_points, get_lock_schedule, resolve_scope
from .eliminations import EliminationRegistry, apply_elimination, revert_elimination
from .exceptions import ConcurrentModificationError, RosterChangeError, UnknownCastaway
from .ledger import EpisodeLedger
from .models import RosterEntry, copy_roster
from .policy import get_available_castaways, validate_add_drop, validate_reset_to_prior_week
from .recompute import RecomputeJob, RecomputeResult
from .roster import RosterTimeline, record_to_entry
from .schemas import LeagueConfig, StandingsFile
from .scoring import points_from_events
from .store import DocumentStore
from .utils import validate_data
from .validators import validate_episode, validate_roster
from .week_clock import current_week

logger = logging.getLogger('sfl.league')


def list_leagues(store: DocumentStore) -> list[str]:
    """League IDs that have at least one roster in the store."""
    return sorted({key[1] for key in store.list_keys(('rosters',)) if len(key) >= 3})


class LeagueManager:
    """Scoring and roster operations for one league."""

    def __init__(
        self,
        store: DocumentStore,
        league_id: str,
        config: Optional[LeagueConfig] = None,
    ):
        self.store = store
        self.league_id = league_id
        self.config = config or get_config()
        self.season = self.config.current_season

        self.event_points = get_event_points(self.config)

        self.ledger_scope = resolve_scope(league_id, self.config.ledger_scope)
        self.elimination_scope = resolve_scope(league_id, self.config.elimination_scope)

        self.ledger = EpisodeLedger(store, self.ledger_scope, self.event_points)
        self.eliminations = EliminationRegistry(store, self.season)
        self.timeline = RosterTimeline(store, league_id, self.config.roster_size)
        self.recompute_job = RecomputeJob(
            store, self.timeline, self.season, max_retries=self.config.max_commit_retries
        )

    # Week clock

    def current_week(self, now: Optional[datetime] = None) -> int:
        weekday, lock_time, tz = get_lock_schedule(self.config)
        return current_week(
            self.config.premiere_date, now, lock_weekday=weekday, lock_time=lock_time, tz=tz
        )

    # Castaways

    @property
    def castaway_ids(self) -> list[str]:
        return [c.id for c in self.config.castaways]

    def _check_known(self, castaway_ids: Iterable[str]) -> None:
        catalog = set(self.castaway_ids)
        if not catalog:
            return
        for castaway_id in castaway_ids:
            if castaway_id not in catalog:
                raise UnknownCastaway(
                    f'{castaway_id} is not a castaway in season {self.season}',
                    castaway_id=castaway_id,
                )

    def eliminated_ids(self) -> set[str]:
        return self.eliminations.list_eliminated(self.elimination_scope)

    def available_castaways(self, user_id: str) -> list[str]:
        """Castaways the user could add right now."""
        return get_available_castaways(
            self.castaway_ids, self.timeline.current_roster(user_id), self.eliminated_ids()
        )

    def castaway_season_points(self, castaway_id: str) -> int:
        """Season-long points for a castaway, independent of any roster."""
        return self.ledger.points_for_castaway_season(self.season, castaway_id)

    # Roster transactions

    def draft(self, user_id: str, castaway_ids: Iterable[str]) -> list[RosterEntry]:
        """Draft a user's initial roster (week 0)."""
        picks = list(castaway_ids)
        self._check_known(picks)
        roster = self.timeline.draft(user_id, picks, eliminated=self.eliminated_ids())
        self.recompute([user_id])
        return roster

    def submit_add_drop(
        self,
        user_id: str,
        add_id: Optional[str] = None,
        drop_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> list[RosterEntry]:
        """
        Validate and commit an add and/or drop for the current week.

        The roster is re-read and re-validated if it changed between
        validation and commit.

        Raises:
            RosterChangeError: The change breaks a roster rule
            ConcurrentModificationError: Still conflicting after all retries
        """
        if add_id:
            self._check_known([add_id])
        week = self.current_week(now)
        eliminated = self.eliminated_ids()
        retries = self.config.max_commit_retries

        for attempt in range(1, retries + 1):
            doc, version = self.timeline.load(user_id)
            if doc is None or not doc.roster:
                raise RosterChangeError(f'{user_id} has not drafted a roster yet')

            current = [record_to_entry(r) for r in doc.roster]
            prior = self.timeline.snapshot_as_of(user_id, week - 1, doc=doc) if week > 0 else None
            proposed = validate_add_drop(
                prior.roster if prior else None,
                current,
                add_id,
                drop_id,
                week,
                eliminated_ids=eliminated,
                restriction_enabled=self.config.add_drop_restriction_enabled,
                roster_size=self.config.roster_size,
                net_change_limit=self.config.net_change_limit,
            )
            try:
                self.timeline.commit_weekly_change(user_id, week, proposed, expected_version=version)
            except ConcurrentModificationError:
                logger.warning(
                    f'Roster for {user_id} changed during add/drop (attempt {attempt}/{retries})'
                )
                if attempt == retries:
                    raise
                continue
            break

        logger.info(
            f'{user_id} week {week}: add={add_id or "-"} drop={drop_id or "-"} '
            f'(league {self.league_id})'
        )
        self.recompute([user_id])
        return self.timeline.current_roster(user_id)

    def reset_to_prior_week(
        self, user_id: str, now: Optional[datetime] = None
    ) -> list[RosterEntry]:
        """
        Discard this week's changes and restore last week's committed roster.

        Raises:
            NoPriorSnapshotToResetTo: Nothing from last week, or nothing to undo
        """
        week = self.current_week(now)
        retries = self.config.max_commit_retries
        records = self._elimination_records()

        for attempt in range(1, retries + 1):
            doc, version = self.timeline.load(user_id)
            live = [record_to_entry(r) for r in doc.roster] if doc is not None else []
            prior = (
                self.timeline.snapshot_as_of(user_id, week - 1, doc=doc)
                if doc is not None and week > 0
                else None
            )
            # Eliminations since last week are not a change the user can undo
            baseline = self._with_eliminations(prior.roster, records)[0] if prior else None
            validate_reset_to_prior_week(baseline, live)
            try:
                self.timeline.reset_to_week(user_id, prior.week, expected_version=version)
            except ConcurrentModificationError:
                if attempt == retries:
                    raise
                continue
            break

        # Snapshots predate later eliminations
        self.sync_eliminations(user_id)
        self.recompute([user_id])
        return self.timeline.current_roster(user_id)

    # Eliminations

    def sync_eliminations(self, user_id: str) -> bool:
        """
        Bring a roster's elimination statuses in line with the registry.

        Returns:
            True if the roster changed
        """
        records = self._elimination_records()
        retries = self.config.max_commit_retries

        for attempt in range(1, retries + 1):
            doc, version = self.timeline.load(user_id)
            if doc is None:
                return False
            updated, changed = self._with_eliminations(
                [record_to_entry(r) for r in doc.roster], records
            )
            if not changed:
                return False
            try:
                self.timeline.replace_live_roster(user_id, updated, expected_version=version)
            except ConcurrentModificationError:
                if attempt == retries:
                    raise
                continue
            return True
        return False

    def _elimination_records(self) -> dict[str, int]:
        return {r.castaway_id: r.eliminated_at for r in self.eliminations.records(self.elimination_scope)}

    @staticmethod
    def _with_eliminations(
        roster: list[RosterEntry], records: Mapping[str, int]
    ) -> tuple[list[RosterEntry], bool]:
        """Roster copy with registry eliminations applied and stale ones reverted."""
        updated = copy_roster(roster)
        changed = False
        for entry in roster:
            if entry.castaway_id in records:
                updated, did = apply_elimination(updated, entry.castaway_id, records[entry.castaway_id])
            elif entry.is_eliminated:
                updated, did = revert_elimination(updated, entry.castaway_id)
            else:
                did = False
            changed = changed or did
        return updated, changed

    def _leagues_in_scope(self, mode: str) -> list[str]:
        if resolve_scope(self.league_id, mode) == self.league_id:
            return [self.league_id]
        return sorted(set(list_leagues(self.store)) | {self.league_id})

    def _for_league(self, league_id: str) -> 'LeagueManager':
        if league_id == self.league_id:
            return self
        return LeagueManager(self.store, league_id, self.config)

    def _default_episode(self) -> int:
        episodes = self.ledger.recorded_episodes(self.season)
        return episodes[-1] if episodes else self.current_week()

    def mark_eliminated(
        self, castaway_id: str, episode: Optional[int] = None
    ) -> list[RecomputeResult]:
        """
        Record an elimination and cascade it onto every roster in scope.

        Args:
            castaway_id: Castaway voted out
            episode: Episode they were voted out in (default: latest recorded)

        Returns:
            Recompute results for each league touched
        """
        self._check_known([castaway_id])
        if episode is None:
            episode = self._default_episode()
        self.eliminations.mark_eliminated(self.elimination_scope, castaway_id, episode)
        return self._cascade_elimination(castaway_id)

    def unmark_eliminated(self, castaway_id: str) -> list[RecomputeResult]:
        """Undo an elimination recorded in error."""
        if not self.eliminations.unmark(self.elimination_scope, castaway_id):
            return []
        return self._cascade_elimination(castaway_id)

    def _cascade_elimination(self, castaway_id: str) -> list[RecomputeResult]:
        results = []
        for league_id in self._leagues_in_scope(self.config.elimination_scope):
            manager = self._for_league(league_id)
            users = manager.recompute_job.affected_users([castaway_id])
            for user_id in users:
                manager.sync_eliminations(user_id)
            results.append(manager.recompute(users))
        return results

    # Scoring

    def record_episode(
        self,
        episode: int,
        events_by_castaway: Mapping[str, Iterable[Any]],
        air_date: Optional[date] = None,
    ) -> list[RecomputeResult]:
        """
        Save an episode's events and recompute affected rosters.

        The ledger write completes before any roster is recomputed.

        Raises:
            ValueError: The events fail validation (nothing is written)
        """
        entry = self.ledger.build_entry(self.season, episode, events_by_castaway, air_date)
        scores = {
            castaway_id: points_from_events(events, self.event_points)
            for castaway_id, events in entry.events.items()
        }
        errors, warnings = validate_episode(entry, scores, self.castaway_ids or None)
        for warning in warnings:
            logger.warning(warning)
        if errors:
            raise ValueError('Episode events failed validation:\n' + '\n'.join(errors))

        # Castaways removed by a correction also change totals
        involved = self.ledger.castaways_in_episode(self.season, episode)
        self.ledger.set_episode_events(self.season, episode, events_by_castaway, air_date)
        involved |= self.ledger.castaways_in_episode(self.season, episode)

        results = []
        for league_id in self._leagues_in_scope(self.config.ledger_scope):
            manager = self._for_league(league_id)
            users = manager.recompute_job.affected_users(involved)
            results.append(manager.recompute(users))
        return results

    def recompute(self, user_ids: Optional[Iterable[str]] = None) -> RecomputeResult:
        """Re-derive roster totals from the ledger and publish standings."""
        episode_scores = self.ledger.episode_scores(self.season)
        return self.recompute_job.run(episode_scores, user_ids)

    def standings(self) -> dict[str, int]:
        """Latest published standings (user -> points), highest first."""
        data, _version = self.store.get(('standings', self.league_id))
        if data is None:
            totals = {u: self.timeline.total_points(u) for u in self.timeline.list_users()}
            return dict(sorted(totals.items(), key=lambda kv: (-kv[1], kv[0])))
        return validate_data(data, StandingsFile, source=f'standings {self.league_id}').standings

    def audit_rosters(self) -> dict[str, list[str]]:
        """Roster validation errors per user (users with no errors omitted)."""
        problems = {}
        for user_id in self.timeline.list_users():
            errors = validate_roster(
                user_id, self.timeline.current_roster(user_id), self.config.roster_size
            )
            if errors:
                problems[user_id] = errors
        return problems
