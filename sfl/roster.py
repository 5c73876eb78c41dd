"""Roster timeline: each user's live roster plus one snapshot per week.

The live roster is what the user holds right now. A snapshot is written for a
week every time a change is committed in that week (a second commit in the
same week overwrites it), and week 0 holds the draft. This module only stores
and indexes rosters; legality is checked by policy.validate_add_drop before
anything is committed here.
"""

import logging
from typing import Iterable, List, Optional

from .constants import DRAFT_WEEK, ROSTER_SIZE
from .exceptions import InvalidRosterSize, NoSnapshotForWeek, RosterChangeError
from .models import RosterEntry, WeeklyRosterSnapshot, copy_roster
from .schemas import RosterDocument, RosterEntryRecord
from .store import DocumentStore
from .utils import utc_now_iso, validate_data

logger = logging.getLogger('sfl.roster')


def entry_to_record(entry: RosterEntry) -> RosterEntryRecord:
    return RosterEntryRecord(
        castaway_id=entry.castaway_id,
        status=entry.status,
        added_week=entry.added_week,
        dropped_week=entry.dropped_week,
        eliminated_week=entry.eliminated_week,
        accumulated_points=entry.accumulated_points,
        past_stints=list(entry.past_stints),
    )


def record_to_entry(record: RosterEntryRecord) -> RosterEntry:
    return RosterEntry(
        castaway_id=record.castaway_id,
        status=record.status,
        added_week=record.added_week,
        dropped_week=record.dropped_week,
        eliminated_week=record.eliminated_week,
        accumulated_points=record.accumulated_points,
        past_stints=[tuple(stint) for stint in record.past_stints],
    )


class RosterTimeline:
    """Roster documents for every user in one league."""

    def __init__(self, store: DocumentStore, league_id: str, roster_size: int = ROSTER_SIZE):
        self.store = store
        self.league_id = league_id
        self.roster_size = roster_size

    def _key(self, user_id: str) -> tuple:
        return ('rosters', self.league_id, user_id)

    def load(self, user_id: str) -> tuple[Optional[RosterDocument], str]:
        """
        Read a user's roster document.

        Returns:
            Tuple of (document or None, version). The version of a missing
            document is '' so that a conditional write creates it.
        """
        data, version = self.store.get(self._key(user_id))
        if data is None:
            return None, ''
        doc = validate_data(data, RosterDocument, source=f'roster {self.league_id}/{user_id}')
        return doc, version or ''

    def _save(self, doc: RosterDocument, expected_version: Optional[str]) -> str:
        doc.updated_at = utc_now_iso()
        # Re-validate so week invariants hold for every stored entry
        doc = validate_data(
            doc.model_dump(mode='json'), RosterDocument, source=f'roster {doc.user_id}'
        )
        return self.store.put(self._key(doc.user_id), doc, expected_version=expected_version)

    def list_users(self) -> list[str]:
        """Users in this league who have a roster document."""
        return [key[-1] for key in self.store.list_keys(('rosters', self.league_id))]

    def draft(
        self,
        user_id: str,
        castaway_ids: Iterable[str],
        eliminated: Iterable[str] = (),
        expected_version: Optional[str] = None,
    ) -> List[RosterEntry]:
        """
        Create a user's initial roster.

        Args:
            user_id: Drafting user
            castaway_ids: Exactly roster_size distinct castaway IDs
            eliminated: Castaway IDs already out of the game

        Raises:
            InvalidRosterSize: Wrong count, duplicates, or an eliminated pick
            RosterChangeError: The user already has a roster
        """
        picks = list(castaway_ids)
        eliminated = set(eliminated)

        if len(picks) != self.roster_size:
            raise InvalidRosterSize(
                f'A roster must have exactly {self.roster_size} castaways (got {len(picks)})'
            )
        duplicates = sorted({c for c in picks if picks.count(c) > 1})
        if duplicates:
            raise InvalidRosterSize(
                f'Castaways may only be drafted once: {", ".join(duplicates)}',
                castaway_id=duplicates[0],
            )
        out = [c for c in picks if c in eliminated]
        if out:
            raise InvalidRosterSize(
                f'Cannot draft eliminated castaways: {", ".join(out)}', castaway_id=out[0]
            )

        doc, version = self.load(user_id)
        if doc is not None and doc.roster:
            raise RosterChangeError(f'{user_id} has already drafted a roster')

        roster = [RosterEntry(castaway_id=c, added_week=DRAFT_WEEK) for c in picks]
        records = [entry_to_record(e) for e in roster]
        doc = RosterDocument(
            user_id=user_id,
            roster=records,
            weekly_snapshots={DRAFT_WEEK: [r.model_copy() for r in records]},
        )
        self._save(doc, version if expected_version is None else expected_version)

        logger.info(f'{user_id} drafted {", ".join(picks)} in league {self.league_id}')
        return roster

    def current_roster(self, user_id: str) -> List[RosterEntry]:
        """Live roster (empty before the draft)."""
        doc, _version = self.load(user_id)
        if doc is None:
            return []
        return [record_to_entry(r) for r in doc.roster]

    def snapshot_for_week(self, user_id: str, week: int) -> Optional[List[RosterEntry]]:
        """Roster committed in exactly this week, or None."""
        doc, _version = self.load(user_id)
        if doc is None or week not in doc.weekly_snapshots:
            return None
        return [record_to_entry(r) for r in doc.weekly_snapshots[week]]

    def snapshot_as_of(
        self, user_id: str, week: int, doc: Optional[RosterDocument] = None
    ) -> Optional[WeeklyRosterSnapshot]:
        """
        Roster as it stood at the end of a week.

        Snapshots are only written in weeks with a change, so this is the
        latest snapshot at or before the week.
        """
        if doc is None:
            doc, _version = self.load(user_id)
        if doc is None:
            return None
        weeks = [w for w in doc.weekly_snapshots if w <= week]
        if not weeks:
            return None
        latest = max(weeks)
        return WeeklyRosterSnapshot(
            week=latest, roster=[record_to_entry(r) for r in doc.weekly_snapshots[latest]]
        )

    def history(self, user_id: str) -> list[WeeklyRosterSnapshot]:
        """All snapshots, oldest week first."""
        doc, _version = self.load(user_id)
        if doc is None:
            return []
        return [
            WeeklyRosterSnapshot(week=w, roster=[record_to_entry(r) for r in doc.weekly_snapshots[w]])
            for w in sorted(doc.weekly_snapshots)
        ]

    def commit_weekly_change(
        self,
        user_id: str,
        week: int,
        roster: List[RosterEntry],
        expected_version: Optional[str] = None,
    ) -> str:
        """
        Store a validated roster as the live roster and the week's snapshot.

        Raises:
            ConcurrentModificationError: The document changed since expected_version
        """
        doc, version = self.load(user_id)
        if doc is None:
            doc = RosterDocument(user_id=user_id)
        records = [entry_to_record(e) for e in copy_roster(roster)]
        doc.roster = records
        doc.weekly_snapshots[week] = [r.model_copy() for r in records]
        new_version = self._save(doc, version if expected_version is None else expected_version)

        logger.info(f'Committed week {week} roster for {user_id} in league {self.league_id}')
        return new_version

    def replace_live_roster(
        self,
        user_id: str,
        roster: List[RosterEntry],
        total_points: Optional[int] = None,
        expected_version: Optional[str] = None,
    ) -> str:
        """
        Overwrite the live roster without writing a snapshot.

        Used for changes that are not user transactions: elimination
        cascades and refreshed point totals.
        """
        doc, version = self.load(user_id)
        if doc is None:
            raise KeyError(f'No roster for {user_id} in league {self.league_id}')
        doc.roster = [entry_to_record(e) for e in roster]
        if total_points is not None:
            doc.total_points = total_points
        return self._save(doc, version if expected_version is None else expected_version)

    def reset_to_week(
        self,
        user_id: str,
        week: int,
        discard_later: bool = True,
        expected_version: Optional[str] = None,
    ) -> List[RosterEntry]:
        """
        Make the snapshot for a week the live roster again.

        Args:
            discard_later: Also delete snapshots committed after the week

        Raises:
            NoSnapshotForWeek: Nothing was committed for that week
        """
        doc, version = self.load(user_id)
        if doc is None or week not in doc.weekly_snapshots:
            raise NoSnapshotForWeek(user_id, week)

        doc.roster = [r.model_copy() for r in doc.weekly_snapshots[week]]
        if discard_later:
            doc.weekly_snapshots = {
                w: snap for w, snap in doc.weekly_snapshots.items() if w <= week
            }
        self._save(doc, version if expected_version is None else expected_version)

        logger.info(f'Reset {user_id} to week {week} roster in league {self.league_id}')
        return [record_to_entry(r) for r in doc.roster]

    def total_points(self, user_id: str) -> int:
        """Last derived point total stored on the roster document."""
        doc, _version = self.load(user_id)
        return doc.total_points if doc is not None else 0
