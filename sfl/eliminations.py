"""Elimination registry and its cascade onto rosters."""

import logging
from typing import List, Optional

from .constants import STATUS_ACTIVE, STATUS_ELIMINATED
from .models import EliminationRecord, RosterEntry
from .schemas import EliminationsFile
from .store import DocumentStore
from .utils import utc_now_iso, validate_data

logger = logging.getLogger('sfl.eliminations')


class EliminationRegistry:
    """
    Castaways voted out of the game, per (scope, season).

    The scope is a league ID or the shared global key, depending on whether
    the deployment records eliminations per league or once for everyone
    (see config.resolve_scope).
    """

    def __init__(self, store: DocumentStore, season: int):
        self.store = store
        self.season = season

    def _key(self, scope: str) -> tuple:
        return ('eliminations', scope, self.season)

    def _load(self, scope: str) -> tuple[EliminationsFile, Optional[str]]:
        data, version = self.store.get(self._key(scope))
        if data is None:
            return EliminationsFile(season=self.season), ''
        return validate_data(data, EliminationsFile, source=f'eliminations {scope}'), version

    def mark_eliminated(self, scope: str, castaway_id: str, episode: int) -> EliminationRecord:
        """
        Record that a castaway was voted out in an episode.

        Marking again moves the elimination to the new episode.
        """
        doc, version = self._load(scope)
        doc.eliminated[castaway_id] = episode
        doc.updated_at = utc_now_iso()
        self.store.put(self._key(scope), doc, expected_version=version)
        logger.info(f'{castaway_id} eliminated in episode {episode} (scope {scope})')
        return EliminationRecord(castaway_id=castaway_id, eliminated_at=episode)

    def unmark(self, scope: str, castaway_id: str) -> bool:
        """
        Remove a castaway from the registry.

        Returns:
            True if the castaway had been marked eliminated
        """
        doc, version = self._load(scope)
        if castaway_id not in doc.eliminated:
            return False
        del doc.eliminated[castaway_id]
        doc.updated_at = utc_now_iso()
        self.store.put(self._key(scope), doc, expected_version=version)
        logger.info(f'{castaway_id} un-eliminated (scope {scope})')
        return True

    def is_eliminated(self, scope: str, castaway_id: str) -> bool:
        return castaway_id in self._load(scope)[0].eliminated

    def list_eliminated(self, scope: str) -> set[str]:
        return set(self._load(scope)[0].eliminated)

    def records(self, scope: str) -> list[EliminationRecord]:
        """Elimination records ordered by episode."""
        doc, _version = self._load(scope)
        return [
            EliminationRecord(castaway_id=castaway_id, eliminated_at=episode)
            for castaway_id, episode in sorted(doc.eliminated.items(), key=lambda kv: (kv[1], kv[0]))
        ]


def apply_elimination(
    roster: List[RosterEntry], castaway_id: str, episode: int
) -> tuple[List[RosterEntry], bool]:
    """
    Mark a castaway's active roster entry as eliminated.

    The entry keeps earning through the elimination episode and nothing after.
    Dropped entries are left alone; the castaway was not on the roster.

    Returns:
        Tuple of (updated roster copy, whether anything changed)
    """
    changed = False
    updated = []
    for entry in roster:
        entry = entry.copy()
        if entry.castaway_id == castaway_id and entry.status in (STATUS_ACTIVE, STATUS_ELIMINATED):
            if entry.status != STATUS_ELIMINATED or entry.eliminated_week != episode:
                entry.status = STATUS_ELIMINATED
                entry.eliminated_week = episode
                changed = True
        updated.append(entry)
    return updated, changed


def revert_elimination(
    roster: List[RosterEntry], castaway_id: str
) -> tuple[List[RosterEntry], bool]:
    """
    Undo apply_elimination for a castaway that was unmarked.

    Returns:
        Tuple of (updated roster copy, whether anything changed)
    """
    changed = False
    updated = []
    for entry in roster:
        entry = entry.copy()
        if entry.castaway_id == castaway_id and entry.status == STATUS_ELIMINATED:
            entry.status = STATUS_ACTIVE
            entry.eliminated_week = None
            changed = True
        updated.append(entry)
    return updated, changed
