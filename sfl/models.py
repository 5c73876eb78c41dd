"""Data models for the SFL scoring engine."""

from dataclasses import dataclass, field, replace
from datetime import date
from operator import attrgetter
from typing import Dict, List, Optional, Tuple

from .constants import STATUS_ACTIVE, STATUS_DROPPED, STATUS_ELIMINATED, ScoringEventKind


@dataclass(frozen=True)
class ScoringEvent:
    """One kind of achievement, possibly earned several times in an episode."""
    kind: ScoringEventKind
    count: int = 1


@dataclass
class EpisodeLedgerEntry:
    """All scoring events recorded for one episode of a season."""
    season: int
    episode: int
    air_date: Optional[date] = None
    events: Dict[str, List[ScoringEvent]] = field(default_factory=dict)
    # events[castaway_id] = [ScoringEvent, ...]


@dataclass
class RosterEntry:
    """A castaway's membership on a fantasy roster."""
    castaway_id: str
    status: str = STATUS_ACTIVE
    added_week: int = 0
    dropped_week: Optional[int] = None
    eliminated_week: Optional[int] = None  # last week credited once eliminated
    accumulated_points: int = 0
    past_stints: List[Tuple[int, int]] = field(default_factory=list)
    # [(added_week, dropped_week), ...] from before a reactivation

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    @property
    def is_dropped(self) -> bool:
        return self.status == STATUS_DROPPED

    @property
    def is_eliminated(self) -> bool:
        return self.status == STATUS_ELIMINATED

    def copy(self) -> 'RosterEntry':
        return replace(self, past_stints=list(self.past_stints))

    def same_membership(self, other: 'RosterEntry') -> bool:
        """Compare everything except the derived point total."""
        return (
            self.castaway_id == other.castaway_id
            and self.status == other.status
            and self.added_week == other.added_week
            and self.dropped_week == other.dropped_week
            and self.eliminated_week == other.eliminated_week
            and list(self.past_stints) == list(other.past_stints)
        )


@dataclass
class WeeklyRosterSnapshot:
    """A user's roster as committed for a given week."""
    week: int
    roster: List[RosterEntry] = field(default_factory=list)


@dataclass
class EliminationRecord:
    """A castaway voted out in the given episode."""
    castaway_id: str
    eliminated_at: int


def copy_roster(roster: List[RosterEntry]) -> List[RosterEntry]:
    """Deep-copy a roster so snapshots never share entries with the live list."""
    return [entry.copy() for entry in roster]


def active_ids(roster: List[RosterEntry]) -> set[str]:
    """Castaway IDs currently active on a roster."""
    return {entry.castaway_id for entry in roster if entry.is_active}


def rosters_equal(a: List[RosterEntry], b: List[RosterEntry]) -> bool:
    """True when two rosters hold the same entries in the same states."""
    if len(a) != len(b):
        return False
    by_id = attrgetter('castaway_id')
    return all(x.same_membership(y) for x, y in zip(sorted(a, key=by_id), sorted(b, key=by_id)))
