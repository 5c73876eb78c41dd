from .models import RosterEntry, ScoringEvent, EpisodeLedgerEntry, WeeklyRosterSnapshot, EliminationRecord
from .constants import ScoringEventKind, SCORING_EVENT_POINTS
from .scoring import point_value, points_from_events, get_event_label, get_event_description
from .config import get_config, clear_config_cache
from .logging_config import setup_logging, get_logger
from .exceptions import (
    RosterChangeError,
    InvalidRosterSize,
    NetChangeExceeded,
    RosterFull,
    SameCastawayAddAndDrop,
    CannotDropEliminated,
    CastawayEliminated,
    CastawayNotOnRoster,
    CastawayAlreadyOnRoster,
    UnknownCastaway,
    EmptyTransaction,
    NoPriorSnapshotToResetTo,
    NoSnapshotForWeek,
    ConcurrentModificationError,
)
from .store import DocumentStore, MemoryStore, JsonFileStore
from .ledger import EpisodeLedger
from .eliminations import EliminationRegistry
from .roster import RosterTimeline
from .attribution import total_points, attribute_points
from .policy import validate_add_drop, validate_reset_to_prior_week, is_net_roster_change_allowed
from .week_clock import current_week, next_lock_time
from .recompute import RecomputeJob, RecomputeResult
from .league import LeagueManager
from .excel_export import export_league_workbook

__all__ = [
    # Models
    'RosterEntry',
    'ScoringEvent',
    'EpisodeLedgerEntry',
    'WeeklyRosterSnapshot',
    'EliminationRecord',
    # Scoring catalog
    'ScoringEventKind',
    'SCORING_EVENT_POINTS',
    'point_value',
    'points_from_events',
    'get_event_label',
    'get_event_description',
    # Config and logging
    'get_config',
    'clear_config_cache',
    'setup_logging',
    'get_logger',
    # Errors
    'RosterChangeError',
    'InvalidRosterSize',
    'NetChangeExceeded',
    'RosterFull',
    'SameCastawayAddAndDrop',
    'CannotDropEliminated',
    'CastawayEliminated',
    'CastawayNotOnRoster',
    'CastawayAlreadyOnRoster',
    'UnknownCastaway',
    'EmptyTransaction',
    'NoPriorSnapshotToResetTo',
    'NoSnapshotForWeek',
    'ConcurrentModificationError',
    # Storage
    'DocumentStore',
    'MemoryStore',
    'JsonFileStore',
    # Components
    'EpisodeLedger',
    'EliminationRegistry',
    'RosterTimeline',
    'total_points',
    'attribute_points',
    'validate_add_drop',
    'validate_reset_to_prior_week',
    'is_net_roster_change_allowed',
    'current_week',
    'next_lock_time',
    'RecomputeJob',
    'RecomputeResult',
    # Service
    'LeagueManager',
    'export_league_workbook',
]
