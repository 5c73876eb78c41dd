"""Pydantic schemas for stored documents and league configuration."""

from datetime import date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    LOCK_TIME,
    LOCK_TIMEZONE,
    LOCK_WEEKDAY,
    NET_CHANGE_LIMIT,
    ROSTER_SIZE,
    SCOPE_LEAGUE,
    STATUS_DROPPED,
    STATUS_ELIMINATED,
    ScoringEventKind,
)


class ScoringEventRecord(BaseModel):
    """One event kind and how many times it was earned."""

    kind: ScoringEventKind
    count: int = Field(default=1, ge=1)

    class Config:
        extra = 'forbid'


class EpisodeEventsFile(BaseModel):
    """Episode ledger document: every castaway's events for one episode."""

    season: int = Field(..., ge=1)
    episode: int = Field(..., ge=0)
    air_date: date | None = None
    events: dict[str, list[ScoringEventRecord]] = Field(default_factory=dict)
    updated_at: str | None = None

    class Config:
        extra = 'forbid'


class RosterEntryRecord(BaseModel):
    """A castaway's membership on a fantasy roster."""

    castaway_id: str = Field(..., min_length=1)
    status: str = Field(default='active', pattern=r'^(active|dropped|eliminated)$')
    added_week: int = Field(default=0, ge=0)
    dropped_week: int | None = Field(default=None, ge=0)
    eliminated_week: int | None = Field(default=None, ge=0)
    accumulated_points: int = 0
    past_stints: list[tuple[int, int]] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_weeks(self):
        """Dropped week is set exactly when dropped, and never precedes the add."""
        if (self.status == STATUS_DROPPED) != (self.dropped_week is not None):
            raise ValueError(
                f'{self.castaway_id}: dropped_week must be set iff status is dropped '
                f'(status={self.status}, dropped_week={self.dropped_week})'
            )
        if self.dropped_week is not None and self.added_week > self.dropped_week:
            raise ValueError(
                f'{self.castaway_id}: added_week {self.added_week} is after '
                f'dropped_week {self.dropped_week}'
            )
        if self.eliminated_week is not None and self.status != STATUS_ELIMINATED:
            raise ValueError(
                f'{self.castaway_id}: eliminated_week set on a {self.status} entry'
            )
        for start, end in self.past_stints:
            if not 0 <= start < end <= self.added_week:
                raise ValueError(
                    f'{self.castaway_id}: past stint ({start}, {end}) must end by '
                    f'added_week {self.added_week}'
                )
        return self

    class Config:
        extra = 'forbid'


class RosterDocument(BaseModel):
    """A user's live roster, weekly snapshots, and last derived point total."""

    user_id: str = Field(..., min_length=1)
    roster: list[RosterEntryRecord] = Field(default_factory=list)
    weekly_snapshots: dict[int, list[RosterEntryRecord]] = Field(default_factory=dict)
    total_points: int = 0
    updated_at: str | None = None

    @field_validator('roster')
    @classmethod
    def validate_unique_castaways(cls, v):
        """Reactivation reuses the entry, so a castaway appears at most once."""
        seen = set()
        duplicates = set()
        for entry in v:
            if entry.castaway_id in seen:
                duplicates.add(entry.castaway_id)
            seen.add(entry.castaway_id)
        if duplicates:
            raise ValueError(f'Duplicate roster entries: {", ".join(sorted(duplicates))}')
        return v

    class Config:
        extra = 'forbid'


class EliminationsFile(BaseModel):
    """Eliminated castaways for one scope and season (castaway -> episode)."""

    season: int = Field(..., ge=1)
    eliminated: dict[str, int] = Field(default_factory=dict)
    updated_at: str | None = None

    class Config:
        extra = 'forbid'


class StandingsFile(BaseModel):
    """Derived league standings (user -> total points)."""

    league_id: str
    season: int
    standings: dict[str, int] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)
    updated_at: str | None = None

    class Config:
        extra = 'forbid'


class Castaway(BaseModel):
    """Castaway in the season catalog."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    class Config:
        extra = 'forbid'


class LeagueConfig(BaseModel):
    """League configuration settings."""

    current_season: int = Field(..., ge=1)
    premiere_date: date
    lock_weekday: int = Field(default=LOCK_WEEKDAY, ge=0, le=6)
    lock_time: str = Field(default=LOCK_TIME, pattern=r'^([01]\d|2[0-3]):[0-5]\d$')
    timezone: str = LOCK_TIMEZONE
    roster_size: int = Field(default=ROSTER_SIZE, ge=1, le=20)
    net_change_limit: int = Field(default=NET_CHANGE_LIMIT, ge=0)
    add_drop_restriction_enabled: bool = True
    elimination_scope: str = Field(default=SCOPE_LEAGUE, pattern=r'^(league|global)$')
    ledger_scope: str = Field(default=SCOPE_LEAGUE, pattern=r'^(league|global)$')
    event_points: dict[ScoringEventKind, int] = Field(default_factory=dict)
    castaways: list[Castaway] = Field(default_factory=list)
    max_commit_retries: int = Field(default=3, ge=1, le=10)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Ensure the lock time zone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f'Unknown time zone: {v}') from e
        return v

    @field_validator('castaways')
    @classmethod
    def validate_castaway_ids(cls, v):
        """Ensure castaway IDs are unique."""
        ids = [c.id for c in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Castaway IDs must be unique')
        return v

    class Config:
        extra = 'forbid'
