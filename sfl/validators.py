"""Validation functions for rosters, episode events, and scoring results."""

from typing import Iterable, List, Optional

from .constants import ROSTER_SIZE, STATUS_DROPPED, STATUS_ELIMINATED, ScoringEventKind
from .models import EpisodeLedgerEntry, RosterEntry

# Kinds that can happen at most once to a castaway in an episode
ONCE_PER_EPISODE = {
    ScoringEventKind.VOTED_OUT,
    ScoringEventKind.SURVIVED_EPISODE,
    ScoringEventKind.MADE_FINAL_THREE,
    ScoringEventKind.SEASON_WINNER,
    ScoringEventKind.MADE_JURY,
}

MAX_EPISODE_POINTS = 40
MIN_EPISODE_POINTS = -10


def validate_roster(
    user_id: str, roster: List[RosterEntry], roster_size: int = ROSTER_SIZE
) -> list[str]:
    """
    Validate that a roster is internally consistent.

    Checks:
    - Occupied slots (active + eliminated) within the roster size
    - Each castaway appears at most once
    - dropped_week present exactly for dropped entries, not before added_week
    - eliminated_week only on eliminated entries

    Args:
        user_id: Roster owner (used in messages)
        roster: Roster entries to check
        roster_size: Fixed roster size

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    occupied = sum(1 for e in roster if e.status != STATUS_DROPPED)
    if occupied > roster_size:
        errors.append(f'{user_id} holds {occupied} castaways (max {roster_size})')

    seen = set()
    duplicates = set()
    for entry in roster:
        if entry.castaway_id in seen:
            duplicates.add(entry.castaway_id)
        seen.add(entry.castaway_id)
    if duplicates:
        errors.append(f'{user_id} has duplicate entries: {", ".join(sorted(duplicates))}')

    for entry in roster:
        if (entry.status == STATUS_DROPPED) != (entry.dropped_week is not None):
            errors.append(
                f'{user_id}: {entry.castaway_id} is {entry.status} '
                f'with dropped_week={entry.dropped_week}'
            )
        if entry.dropped_week is not None and entry.added_week > entry.dropped_week:
            errors.append(
                f'{user_id}: {entry.castaway_id} added in week {entry.added_week} '
                f'after being dropped in week {entry.dropped_week}'
            )
        if entry.eliminated_week is not None and entry.status != STATUS_ELIMINATED:
            errors.append(
                f'{user_id}: {entry.castaway_id} has eliminated_week but is {entry.status}'
            )

    return errors


def validate_episode_events(
    entry: EpisodeLedgerEntry, castaway_ids: Optional[Iterable[str]] = None
) -> list[str]:
    """
    Validate an episode's events before they are saved.

    Checks:
    - All castaways are in the season catalog (when a catalog is given)
    - One-time events (voted out, survived, final three, winner, jury) at most once
    - A castaway is not both voted out and marked as surviving the episode

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    catalog = set(castaway_ids) if castaway_ids is not None else None

    for castaway_id, events in entry.events.items():
        if catalog is not None and castaway_id not in catalog:
            errors.append(f'Episode {entry.episode}: unknown castaway {castaway_id}')

        counts: dict[ScoringEventKind, int] = {}
        for event in events:
            kind = ScoringEventKind(event.kind)
            counts[kind] = counts.get(kind, 0) + event.count

        for kind in sorted(ONCE_PER_EPISODE, key=lambda k: k.value):
            if counts.get(kind, 0) > 1:
                errors.append(
                    f'Episode {entry.episode}: {castaway_id} has {kind.value} '
                    f'x{counts[kind]} (max 1)'
                )

        if counts.get(ScoringEventKind.VOTED_OUT) and counts.get(ScoringEventKind.SURVIVED_EPISODE):
            errors.append(
                f'Episode {entry.episode}: {castaway_id} is both voted_out and survived_episode'
            )

    return errors


def validate_castaway_score(
    castaway_id: str, points: int, breakdown: Optional[dict[str, int]] = None
) -> list[str]:
    """
    Check that a castaway's episode score is reasonable.

    Sanity checks:
    - Points in a plausible range for one episode
    - Breakdown adds up to the total

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    if not isinstance(points, int):
        warnings.append(f'{castaway_id} has invalid score type: {type(points)}')
        return warnings

    if points > MAX_EPISODE_POINTS:
        warnings.append(f'{castaway_id} scored {points} pts (unusually high - check events)')
    elif points < MIN_EPISODE_POINTS:
        warnings.append(f'{castaway_id} scored {points} pts (unusually low - check events)')

    if breakdown:
        breakdown_sum = sum(breakdown.values())
        if breakdown_sum != points:
            warnings.append(
                f'{castaway_id} breakdown sum ({breakdown_sum}) != total ({points})'
            )

    return warnings


def validate_episode(
    entry: EpisodeLedgerEntry,
    scores: dict[str, tuple[int, dict[str, int]]],
    castaway_ids: Optional[Iterable[str]] = None,
) -> tuple[list[str], list[str]]:
    """
    Validate an episode's events and resulting scores.

    Args:
        entry: Episode ledger entry
        scores: castaway_id -> (points, breakdown)
        castaway_ids: Season catalog, if known

    Returns:
        Tuple of (errors, warnings)
        - errors: Problems that should stop the episode from being saved
        - warnings: Issues to review but not block scoring
    """
    errors = validate_episode_events(entry, castaway_ids)
    warnings: list[str] = []
    for castaway_id, (points, breakdown) in scores.items():
        warnings.extend(validate_castaway_score(castaway_id, points, breakdown))
    return errors, warnings
