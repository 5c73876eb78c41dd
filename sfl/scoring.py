"""Event catalog: point values for scoring events."""

from typing import Dict, Iterable, Mapping, Optional, Tuple

from .constants import EVENT_DESCRIPTIONS, EVENT_LABELS, SCORING_EVENT_POINTS, ScoringEventKind
from .models import ScoringEvent


def point_value(
    kind: ScoringEventKind, event_points: Optional[Mapping[ScoringEventKind, int]] = None
) -> int:
    """
    Look up the point value of an event kind.

    Args:
        kind: Scoring event kind
        event_points: Per-deployment point table (defaults to SCORING_EVENT_POINTS)

    Returns:
        Signed point value (voted_out is negative)
    """
    table = SCORING_EVENT_POINTS if event_points is None else event_points
    kind = ScoringEventKind(kind)
    if kind in table:
        return table[kind]
    # Partial override tables fall back to the defaults
    return SCORING_EVENT_POINTS[kind]


def points_from_events(
    events: Iterable[ScoringEvent],
    event_points: Optional[Mapping[ScoringEventKind, int]] = None,
) -> Tuple[int, Dict[str, int]]:
    """
    Score a castaway's events for one episode.

    Scoring:
        - Each event contributes point_value(kind) x count
        - Repeated kinds are summed (two tribal votes = 2 x voted_at_tribal)
        - Negative totals are kept as-is

    Returns:
        Tuple of (total points, breakdown by event kind)
    """
    points = 0
    breakdown: Dict[str, int] = {}

    for event in events:
        if not event.count:
            continue
        event_pts = point_value(event.kind, event_points) * event.count
        key = ScoringEventKind(event.kind).value
        breakdown[key] = breakdown.get(key, 0) + event_pts
        points += event_pts

    return points, breakdown


def get_event_label(kind: ScoringEventKind) -> str:
    """Short display label for an event kind."""
    return EVENT_LABELS[ScoringEventKind(kind)]


def get_event_description(
    kind: ScoringEventKind, event_points: Optional[Mapping[ScoringEventKind, int]] = None
) -> dict[str, str]:
    """Title and description of an event kind, including its point value."""
    kind = ScoringEventKind(kind)
    value = point_value(kind, event_points)
    if value < 0:
        worth = f'Deducts {abs(value)} points from their total.'
    else:
        worth = f'Worth +{value} points.'
    return {
        'title': EVENT_LABELS[kind],
        'description': f'{EVENT_DESCRIPTIONS[kind]} {worth}',
    }
