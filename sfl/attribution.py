"""Attribution calculator: points a fantasy roster earned from episode scores.

Roster totals are always re-derived from the episode ledger and the roster
timeline, never accumulated incrementally, so recomputing any number of times
gives the same answer.

Attribution window for a roster entry:
    - Episode n counts when n >= added_week
    - and, if dropped, n < dropped_week (the drop week itself is excluded)
    - and, if eliminated, n <= eliminated_week (the elimination episode still counts)

A reactivated castaway keeps a single entry whose added_week is the
reactivation week; the windows it held before being dropped are kept in
past_stints and still count.
"""

from typing import Iterable, List, Mapping

from .models import RosterEntry

EpisodeScores = Mapping[int, Mapping[str, int]]


def is_credited(entry: RosterEntry, episode: int) -> bool:
    """Whether an episode falls inside an entry's attribution window."""
    if any(start <= episode < end for start, end in entry.past_stints):
        return True
    if episode < entry.added_week:
        return False
    if entry.dropped_week is not None and episode >= entry.dropped_week:
        return False
    if entry.eliminated_week is not None and episode > entry.eliminated_week:
        return False
    return True


def credited_episodes(entry: RosterEntry, episode_scores: EpisodeScores) -> List[int]:
    """Episode numbers whose points this entry earns for the roster."""
    return sorted(n for n in episode_scores if is_credited(entry, n))


def entry_points(entry: RosterEntry, episode_scores: EpisodeScores) -> int:
    """Points one roster entry contributes. Missing scores count as zero."""
    return sum(
        episode_scores[n].get(entry.castaway_id, 0) or 0
        for n in episode_scores
        if is_credited(entry, n)
    )


def total_points(entries: Iterable[RosterEntry], episode_scores: EpisodeScores) -> int:
    """
    Total points earned by a fantasy roster.

    Args:
        entries: Every roster entry, including dropped and eliminated ones
        episode_scores: {episode_number: {castaway_id: points}}

    Returns:
        Sum of each entry's points over its attribution window. Negative
        episodes (voted out) are not floored.
    """
    return sum(entry_points(entry, episode_scores) for entry in entries)


def attribute_points(
    entries: Iterable[RosterEntry], episode_scores: EpisodeScores
) -> List[RosterEntry]:
    """Copies of the entries with accumulated_points refreshed."""
    refreshed = []
    for entry in entries:
        entry = entry.copy()
        entry.accumulated_points = entry_points(entry, episode_scores)
        refreshed.append(entry)
    return refreshed


def rosters_affected_by(
    rosters: Mapping[str, Iterable[RosterEntry]], castaway_ids: Iterable[str]
) -> List[str]:
    """
    Users whose roster has ever held any of the castaways.

    Dropped entries count: a correction to an episode before the drop still
    changes that roster's total.
    """
    wanted = set(castaway_ids)
    return sorted(
        user_id
        for user_id, entries in rosters.items()
        if any(entry.castaway_id in wanted for entry in entries)
    )
