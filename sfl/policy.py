"""Weekly roster change policy.

A proposed add/drop is checked against the roster committed at the end of
last week, not against the live roster, so the net-change cap holds for
everything done in the current week combined. Eliminated castaways keep their
slot for the rest of the season and can never be dropped.
"""

from typing import Iterable, List, Optional

from .constants import NET_CHANGE_LIMIT, ROSTER_SIZE, STATUS_ACTIVE, STATUS_DROPPED
from .exceptions import (
    CannotDropEliminated,
    CastawayAlreadyOnRoster,
    CastawayEliminated,
    CastawayNotOnRoster,
    EmptyTransaction,
    NetChangeExceeded,
    NoPriorSnapshotToResetTo,
    RosterFull,
    SameCastawayAddAndDrop,
)
from .models import RosterEntry, active_ids, copy_roster, rosters_equal


def find_entry(roster: List[RosterEntry], castaway_id: str) -> Optional[RosterEntry]:
    return next((entry for entry in roster if entry.castaway_id == castaway_id), None)


def occupied_slots(roster: List[RosterEntry]) -> int:
    """Active entries plus eliminated ones, whose slot is forfeited for the season."""
    return sum(1 for entry in roster if not entry.is_dropped)


def departures(
    previous_roster: List[RosterEntry],
    proposed_roster: List[RosterEntry],
    eliminated_ids: Iterable[str] = (),
) -> set[str]:
    """
    Castaways active last week who are no longer active in the proposal.

    Castaways who left because they were eliminated are not the user's change
    and are not counted.
    """
    return active_ids(previous_roster) - active_ids(proposed_roster) - set(eliminated_ids)


def is_net_roster_change_allowed(
    previous_roster: List[RosterEntry],
    proposed_roster: List[RosterEntry],
    eliminated_ids: Iterable[str] = (),
    net_change_limit: int = NET_CHANGE_LIMIT,
) -> bool:
    """True when at most net_change_limit of last week's castaways are gone."""
    if not previous_roster:
        return True
    return len(departures(previous_roster, proposed_roster, eliminated_ids)) <= net_change_limit


def only_droppable_castaway(
    previous_roster: List[RosterEntry],
    current_roster: List[RosterEntry],
    eliminated_ids: Iterable[str] = (),
    net_change_limit: int = NET_CHANGE_LIMIT,
) -> Optional[str]:
    """
    The castaway added this week, once the weekly change has been used.

    Dropping anyone else would be a second net change. Returns None while the
    weekly change is still available, or when there is no single new castaway.
    """
    if not previous_roster:
        return None
    if len(departures(previous_roster, current_roster, eliminated_ids)) < net_change_limit:
        return None
    new_ids = active_ids(current_roster) - active_ids(previous_roster)
    return next(iter(new_ids)) if len(new_ids) == 1 else None


def can_drop(entry: RosterEntry, eliminated_ids: Iterable[str] = ()) -> bool:
    """Only active, non-eliminated castaways can be dropped."""
    return entry.is_active and entry.castaway_id not in set(eliminated_ids)


def get_available_castaways(
    all_castaway_ids: Iterable[str],
    current_roster: List[RosterEntry],
    eliminated_ids: Iterable[str],
) -> list[str]:
    """
    Castaways a user could add: not held on the roster and not eliminated.

    Castaways the user dropped are available again (re-adding reactivates
    their entry).
    """
    held = {entry.castaway_id for entry in current_roster if not entry.is_dropped}
    eliminated = set(eliminated_ids)
    return [c for c in all_castaway_ids if c not in held and c not in eliminated]


def apply_add_drop(
    roster: List[RosterEntry],
    add_id: Optional[str],
    drop_id: Optional[str],
    week: int,
) -> List[RosterEntry]:
    """
    Apply an add and/or drop to a copy of the roster.

    A dropped castaway who is added again gets their existing entry back:
    status active, added_week reset to this week, and the window they held
    before the drop moved to past_stints. Re-adding in the week of the drop
    simply undoes the drop.
    """
    proposed = copy_roster(roster)

    if drop_id:
        entry = find_entry(proposed, drop_id)
        if entry is not None:
            entry.status = STATUS_DROPPED
            entry.dropped_week = week

    if add_id:
        entry = find_entry(proposed, add_id)
        if entry is not None and entry.is_dropped:
            if entry.dropped_week != week:
                # Same-week re-add is an undo and keeps the original window
                if entry.dropped_week > entry.added_week:
                    entry.past_stints.append((entry.added_week, entry.dropped_week))
                entry.added_week = week
            entry.status = STATUS_ACTIVE
            entry.dropped_week = None
        elif entry is None:
            proposed.append(RosterEntry(castaway_id=add_id, added_week=week))

    return proposed


def validate_add_drop(
    previous_roster: Optional[List[RosterEntry]],
    current_roster: List[RosterEntry],
    add_id: Optional[str],
    drop_id: Optional[str],
    week: int,
    eliminated_ids: Iterable[str] = (),
    restriction_enabled: bool = True,
    roster_size: int = ROSTER_SIZE,
    net_change_limit: int = NET_CHANGE_LIMIT,
) -> List[RosterEntry]:
    """
    Validate an add/drop and return the roster it would produce.

    Args:
        previous_roster: Roster committed as of last week (None if there is none)
        current_roster: Live roster, including changes already made this week
        add_id: Castaway to add, or None
        drop_id: Castaway to drop, or None
        week: Current week from the week clock
        eliminated_ids: Castaways out of the game
        restriction_enabled: Enforce the weekly net-change cap
        roster_size: Fixed roster size
        net_change_limit: Castaways from last week that may be gone

    Returns:
        The proposed roster (the input rosters are not modified)

    Raises:
        EmptyTransaction, SameCastawayAddAndDrop, CastawayNotOnRoster,
        CannotDropEliminated, CastawayEliminated, CastawayAlreadyOnRoster,
        RosterFull, NetChangeExceeded
    """
    eliminated = set(eliminated_ids)

    if not add_id and not drop_id:
        raise EmptyTransaction('Choose a castaway to add, drop, or both')

    if add_id and add_id == drop_id:
        raise SameCastawayAddAndDrop(
            f'You cannot add and drop the same castaway ({add_id})', castaway_id=add_id
        )

    if drop_id:
        entry = find_entry(current_roster, drop_id)
        if entry is None or entry.is_dropped:
            raise CastawayNotOnRoster(f'{drop_id} is not on your roster', castaway_id=drop_id)
        if not can_drop(entry, eliminated):
            raise CannotDropEliminated(
                f'{drop_id} has been eliminated; eliminated castaways keep their roster '
                f'slot for the rest of the season and cannot be dropped',
                castaway_id=drop_id,
            )

    if add_id:
        entry = find_entry(current_roster, add_id)
        if add_id in eliminated or (entry is not None and entry.is_eliminated):
            raise CastawayEliminated(
                f'{add_id} has been eliminated and cannot be added', castaway_id=add_id
            )
        if entry is not None and entry.is_active:
            raise CastawayAlreadyOnRoster(f'{add_id} is already on your roster', castaway_id=add_id)

    proposed = apply_add_drop(current_roster, add_id, drop_id, week)

    if occupied_slots(proposed) > roster_size:
        raise RosterFull(
            f'You have the maximum of {roster_size} castaways. '
            f'Drop a castaway before adding {add_id}.',
            castaway_id=add_id,
        )

    if restriction_enabled and previous_roster:
        departed = departures(previous_roster, proposed, eliminated)
        if len(departed) > net_change_limit:
            raise NetChangeExceeded(
                f'You can only make {net_change_limit} net roster change per week. '
                f'At least {roster_size - net_change_limit} of {roster_size} castaways must '
                f'remain the same as last week (this change would remove '
                f'{", ".join(sorted(departed))}).',
                departed=departed,
            )

    return proposed


def validate_reset_to_prior_week(
    prior_roster: Optional[List[RosterEntry]], live_roster: List[RosterEntry]
) -> List[RosterEntry]:
    """
    Check that the live roster can be reset to last week's committed roster.

    Returns:
        A copy of the prior roster

    Raises:
        NoPriorSnapshotToResetTo: No prior roster, or nothing to undo
    """
    if prior_roster is None:
        raise NoPriorSnapshotToResetTo("There is no committed roster from last week to reset to")
    if rosters_equal(prior_roster, live_roster):
        raise NoPriorSnapshotToResetTo("Your roster already matches last week's roster")
    return copy_roster(prior_roster)
