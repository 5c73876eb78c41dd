"""Errors raised by roster and scoring operations.

Rule violations subclass ``RosterChangeError`` (itself a ``ValueError``) and
are raised before anything is written, so a caller can show the message to the
user verbatim.
"""

from typing import Iterable, Optional


class RosterChangeError(ValueError):
    """A roster operation that violates league rules."""

    def __init__(self, message: str, castaway_id: Optional[str] = None):
        super().__init__(message)
        self.castaway_id = castaway_id


class InvalidRosterSize(RosterChangeError):
    """Draft did not supply exactly the roster size of distinct, eligible castaways."""


class NetChangeExceeded(RosterChangeError):
    """More castaways left the roster this week than the net-change cap allows."""

    def __init__(self, message: str, departed: Iterable[str] = ()):
        super().__init__(message)
        self.departed = sorted(departed)


class RosterFull(RosterChangeError):
    """The transaction would leave more occupied slots than the roster size."""


class SameCastawayAddAndDrop(RosterChangeError):
    """The same castaway was named as both the add and the drop."""


class CannotDropEliminated(RosterChangeError):
    """Eliminated castaways keep their roster slot for the rest of the season."""


class CastawayEliminated(RosterChangeError):
    """An eliminated castaway cannot be drafted or added."""


class CastawayNotOnRoster(RosterChangeError):
    """The drop target is not an active member of the roster."""


class CastawayAlreadyOnRoster(RosterChangeError):
    """The add target is already active on the roster."""


class UnknownCastaway(RosterChangeError):
    """The castaway ID is not in the season's castaway catalog."""


class EmptyTransaction(RosterChangeError):
    """Neither an add nor a drop was requested."""


class NoPriorSnapshotToResetTo(RosterChangeError):
    """No committed roster from last week, or it already matches the live roster."""


class NoSnapshotForWeek(LookupError):
    """No roster snapshot was committed for the requested week."""

    def __init__(self, user_id: str, week: int):
        super().__init__(f'No roster snapshot for {user_id} in week {week}')
        self.user_id = user_id
        self.week = week


class ConcurrentModificationError(RuntimeError):
    """A document changed between read and conditional write."""

    def __init__(self, key: tuple, expected: Optional[str], actual: Optional[str]):
        super().__init__(
            f'Document {"/".join(str(p) for p in key)} changed '
            f'(expected version {expected}, found {actual})'
        )
        self.key = key
        self.expected = expected
        self.actual = actual
