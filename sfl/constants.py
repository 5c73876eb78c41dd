"""Constants and mappings for the SFL scoring engine."""

from enum import Enum


class ScoringEventKind(str, Enum):
    """Categories of in-game achievement that earn (or cost) points."""

    IMMUNITY_WIN = 'immunity_win'
    TEAM_CHALLENGE_WIN = 'team_challenge_win'
    FOUND_IDOL = 'found_idol'
    USED_IDOL_SUCCESSFULLY = 'used_idol_successfully'
    VOTED_AT_TRIBAL = 'voted_at_tribal'
    SURVIVED_EPISODE = 'survived_episode'
    FIRE_MAKING_WIN = 'fire_making_win'
    MADE_FINAL_THREE = 'made_final_three'
    SEASON_WINNER = 'season_winner'
    MADE_JURY = 'made_jury'
    VOTED_OUT = 'voted_out'


ALL_EVENT_TYPES = list(ScoringEventKind)

# Default point value per event kind
SCORING_EVENT_POINTS = {
    ScoringEventKind.IMMUNITY_WIN: 5,
    ScoringEventKind.TEAM_CHALLENGE_WIN: 3,
    ScoringEventKind.FOUND_IDOL: 5,
    ScoringEventKind.USED_IDOL_SUCCESSFULLY: 3,
    ScoringEventKind.VOTED_AT_TRIBAL: 3,
    ScoringEventKind.SURVIVED_EPISODE: 1,
    ScoringEventKind.FIRE_MAKING_WIN: 5,
    ScoringEventKind.MADE_FINAL_THREE: 5,
    ScoringEventKind.SEASON_WINNER: 10,
    ScoringEventKind.MADE_JURY: 3,
    ScoringEventKind.VOTED_OUT: -10,
}

EVENT_LABELS = {
    ScoringEventKind.IMMUNITY_WIN: 'Immunity Win',
    ScoringEventKind.TEAM_CHALLENGE_WIN: 'Team Challenge Win',
    ScoringEventKind.FOUND_IDOL: 'Found Idol/Advantage',
    ScoringEventKind.USED_IDOL_SUCCESSFULLY: 'Used Idol Successfully',
    ScoringEventKind.VOTED_AT_TRIBAL: 'Voted at Tribal',
    ScoringEventKind.SURVIVED_EPISODE: 'Survived Episode',
    ScoringEventKind.FIRE_MAKING_WIN: 'Fire-Making Win',
    ScoringEventKind.MADE_FINAL_THREE: 'Made Final 3',
    ScoringEventKind.SEASON_WINNER: 'Season Winner',
    ScoringEventKind.MADE_JURY: 'Made Jury',
    ScoringEventKind.VOTED_OUT: 'Voted Out',
}

EVENT_DESCRIPTIONS = {
    ScoringEventKind.IMMUNITY_WIN: 'Castaway won an individual immunity challenge.',
    ScoringEventKind.TEAM_CHALLENGE_WIN: (
        "Castaway's team won a reward or immunity challenge."
    ),
    ScoringEventKind.FOUND_IDOL: 'Castaway found a hidden idol or advantage.',
    ScoringEventKind.USED_IDOL_SUCCESSFULLY: (
        'Castaway successfully played an idol or advantage that helped them.'
    ),
    ScoringEventKind.VOTED_AT_TRIBAL: 'Castaway participated in voting at tribal council.',
    ScoringEventKind.SURVIVED_EPISODE: 'Castaway survived the episode and was not voted out.',
    ScoringEventKind.FIRE_MAKING_WIN: 'Castaway won a fire-making tiebreaker challenge.',
    ScoringEventKind.MADE_FINAL_THREE: 'Castaway made it to the final three of the season.',
    ScoringEventKind.SEASON_WINNER: 'Castaway won the season and was crowned Sole Survivor.',
    ScoringEventKind.MADE_JURY: 'Castaway was voted out but made the jury.',
    ScoringEventKind.VOTED_OUT: 'Castaway was voted out of the game.',
}

# Roster entry statuses
STATUS_ACTIVE = 'active'
STATUS_DROPPED = 'dropped'
STATUS_ELIMINATED = 'eliminated'

# Roster rules
ROSTER_SIZE = 5
NET_CHANGE_LIMIT = 1
DRAFT_WEEK = 0

# Elimination / ledger scope modes
SCOPE_LEAGUE = 'league'
SCOPE_GLOBAL = 'global'
GLOBAL_SCOPE_KEY = 'global'

# Weekly roster lock: Wednesday 8pm Eastern
LOCK_WEEKDAY = 2
LOCK_TIME = '20:00'
LOCK_TIMEZONE = 'America/New_York'
