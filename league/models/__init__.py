"""
Data models for the league site backend.
"""

from .models import (
    GameStatus,
    GameType,
    MemberRole,
    Position,
    Team,
    Game,
    GameWithTeams,
    Member,
    StatLine,
    COUNTING_STATS,
    TeamStanding,
    StandingsTable,
    BracketPairing,
    PlayerSeasonStats,
    LeaderEntry,
    GameLogEntry,
    TeamSeasonSummary,
    BoxScoreSide,
    BoxScore,
    GameSubmission,
    DataQualityIssue,
    DataValidationResult
)
from .errors import (
    LeagueError,
    ValidationError,
    GameValidationError,
    NotFoundError,
    DataAccessError
)

__all__ = [
    "GameStatus",
    "GameType",
    "MemberRole",
    "Position",
    "Team",
    "Game",
    "GameWithTeams",
    "Member",
    "StatLine",
    "COUNTING_STATS",
    "TeamStanding",
    "StandingsTable",
    "BracketPairing",
    "PlayerSeasonStats",
    "LeaderEntry",
    "GameLogEntry",
    "TeamSeasonSummary",
    "BoxScoreSide",
    "BoxScore",
    "GameSubmission",
    "DataQualityIssue",
    "DataValidationResult",
    "LeagueError",
    "ValidationError",
    "GameValidationError",
    "NotFoundError",
    "DataAccessError"
]
