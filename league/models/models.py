"""
Data models for the Church League Basketball site backend.
Defines all data structures used throughout the application.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from typing import List, Optional, Dict, Union
from enum import Enum


class GameStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    POSTPONED = "postponed"
    INVALID = "invalid"

class GameType(Enum):
    REGULAR = "regular"
    SEMI_FINAL = "semi-final"
    FINAL = "final"

class MemberRole(Enum):
    PLAYER = "player"
    COACH = "coach"
    ASSISTANT = "assistant"

class Position(Enum):
    POINT_GUARD = "point_guard"
    SHOOTING_GUARD = "shooting_guard"
    SMALL_FORWARD = "small_forward"
    POWER_FORWARD = "power_forward"
    CENTER = "center"


@dataclass
class Team:
    id: str
    name: str
    church_name: str = ""
    logo_url: Optional[str] = None

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Team):
            return self.id == other.id
        return False


@dataclass
class Game:
    id: str
    home_team_id: str
    away_team_id: str
    status: GameStatus = GameStatus.PENDING
    game_type: GameType = GameType.REGULAR
    scheduled_at: Optional[datetime] = None
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    winner_team_id: Optional[str] = None
    venue: Optional[str] = None

    def __str__(self):
        return f"{self.away_team_id} @ {self.home_team_id} ({self.status.value})"

    @property
    def game_day(self) -> Optional[date]:
        return self.scheduled_at.date() if self.scheduled_at else None

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.COMPLETED

    def involves_team(self, team_id: str) -> bool:
        return self.home_team_id == team_id or self.away_team_id == team_id

    def involves_pair(self, team_a_id: str, team_b_id: str) -> bool:
        return {self.home_team_id, self.away_team_id} == {team_a_id, team_b_id}

    def get_opponent_id(self, team_id: str) -> Optional[str]:
        if self.home_team_id == team_id:
            return self.away_team_id
        elif self.away_team_id == team_id:
            return self.home_team_id
        return None

    def is_home_game(self, team_id: str) -> bool:
        return self.home_team_id == team_id

    def scores_for(self, team_id: str) -> tuple:
        """(own score, opponent score) for one side, missing scores read as 0."""
        home = self.home_score or 0
        away = self.away_score or 0
        if self.is_home_game(team_id):
            return home, away
        return away, home


@dataclass
class GameWithTeams:
    """A game with both sides resolved to Team values by the data-access layer."""
    game: Game
    home_team: Optional[Team] = None
    away_team: Optional[Team] = None

    @property
    def id(self) -> str:
        return self.game.id


@dataclass
class Member:
    id: str
    name: str
    role: MemberRole = MemberRole.PLAYER
    team_id: Optional[str] = None
    jersey_number: Optional[int] = None
    position: Optional[Position] = None
    age: Optional[int] = None
    inactive: bool = False
    profile_pic_url: Optional[str] = None

    @property
    def is_player(self) -> bool:
        return self.role == MemberRole.PLAYER

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Member):
            return self.id == other.id
        return False


@dataclass
class StatLine:
    game_id: str
    member_id: str
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    fouls: int = 0
    technical_fouls: int = 0
    field_goal_made: int = 0
    field_goal_attempts: int = 0
    three_point_made: int = 0
    three_point_attempts: int = 0
    free_throw_made: int = 0
    free_throw_attempts: int = 0
    id: Optional[str] = None


COUNTING_STATS = [
    "points",
    "rebounds",
    "assists",
    "steals",
    "fouls",
    "technical_fouls",
    "field_goal_made",
    "field_goal_attempts",
    "three_point_made",
    "three_point_attempts",
    "free_throw_made",
    "free_throw_attempts",
]


@dataclass
class TeamStanding:
    team_id: str
    team_name: str
    division: str
    logo_url: Optional[str] = None
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    win_percentage: float = 0.0
    points_scored: int = 0
    points_against: int = 0
    point_differential: int = 0
    games_behind: Union[float, str] = 0.0


@dataclass
class StandingsTable:
    divisions: Dict[str, List[TeamStanding]] = field(default_factory=dict)
    excluded_team_ids: List[str] = field(default_factory=list)

    def get_division(self, division: str) -> List[TeamStanding]:
        return self.divisions.get(division, [])

    def get_team(self, team_id: str) -> Optional[TeamStanding]:
        for rows in self.divisions.values():
            for row in rows:
                if row.team_id == team_id:
                    return row
        return None


@dataclass
class BracketPairing:
    slot: int
    round: GameType
    side_a_team_id: str
    side_b_team_id: str
    side_a_wins: int = 0
    side_b_wins: int = 0

    def series_winner(self, wins_needed: int) -> Optional[str]:
        if self.side_a_wins >= wins_needed:
            return self.side_a_team_id
        if self.side_b_wins >= wins_needed:
            return self.side_b_team_id
        return None


@dataclass
class PlayerSeasonStats:
    member_id: str
    games: int = 0
    totals: Dict[str, int] = field(default_factory=dict)
    points_per_game: float = 0.0
    rebounds_per_game: float = 0.0
    assists_per_game: float = 0.0
    field_goal_percentage: float = 0.0
    three_point_percentage: float = 0.0
    free_throw_percentage: float = 0.0


@dataclass
class LeaderEntry:
    member_id: str
    name: str
    team_id: Optional[str]
    value: float
    games: int
    profile_pic_url: Optional[str] = None


@dataclass
class GameLogEntry:
    game_id: str
    scheduled_at: Optional[datetime]
    opponent_team_id: Optional[str]
    score: str
    result: str
    stat_line: StatLine


@dataclass
class TeamSeasonSummary:
    team_id: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    win_percentage: float = 0.0
    points_for: int = 0
    points_against: int = 0
    avg_points_for: float = 0.0
    avg_points_against: float = 0.0
    stat_totals: Dict[str, int] = field(default_factory=dict)


@dataclass
class BoxScoreSide:
    team: Optional[Team]
    lines: List[StatLine] = field(default_factory=list)
    totals: Dict[str, int] = field(default_factory=dict)


@dataclass
class BoxScore:
    game: GameWithTeams
    home: BoxScoreSide
    away: BoxScoreSide


@dataclass
class GameSubmission:
    """Admin form payload for creating or editing a game."""
    home_team_id: str
    away_team_id: str
    scheduled_at: Optional[datetime]
    status: GameStatus = GameStatus.PENDING
    game_type: GameType = GameType.REGULAR
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    venue: Optional[str] = None
    id: Optional[str] = None


@dataclass
class DataQualityIssue:
    issue_type: str
    severity: str
    description: str
    game_ids: List[str] = field(default_factory=list)
    team_ids: List[str] = field(default_factory=list)


@dataclass
class DataValidationResult:
    is_clean: bool = True
    errors: List[DataQualityIssue] = field(default_factory=list)
    warnings: List[DataQualityIssue] = field(default_factory=list)

    def add_issue(self, issue: DataQualityIssue):
        if issue.severity == 'error':
            self.errors.append(issue)
            self.is_clean = False
        else:
            self.warnings.append(issue)

    def get_summary(self) -> str:
        summary = f"Data Clean: {self.is_clean}\n"
        summary += f"Errors: {len(self.errors)}\n"
        summary += f"Warnings: {len(self.warnings)}\n"
        return summary
