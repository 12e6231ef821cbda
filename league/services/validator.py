"""
Game result validation for the Church League Basketball site.

GameResultValidator applies the admin form rules to a single game
submission and RosterValidator does the same for teams and members.
LeagueDataValidator scans stored teams and games for data-quality gaps
that silently skew the standings.
"""

from typing import List, Tuple
from collections import defaultdict

from league.models import (
    Team, Game, Member, GameStatus, GameSubmission,
    ValidationError, GameValidationError,
    StatLine, COUNTING_STATS,
    DataQualityIssue, DataValidationResult
)
from league.services.standings import StandingsCalculator
from league.services.calendar import to_league_time
from league.core.logging_config import get_logger

logger = get_logger(__name__)


class GameResultValidator:
    """
    Turns an admin game submission into a Game ready to be stored.
    """

    def build_game(self, submission: GameSubmission) -> Tuple[Game, List[str]]:
        """
        Validate a submission and derive its winner.

        Args:
            submission: The admin form payload

        Returns:
            The Game to store and a list of non-fatal warnings

        Raises:
            GameValidationError: If a required field is missing or a rule is broken
        """
        if not submission.scheduled_at or not submission.home_team_id or not submission.away_team_id:
            raise GameValidationError("Date, home team and away team are required")

        if submission.home_team_id == submission.away_team_id:
            raise GameValidationError("Home and away teams must be different")

        warnings = []
        home_score = None
        away_score = None
        winner_team_id = None

        if submission.status == GameStatus.COMPLETED:
            if submission.home_score is None or submission.away_score is None:
                raise GameValidationError("A completed game needs both scores")
            if submission.home_score < 0 or submission.away_score < 0:
                raise GameValidationError("Scores cannot be negative")

            home_score = submission.home_score
            away_score = submission.away_score

            if home_score > away_score:
                winner_team_id = submission.home_team_id
            elif away_score > home_score:
                winner_team_id = submission.away_team_id
            else:
                warnings.append(
                    f"Completed game tied {home_score}-{away_score}; no winner recorded"
                )
                logger.warning("Game %s saved as completed with a tie", submission.id or "(new)")

        game = Game(
            id=submission.id or "",
            home_team_id=submission.home_team_id,
            away_team_id=submission.away_team_id,
            status=submission.status,
            game_type=submission.game_type,
            scheduled_at=to_league_time(submission.scheduled_at),
            home_score=home_score,
            away_score=away_score,
            winner_team_id=winner_team_id,
            venue=submission.venue
        )
        return game, warnings

    def check_stat_line(self, stat_line: StatLine):
        """
        Raises:
            GameValidationError: On negative counts or more makes than attempts
        """
        if not stat_line.game_id or not stat_line.member_id:
            raise GameValidationError("Game and member are required")

        negative = [stat for stat in COUNTING_STATS if (getattr(stat_line, stat) or 0) < 0]
        if negative:
            raise GameValidationError(f"Stats cannot be negative: {', '.join(negative)}")

        for shot in ("field_goal", "three_point", "free_throw"):
            made = getattr(stat_line, f"{shot}_made")
            attempts = getattr(stat_line, f"{shot}_attempts")
            if made > attempts:
                raise GameValidationError(
                    f"{shot.replace('_', ' ')} made ({made}) exceeds attempts ({attempts})"
                )


class RosterValidator:
    """Team and member form rules from the admin console."""

    def check_team(self, team: Team):
        """
        Raises:
            ValidationError: If the team has no name
        """
        if not (team.name or "").strip():
            raise ValidationError("Team name is required")

    def check_member(self, member: Member):
        """
        Raises:
            ValidationError: If the name is blank or a number is negative
        """
        if not (member.name or "").strip():
            raise ValidationError("Member name is required")
        if member.jersey_number is not None and member.jersey_number < 0:
            raise ValidationError("Jersey number cannot be negative")
        if member.age is not None and member.age < 0:
            raise ValidationError("Age cannot be negative")


class LeagueDataValidator:
    """
    Checks stored teams and games for problems that skew standings.
    Errors break a standings invariant; warnings are worth a look.
    """

    def __init__(self, calculator: StandingsCalculator = None):
        self.calculator = calculator or StandingsCalculator()

    def validate(self, teams: List[Team], games: List[Game]) -> DataValidationResult:
        result = DataValidationResult()
        team_ids = {team.id for team in teams}

        self._check_unmapped_divisions(teams, result)
        self._check_self_matches(games, result)
        self._check_unknown_teams(games, team_ids, result)
        self._check_missing_winners(games, result)
        self._check_winner_participants(games, result)
        self._check_winner_scores(games, result)

        logger.info(
            "Data validation: %d error(s), %d warning(s)",
            len(result.errors), len(result.warnings)
        )
        return result

    def _check_unmapped_divisions(self, teams: List[Team], result: DataValidationResult):
        for team in teams:
            if self.calculator.get_team_division(team.name) is None:
                result.add_issue(DataQualityIssue(
                    issue_type="unmapped_division",
                    severity="warning",
                    description=f"Team '{team.name}' has no division and is left out of the standings",
                    team_ids=[team.id]
                ))

    def _check_self_matches(self, games: List[Game], result: DataValidationResult):
        for game in games:
            if game.home_team_id == game.away_team_id:
                result.add_issue(DataQualityIssue(
                    issue_type="self_match",
                    severity="error",
                    description=f"Game {game.id} has team {game.home_team_id} on both sides",
                    game_ids=[game.id],
                    team_ids=[game.home_team_id]
                ))

    def _check_unknown_teams(self, games: List[Game], team_ids: set, result: DataValidationResult):
        unknown = defaultdict(list)
        for game in games:
            for side in (game.home_team_id, game.away_team_id):
                if side not in team_ids:
                    unknown[side].append(game.id)

        for team_id, game_ids in unknown.items():
            result.add_issue(DataQualityIssue(
                issue_type="unknown_team",
                severity="warning",
                description=f"Team {team_id} appears in {len(game_ids)} game(s) but is not a league team",
                game_ids=game_ids,
                team_ids=[team_id]
            ))

    def _check_missing_winners(self, games: List[Game], result: DataValidationResult):
        for game in games:
            if game.is_completed and game.winner_team_id is None:
                result.add_issue(DataQualityIssue(
                    issue_type="tie_or_missing_winner",
                    severity="warning",
                    description=(
                        f"Completed game {game.id} has no winner "
                        f"({game.home_score}-{game.away_score}); counted as a tie"
                    ),
                    game_ids=[game.id],
                    team_ids=[game.home_team_id, game.away_team_id]
                ))

    def _check_winner_participants(self, games: List[Game], result: DataValidationResult):
        for game in games:
            if game.winner_team_id is not None and not game.involves_team(game.winner_team_id):
                result.add_issue(DataQualityIssue(
                    issue_type="winner_not_participant",
                    severity="error",
                    description=f"Game {game.id} winner {game.winner_team_id} did not play in it",
                    game_ids=[game.id],
                    team_ids=[game.winner_team_id]
                ))

    def _check_winner_scores(self, games: List[Game], result: DataValidationResult):
        for game in games:
            if not game.is_completed or game.winner_team_id is None:
                continue
            if game.home_score is None or game.away_score is None:
                continue
            if not game.involves_team(game.winner_team_id):
                continue
            own, opponent = game.scores_for(game.winner_team_id)
            if own <= opponent:
                result.add_issue(DataQualityIssue(
                    issue_type="winner_score_mismatch",
                    severity="error",
                    description=(
                        f"Game {game.id} winner {game.winner_team_id} scored {own} "
                        f"against {opponent}"
                    ),
                    game_ids=[game.id],
                    team_ids=[game.winner_team_id]
                ))
