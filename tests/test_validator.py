"""
Tests for game submission rules and the stored-data quality report.
"""

import sys
import os
from datetime import datetime, timezone

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league.models import (
    Team, Game, Member, GameStatus, GameType, GameSubmission, StatLine,
    ValidationError, GameValidationError
)
from league.services.standings import StandingsCalculator
from league.services.validator import GameResultValidator, RosterValidator, LeagueDataValidator
from fake_supabase import DIVISION_MAP


WHEN = datetime(2025, 3, 1, 18, 0)


def submission(**overrides):
    values = dict(
        home_team_id="t1",
        away_team_id="t2",
        scheduled_at=WHEN,
        status=GameStatus.COMPLETED,
        home_score=50,
        away_score=40
    )
    values.update(overrides)
    return GameSubmission(**values)


def test_winner_derived_from_scores():
    validator = GameResultValidator()

    game, warnings = validator.build_game(submission())
    assert game.winner_team_id == "t1"
    assert warnings == []

    game, _ = validator.build_game(submission(home_score=40, away_score=50))
    assert game.winner_team_id == "t2"

    print("[PASS] Winner derivation test passed")


def test_tied_completed_game_warns():
    game, warnings = GameResultValidator().build_game(submission(home_score=45, away_score=45))

    assert game.winner_team_id is None
    assert game.is_completed
    assert len(warnings) == 1
    assert "45-45" in warnings[0]


def test_scores_cleared_unless_completed():
    game, warnings = GameResultValidator().build_game(
        submission(status=GameStatus.PENDING, home_score=10, away_score=5)
    )

    assert game.home_score is None
    assert game.away_score is None
    assert game.winner_team_id is None
    assert warnings == []


def test_submission_fields_carried_over():
    game, _ = GameResultValidator().build_game(submission(
        id="g9", game_type=GameType.SEMI_FINAL, venue="Gimnasio Central"
    ))

    assert game.id == "g9"
    assert game.game_type == GameType.SEMI_FINAL
    assert game.venue == "Gimnasio Central"
    assert game.scheduled_at == WHEN


@pytest.mark.parametrize("overrides", [
    {"scheduled_at": None},
    {"home_team_id": ""},
    {"away_team_id": ""},
    {"away_team_id": "t1"},
    {"home_score": None},
    {"away_score": -1},
])
def test_invalid_submissions_rejected(overrides):
    with pytest.raises(GameValidationError):
        GameResultValidator().build_game(submission(**overrides))


def test_stat_line_checks():
    validator = GameResultValidator()

    validator.check_stat_line(StatLine(game_id="g1", member_id="m1", points=10,
                                       field_goal_made=5, field_goal_attempts=9))

    with pytest.raises(GameValidationError):
        validator.check_stat_line(StatLine(game_id="g1", member_id="m1", rebounds=-2))

    with pytest.raises(GameValidationError, match="free throw"):
        validator.check_stat_line(StatLine(game_id="g1", member_id="m1",
                                           free_throw_made=3, free_throw_attempts=2))

    with pytest.raises(GameValidationError):
        validator.check_stat_line(StatLine(game_id="", member_id="m1"))


def league_teams():
    return [
        Team(id="t1", name="Leones"),
        Team(id="t2", name="Guerreros"),
        Team(id="t5", name="Sin Division"),
    ]


def completed(game_id, home, away, home_score, away_score, winner):
    return Game(
        id=game_id,
        home_team_id=home,
        away_team_id=away,
        status=GameStatus.COMPLETED,
        home_score=home_score,
        away_score=away_score,
        winner_team_id=winner
    )


def issue_types(issues):
    return sorted(issue.issue_type for issue in issues)


def test_clean_data_has_only_mapping_warning():
    validator = LeagueDataValidator(StandingsCalculator(DIVISION_MAP))
    games = [completed("g1", "t1", "t2", 50, 40, "t1")]

    result = validator.validate(league_teams(), games)

    assert result.is_clean
    assert result.errors == []
    assert issue_types(result.warnings) == ["unmapped_division"]
    assert result.warnings[0].team_ids == ["t5"]


def test_data_problems_reported():
    validator = LeagueDataValidator(StandingsCalculator(DIVISION_MAP))
    games = [
        completed("g1", "t1", "t2", 45, 45, None),
        completed("g2", "t1", "t2", 50, 40, "t9"),
        completed("g3", "t1", "t2", 40, 50, "t1"),
        completed("g4", "t1", "t1", 50, 40, "t1"),
        completed("g5", "t1", "ghost", 50, 40, "t1"),
        Game(id="g6", home_team_id="ghost", away_team_id="t2"),
    ]

    result = validator.validate(league_teams(), games)

    assert not result.is_clean
    assert issue_types(result.errors) == [
        "self_match", "winner_not_participant", "winner_score_mismatch"
    ]
    assert issue_types(result.warnings) == [
        "tie_or_missing_winner", "unknown_team", "unmapped_division"
    ]

    unknown = [issue for issue in result.warnings if issue.issue_type == "unknown_team"][0]
    assert unknown.game_ids == ["g5", "g6"]

    summary = result.get_summary()
    assert "Errors: 3" in summary
    assert "Warnings: 3" in summary


def test_submission_time_stored_in_league_time():
    aware = datetime(2025, 3, 2, 0, 30, tzinfo=timezone.utc)

    game, _ = GameResultValidator().build_game(submission(scheduled_at=aware))

    assert game.scheduled_at == datetime(2025, 3, 1, 20, 30)
    assert game.game_day.isoformat() == "2025-03-01"


def test_roster_checks():
    validator = RosterValidator()

    validator.check_team(Team(id=None, name="Atalayas"))
    validator.check_member(Member(id=None, name="Ana", jersey_number=0, age=17))

    with pytest.raises(ValidationError, match="Team name"):
        validator.check_team(Team(id=None, name="   "))
    with pytest.raises(ValidationError, match="Member name"):
        validator.check_member(Member(id=None, name=""))
    with pytest.raises(ValidationError, match="Jersey"):
        validator.check_member(Member(id=None, name="Ana", jersey_number=-4))
    with pytest.raises(ValidationError, match="Age"):
        validator.check_member(Member(id=None, name="Ana", age=-1))


def test_game_errors_are_validation_errors():
    with pytest.raises(ValidationError):
        GameResultValidator().build_game(submission(away_team_id="t1"))
