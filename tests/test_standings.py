"""
Tests for the standings calculator: records, ordering, divisions and games behind.
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league.models import Team, Game, GameStatus, GameType
from league.services.standings import StandingsCalculator, games_behind
from league.core.config import DIVISION_A, DIVISION_B


DIVISIONS = {
    "Team X": DIVISION_A,
    "Team Y": DIVISION_A,
    "Team Z": DIVISION_A,
    "Team B1": DIVISION_B,
    "Team B2": DIVISION_B,
}


def make_game(game_id, home, away, home_score, away_score, winner=None,
              status=GameStatus.COMPLETED, game_type=GameType.REGULAR):
    return Game(
        id=game_id,
        home_team_id=home,
        away_team_id=away,
        status=status,
        game_type=game_type,
        home_score=home_score,
        away_score=away_score,
        winner_team_id=winner
    )


def two_teams():
    return [Team(id="X", name="Team X"), Team(id="Y", name="Team Y")]


def test_single_game_scenario():
    """Home win 50-40 gives 1-0/+10 and 0-1/-10 with one game behind."""
    calculator = StandingsCalculator(DIVISIONS)
    games = [make_game("G1", "X", "Y", 50, 40, winner="X")]

    table = calculator.calculate_standings(two_teams(), games)
    division = table.get_division(DIVISION_A)

    assert [row.team_id for row in division] == ["X", "Y"]

    leader, trailer = division
    assert (leader.wins, leader.losses, leader.games_played) == (1, 0, 1)
    assert leader.win_percentage == 1.0
    assert leader.point_differential == 10
    assert leader.games_behind == "-"

    assert (trailer.wins, trailer.losses) == (0, 1)
    assert trailer.win_percentage == 0
    assert trailer.points_scored == 40
    assert trailer.points_against == 50
    assert trailer.point_differential == -10
    assert trailer.games_behind == 1

    print("[PASS] Single game scenario test passed")


def test_playoff_games_do_not_count():
    """Semifinal and final games leave the regular-season record alone."""
    calculator = StandingsCalculator(DIVISIONS)
    games = [
        make_game("G1", "X", "Y", 50, 40, winner="X"),
        make_game("S1", "Y", "X", 70, 30, winner="Y", game_type=GameType.SEMI_FINAL),
        make_game("F1", "Y", "X", 70, 30, winner="Y", game_type=GameType.FINAL),
    ]

    table = calculator.calculate_standings(two_teams(), games)
    x = table.get_team("X")
    y = table.get_team("Y")

    assert (x.wins, x.losses, x.point_differential) == (1, 0, 10)
    assert (y.wins, y.losses, y.point_differential) == (0, 1, -10)


def test_only_completed_games_count():
    calculator = StandingsCalculator(DIVISIONS)
    games = [
        make_game("G1", "X", "Y", 50, 40, winner="X"),
        make_game("G2", "Y", "X", 20, 10, winner="Y", status=GameStatus.IN_PROGRESS),
        make_game("G3", "Y", "X", None, None, status=GameStatus.PENDING),
        make_game("G4", "Y", "X", 0, 20, winner="X", status=GameStatus.POSTPONED),
        make_game("G5", "Y", "X", 99, 0, winner="Y", status=GameStatus.INVALID),
    ]

    table = calculator.calculate_standings(two_teams(), games)

    assert table.get_team("X").games_played == 1
    assert table.get_team("Y").games_played == 1


def test_team_without_games():
    """No games means zeros everywhere and no division by zero."""
    calculator = StandingsCalculator(DIVISIONS)
    teams = two_teams() + [Team(id="Z", name="Team Z")]
    games = [make_game("G1", "X", "Y", 50, 40, winner="X")]

    z = calculator.calculate_standings(teams, games).get_team("Z")

    assert z.games_played == 0
    assert z.wins == 0
    assert z.losses == 0
    assert z.win_percentage == 0
    assert z.point_differential == 0


def test_empty_games_list():
    """Every team at zero; the first team in input order leads."""
    calculator = StandingsCalculator(DIVISIONS)
    teams = [Team(id="Y", name="Team Y"), Team(id="X", name="Team X")]

    division = calculator.calculate_standings(teams, []).get_division(DIVISION_A)

    assert [row.team_id for row in division] == ["Y", "X"]
    assert division[0].games_behind == "-"
    assert division[1].games_behind == 0
    assert all(row.win_percentage == 0 for row in division)


def test_sort_by_percentage_then_differential():
    calculator = StandingsCalculator(DIVISIONS)
    teams = [
        Team(id="X", name="Team X"),
        Team(id="Y", name="Team Y"),
        Team(id="Z", name="Team Z"),
    ]
    games = [
        # X and Y both 1-1, Y with the better differential; Z 1-1 as well
        make_game("G1", "X", "Y", 41, 40, winner="X"),
        make_game("G2", "Y", "Z", 80, 40, winner="Y"),
        make_game("G3", "Z", "X", 60, 50, winner="Z"),
    ]

    division = calculator.calculate_standings(teams, games).get_division(DIVISION_A)

    # Y: +39, Z: -30, X: -9
    assert [row.team_id for row in division] == ["Y", "X", "Z"]
    for earlier, later in zip(division, division[1:]):
        assert earlier.win_percentage >= later.win_percentage
        if earlier.win_percentage == later.win_percentage:
            assert earlier.point_differential >= later.point_differential


def test_full_ties_keep_input_order():
    calculator = StandingsCalculator(DIVISIONS)
    teams = [Team(id="Z", name="Team Z"), Team(id="X", name="Team X"), Team(id="Y", name="Team Y")]

    division = calculator.calculate_standings(teams, []).get_division(DIVISION_A)

    assert [row.team_id for row in division] == ["Z", "X", "Y"]


def test_divisions_are_partitioned():
    calculator = StandingsCalculator(DIVISIONS)
    teams = two_teams() + [Team(id="B1", name="Team B1"), Team(id="B2", name="Team B2")]
    games = [
        make_game("G1", "X", "Y", 50, 40, winner="X"),
        make_game("G2", "B1", "B2", 30, 45, winner="B2"),
    ]

    table = calculator.calculate_standings(teams, games)

    assert [row.team_id for row in table.get_division(DIVISION_A)] == ["X", "Y"]
    assert [row.team_id for row in table.get_division(DIVISION_B)] == ["B2", "B1"]
    assert table.get_division(DIVISION_B)[0].games_behind == "-"
    assert all(row.division == DIVISION_B for row in table.get_division(DIVISION_B))


def test_unmapped_team_is_excluded():
    calculator = StandingsCalculator(DIVISIONS)
    teams = two_teams() + [Team(id="Q", name="Unknown Church")]
    games = [make_game("G1", "Q", "X", 60, 20, winner="Q")]

    table = calculator.calculate_standings(teams, games)

    assert table.excluded_team_ids == ["Q"]
    assert table.get_team("Q") is None
    # X still carries the loss against the unmapped team
    assert table.get_team("X").losses == 1


def test_division_lookup_ignores_case_and_spacing():
    calculator = StandingsCalculator(DIVISIONS)

    assert calculator.get_team_division("  team   x ") == DIVISION_A
    assert calculator.get_team_division("TEAM B1") == DIVISION_B
    assert calculator.get_team_division("Nobody") is None


def test_game_with_unknown_team_is_ignored():
    calculator = StandingsCalculator(DIVISIONS)
    games = [
        make_game("G1", "X", "Y", 50, 40, winner="X"),
        make_game("G2", "GHOST", "SPIRIT", 10, 5, winner="GHOST"),
    ]

    table = calculator.calculate_standings(two_teams(), games)

    assert table.get_team("X").games_played == 1
    assert table.get_team("GHOST") is None


def test_null_winner_counts_as_tie():
    """A completed game with no winner is played but neither a win nor a loss."""
    calculator = StandingsCalculator(DIVISIONS)
    games = [
        make_game("G1", "X", "Y", 50, 40, winner="X"),
        make_game("G2", "X", "Y", 45, 45, winner=None),
    ]

    table = calculator.calculate_standings(two_teams(), games)
    x = table.get_team("X")
    y = table.get_team("Y")

    assert (x.games_played, x.wins, x.losses, x.ties) == (2, 1, 0, 1)
    assert (y.games_played, y.wins, y.losses, y.ties) == (2, 0, 1, 1)
    assert x.win_percentage == 0.5
    assert y.games_behind == 1


def test_wins_plus_losses_equal_games_played():
    calculator = StandingsCalculator(DIVISIONS)
    teams = two_teams() + [Team(id="Z", name="Team Z")]
    games = [
        make_game("G1", "X", "Y", 50, 40, winner="X"),
        make_game("G2", "Y", "Z", 62, 60, winner="Y"),
        make_game("G3", "Z", "X", 70, 66, winner="Z"),
        make_game("G4", "X", "Z", 55, 54, winner="X"),
    ]

    table = calculator.calculate_standings(teams, games)

    for row in table.get_division(DIVISION_A):
        assert row.wins + row.losses == row.games_played


def test_missing_scores_read_as_zero():
    calculator = StandingsCalculator(DIVISIONS)
    games = [make_game("G1", "X", "Y", None, 12, winner="Y")]

    x = calculator.calculate_standings(two_teams(), games).get_team("X")

    assert x.points_scored == 0
    assert x.points_against == 12


def test_games_behind_formula():
    calculator = StandingsCalculator(DIVISIONS)
    teams = two_teams() + [Team(id="Z", name="Team Z")]
    games = [
        make_game("G1", "X", "Y", 50, 40, winner="X"),
        make_game("G2", "X", "Z", 50, 40, winner="X"),
        make_game("G3", "X", "Y", 50, 40, winner="X"),
        make_game("G4", "Z", "Y", 50, 40, winner="Z"),
    ]

    division = calculator.calculate_standings(teams, games).get_division(DIVISION_A)
    leader = division[0]

    assert leader.team_id == "X"
    for row in division[1:]:
        assert row.games_behind == games_behind(leader, row)
    # Z is 1-1 and Y is 0-3 against a 3-0 leader
    by_id = {row.team_id: row for row in division}
    assert by_id["Z"].games_behind == 1.5
    assert by_id["Y"].games_behind == 3


def test_calculation_is_repeatable():
    calculator = StandingsCalculator(DIVISIONS)
    teams = two_teams()
    games = [make_game("G1", "X", "Y", 50, 40, winner="X")]

    first = calculator.calculate_standings(teams, games)
    second = calculator.calculate_standings(teams, games)

    assert first == second
    assert games[0].winner_team_id == "X"
