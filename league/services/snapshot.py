"""
JSON-ready standings snapshots shared by the API and the Celery task.
"""

from datetime import datetime
from typing import Dict, List

from league.models import TeamStanding, BracketPairing, StandingsTable
from league.services.standings import StandingsCalculator
from league.services.supabase_reader import SupabaseReader


def standing_to_dict(standing: TeamStanding, position: int) -> Dict:
    return {
        "position": position,
        "team_id": standing.team_id,
        "team_name": standing.team_name,
        "division": standing.division,
        "logo_url": standing.logo_url,
        "games_played": standing.games_played,
        "wins": standing.wins,
        "losses": standing.losses,
        "ties": standing.ties,
        "win_percentage": standing.win_percentage,
        "points_scored": standing.points_scored,
        "points_against": standing.points_against,
        "point_differential": standing.point_differential,
        "games_behind": standing.games_behind,
    }


def pairing_to_dict(pairing: BracketPairing) -> Dict:
    return {
        "slot": pairing.slot,
        "round": pairing.round.value,
        "side_a_team_id": pairing.side_a_team_id,
        "side_b_team_id": pairing.side_b_team_id,
        "side_a_wins": pairing.side_a_wins,
        "side_b_wins": pairing.side_b_wins,
    }


def table_to_dict(table: StandingsTable) -> Dict:
    return {
        "divisions": {
            division: [standing_to_dict(row, index + 1) for index, row in enumerate(rows)]
            for division, rows in table.divisions.items()
        },
        "excluded_team_ids": list(table.excluded_team_ids),
    }


def build_standings_snapshot(reader: SupabaseReader,
                             calculator: StandingsCalculator = None) -> Dict:
    """
    Load teams and games, then compute standings and bracket in one go.

    Returns:
        dict with "standings", "bracket" and "generated_at"
    """
    calculator = calculator or StandingsCalculator()
    teams = reader.load_teams()
    games = reader.load_games()

    table = calculator.calculate_standings(teams, games)
    bracket: List[BracketPairing] = calculator.calculate_bracket(table, games)

    return {
        "standings": table_to_dict(table),
        "bracket": [pairing_to_dict(pairing) for pairing in bracket],
        "generated_at": datetime.now().isoformat(),
    }
