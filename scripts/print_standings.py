"""
Print the league standings, bracket and data-quality report (CLI).
"""

import sys
import argparse
import logging
from datetime import datetime
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league.core.config import DIVISIONS, PLAYOFF_LINE
from league.core.logging_config import setup_logging
from league.services.standings import StandingsCalculator
from league.services.validator import LeagueDataValidator
from league.services.supabase_reader import SupabaseReader


def format_games_behind(value) -> str:
    if isinstance(value, str):
        return value
    return f"{value:g}"


def print_division(division: str, rows):
    print(f"\n{division}")
    print("-" * 80)
    print(f"{'Pos':>3}  {'Team':<28}{'GP':>4}{'W':>4}{'L':>4}{'T':>4}{'%':>8}{'PF':>6}{'PA':>6}{'DIFF':>6}{'GB':>6}")
    for index, row in enumerate(rows):
        print(
            f"{index + 1:>3}  {row.team_name[:27]:<28}{row.games_played:>4}{row.wins:>4}"
            f"{row.losses:>4}{row.ties:>4}{row.win_percentage * 100:>7.1f}%"
            f"{row.points_scored:>6}{row.points_against:>6}{row.point_differential:>+6}"
            f"{format_games_behind(row.games_behind):>6}"
        )
        if index + 1 == PLAYOFF_LINE and len(rows) > PLAYOFF_LINE:
            print("     " + "- " * 10 + "playoff line" + " -" * 10)


def main():
    parser = argparse.ArgumentParser(
        description='Church League Basketball - print standings from Supabase'
    )
    parser.add_argument(
        '--check-data',
        action='store_true',
        help='Also print the data-quality report (ties, bad winners, unmapped teams)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    print("\n" + "=" * 80)
    print("CHURCH LEAGUE BASKETBALL STANDINGS")
    print(f"Generated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 80)

    try:
        reader = SupabaseReader()
        teams = reader.load_teams()
        games = reader.load_games()

        if not teams:
            print("ERROR: No teams loaded. Please check the Supabase project.")
            return 1

        calculator = StandingsCalculator()
        table = calculator.calculate_standings(teams, games)

        for division in DIVISIONS:
            print_division(division, table.get_division(division))

        if table.excluded_team_ids:
            print(f"\nTeams without a division: {', '.join(table.excluded_team_ids)}")

        names = {team.id: team.name for team in teams}
        bracket = calculator.calculate_bracket(table, games)
        print("\nBRACKET")
        print("-" * 80)
        if not bracket:
            print("Not enough teams to seed the semifinals")
        for pairing in bracket:
            print(
                f"{pairing.round.value} {pairing.slot}: "
                f"{names.get(pairing.side_a_team_id)} ({pairing.side_a_wins}) vs "
                f"{names.get(pairing.side_b_team_id)} ({pairing.side_b_wins})"
            )

        if args.check_data:
            result = LeagueDataValidator(calculator).validate(teams, games)
            print("\nDATA QUALITY")
            print("-" * 80)
            print(result.get_summary())
            for issue in result.errors + result.warnings:
                print(f"  [{issue.severity}] {issue.issue_type}: {issue.description}")

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user.")
        return 1

    except Exception as e:
        print(f"\n\nERROR: An unexpected error occurred:")
        print(f"{type(e).__name__}: {e}")

        import traceback
        print("\nFull traceback:")
        traceback.print_exc()

        return 1


if __name__ == '__main__':
    sys.exit(main())
