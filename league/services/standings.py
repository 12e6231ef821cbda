"""
Standings and bracket calculation for the Church League Basketball site.

Pure aggregation over teams and games that were already fetched by the
data-access layer. Nothing here talks to Supabase; every call recomputes
from the snapshot it is given.
"""

from typing import List, Dict, Optional

from league.models import (
    Team, Game, GameStatus, GameType,
    TeamStanding, StandingsTable, BracketPairing
)
from league.core.config import (
    DIVISION_A, DIVISION_B, DIVISIONS,
    LEADER_GAMES_BEHIND, SERIES_WINS_TO_ADVANCE,
    get_team_divisions
)
from league.core.logging_config import get_logger

logger = get_logger(__name__)


def _normalize_name(name: str) -> str:
    return " ".join((name or "").split()).casefold()


def games_behind(leader: TeamStanding, standing: TeamStanding) -> float:
    return ((leader.wins - standing.wins) + (standing.losses - leader.losses)) / 2


class StandingsCalculator:
    """
    Builds per-division standings and playoff bracket tallies.

    Only completed regular-season games count toward the standings table.
    Semifinal and final games only feed the bracket tallies.
    """

    def __init__(self, team_divisions: Optional[Dict[str, str]] = None,
                 wins_to_advance: int = SERIES_WINS_TO_ADVANCE):
        if team_divisions is None:
            team_divisions = get_team_divisions()
        self.team_divisions = {
            _normalize_name(name): division for name, division in team_divisions.items()
        }
        self.wins_to_advance = wins_to_advance

    def get_team_division(self, team_name: str) -> Optional[str]:
        return self.team_divisions.get(_normalize_name(team_name))

    def calculate_standings(self, teams: List[Team], games: List[Game]) -> StandingsTable:
        """
        Calculate the standings table for each division.

        Args:
            teams: All teams in the league
            games: Games of any status and type; filtered internally

        Returns:
            StandingsTable with one ordered list per division
        """
        regular_games = [
            game for game in games
            if game.status == GameStatus.COMPLETED and game.game_type == GameType.REGULAR
        ]

        rows = [self._build_standing(team, regular_games) for team in teams]

        # Stable sort: remaining ties keep input order
        rows = sorted(rows, key=lambda row: (-row.win_percentage, -row.point_differential))

        table = StandingsTable(divisions={division: [] for division in DIVISIONS})
        for row in rows:
            if row.division is None:
                table.excluded_team_ids.append(row.team_id)
                continue
            table.divisions.setdefault(row.division, []).append(row)

        if table.excluded_team_ids:
            logger.warning(
                "Excluded %d team(s) with no division mapping: %s",
                len(table.excluded_team_ids), ", ".join(table.excluded_team_ids)
            )

        for division_rows in table.divisions.values():
            if not division_rows:
                continue
            leader = division_rows[0]
            leader.games_behind = LEADER_GAMES_BEHIND
            for row in division_rows[1:]:
                row.games_behind = games_behind(leader, row)

        return table

    def _build_standing(self, team: Team, games: List[Game]) -> TeamStanding:
        standing = TeamStanding(
            team_id=team.id,
            team_name=team.name,
            division=self.get_team_division(team.name),
            logo_url=team.logo_url
        )

        for game in games:
            if not game.involves_team(team.id):
                continue

            standing.games_played += 1
            if game.winner_team_id is None:
                standing.ties += 1
            elif game.winner_team_id == team.id:
                standing.wins += 1
            else:
                standing.losses += 1

            own, opponent = game.scores_for(team.id)
            standing.points_scored += own
            standing.points_against += opponent

        if standing.games_played > 0:
            standing.win_percentage = standing.wins / standing.games_played
        standing.point_differential = standing.points_scored - standing.points_against

        if standing.ties:
            logger.warning(
                "Team %s has %d completed game(s) without a winner", team.id, standing.ties
            )

        return standing

    def calculate_bracket(self, table: StandingsTable, games: List[Game]) -> List[BracketPairing]:
        """
        Pair division seeds for the semifinals and tally series wins.

        Slot 1 is the División A leader against the División B runner-up, slot 2
        the División B leader against the División A runner-up. Once both
        semifinal series are decided a final pairing is added.
        """
        division_a = table.get_division(DIVISION_A)
        division_b = table.get_division(DIVISION_B)

        seeds = [
            (1, division_a[:1], division_b[1:2]),
            (2, division_b[:1], division_a[1:2]),
        ]

        pairings = []
        for slot, top_seed, low_seed in seeds:
            if not top_seed or not low_seed:
                logger.info("Semifinal slot %d is not seeded yet", slot)
                continue
            pairings.append(self._tally(
                slot, GameType.SEMI_FINAL, top_seed[0].team_id, low_seed[0].team_id, games
            ))

        if len(pairings) == 2:
            finalists = [pairing.series_winner(self.wins_to_advance) for pairing in pairings]
            if all(finalists):
                pairings.append(self._tally(
                    1, GameType.FINAL, finalists[0], finalists[1], games
                ))

        return pairings

    def _tally(self, slot: int, round_type: GameType, side_a: str, side_b: str,
               games: List[Game]) -> BracketPairing:
        pairing = BracketPairing(
            slot=slot,
            round=round_type,
            side_a_team_id=side_a,
            side_b_team_id=side_b
        )
        for game in games:
            if game.status != GameStatus.COMPLETED or game.game_type != round_type:
                continue
            if not game.involves_pair(side_a, side_b):
                continue
            if game.winner_team_id == side_a:
                pairing.side_a_wins += 1
            elif game.winner_team_id == side_b:
                pairing.side_b_wins += 1
        return pairing
