"""
Box-score aggregation: player season lines, stat leaders, team summaries
and per-game box scores. Pure functions over already-fetched rows.
"""

from collections import defaultdict
from typing import List, Dict, Iterable, Optional, Set

from league.models import (
    Team, Game, GameWithTeams, Member, StatLine, COUNTING_STATS,
    PlayerSeasonStats, LeaderEntry, GameLogEntry, TeamSeasonSummary,
    BoxScore, BoxScoreSide
)
from league.core.config import LEADERS_TOP_N, LEADER_CATEGORIES


def _per_game(total: int, games: int) -> float:
    if games == 0:
        return 0.0
    return round(total / games, 1)


def shooting_percentage(made: int, attempts: int) -> float:
    if not attempts:
        return 0.0
    return round(made / attempts * 100, 1)


def sum_stat_lines(lines: Iterable[StatLine]) -> Dict[str, int]:
    totals = {stat: 0 for stat in COUNTING_STATS}
    for line in lines:
        for stat in COUNTING_STATS:
            totals[stat] += getattr(line, stat) or 0
    return totals


def aggregate_player(member_id: str, stat_lines: List[StatLine]) -> PlayerSeasonStats:
    """
    Season totals, per-game averages and shooting splits for one member.

    Args:
        member_id: Member whose lines are aggregated
        stat_lines: Stat lines of any members; lines of other members are ignored

    Returns:
        PlayerSeasonStats (all zero when the member has no lines)
    """
    lines = [line for line in stat_lines if line.member_id == member_id]
    totals = sum_stat_lines(lines)
    games = len(lines)

    return PlayerSeasonStats(
        member_id=member_id,
        games=games,
        totals=totals,
        points_per_game=_per_game(totals["points"], games),
        rebounds_per_game=_per_game(totals["rebounds"], games),
        assists_per_game=_per_game(totals["assists"], games),
        field_goal_percentage=shooting_percentage(
            totals["field_goal_made"], totals["field_goal_attempts"]),
        three_point_percentage=shooting_percentage(
            totals["three_point_made"], totals["three_point_attempts"]),
        free_throw_percentage=shooting_percentage(
            totals["free_throw_made"], totals["free_throw_attempts"]),
    )


def league_leaders(members: List[Member], stat_lines: List[StatLine],
                   completed_game_ids: Set[str],
                   top_n: int = LEADERS_TOP_N) -> Dict[str, List[LeaderEntry]]:
    """
    Per-game leaders for points, rebounds and assists.

    Only players with at least one line in a completed game are ranked.
    The first entry of each list is the leader.
    """
    leaders = {category: [] for category in LEADER_CATEGORIES}
    if not completed_game_ids:
        return leaders

    lines_by_member = defaultdict(list)
    for line in stat_lines:
        if line.game_id in completed_game_ids:
            lines_by_member[line.member_id].append(line)

    ranked = []
    for member in members:
        if not member.is_player or not lines_by_member.get(member.id):
            continue
        ranked.append((member, aggregate_player(member.id, lines_by_member[member.id])))

    for category in LEADER_CATEGORIES:
        attr = f"{category}_per_game"
        ordered = sorted(ranked, key=lambda item: -getattr(item[1], attr))
        leaders[category] = [
            LeaderEntry(
                member_id=member.id,
                name=member.name,
                team_id=member.team_id,
                value=getattr(season, attr),
                games=season.games,
                profile_pic_url=member.profile_pic_url
            )
            for member, season in ordered[:top_n]
        ]

    return leaders


def team_summary(team_id: str, games: List[Game], members: List[Member],
                 stat_lines: List[StatLine]) -> TeamSeasonSummary:
    """
    Record and scoring for one team over its completed games of every type.

    A completed game with no winner counts as played but is neither a win
    nor a loss.
    """
    team_games = [game for game in games if game.is_completed and game.involves_team(team_id)]
    summary = TeamSeasonSummary(team_id=team_id, games_played=len(team_games))

    for game in team_games:
        own, opponent = game.scores_for(team_id)
        summary.points_for += own
        summary.points_against += opponent
        if game.winner_team_id == team_id:
            summary.wins += 1
        elif game.winner_team_id is not None:
            summary.losses += 1

    if summary.games_played:
        summary.win_percentage = round(summary.wins / summary.games_played * 100, 1)
    summary.avg_points_for = _per_game(summary.points_for, summary.games_played)
    summary.avg_points_against = _per_game(summary.points_against, summary.games_played)

    member_ids = {member.id for member in members if member.team_id == team_id}
    game_ids = {game.id for game in team_games}
    summary.stat_totals = sum_stat_lines(
        line for line in stat_lines
        if line.member_id in member_ids and line.game_id in game_ids
    )
    return summary


def game_result_for(game: Game, team_id: Optional[str]) -> str:
    """win, loss or in_progress for one side; neutral when the team did not play."""
    if game.winner_team_id is None:
        return "in_progress"
    if team_id is None or not game.involves_team(team_id):
        return "neutral"
    if game.winner_team_id == team_id:
        return "win"
    return "loss"


def player_game_log(member: Member, stat_lines: List[StatLine],
                    games_by_id: Dict[str, Game]) -> List[GameLogEntry]:
    """Game-by-game lines for one member, most recent first."""
    entries = []
    for line in stat_lines:
        if line.member_id != member.id:
            continue
        game = games_by_id.get(line.game_id)
        if game is None:
            continue
        if member.team_id is not None and game.involves_team(member.team_id):
            own, opponent = game.scores_for(member.team_id)
        else:
            # No team to take sides with: home score first
            own, opponent = game.home_score or 0, game.away_score or 0
        entries.append(GameLogEntry(
            game_id=game.id,
            scheduled_at=game.scheduled_at,
            opponent_team_id=game.get_opponent_id(member.team_id),
            score=f"{own} - {opponent}",
            result=game_result_for(game, member.team_id),
            stat_line=line
        ))

    # Undated games sort last
    dated = [entry for entry in entries if entry.scheduled_at is not None]
    undated = [entry for entry in entries if entry.scheduled_at is None]
    dated.sort(key=lambda entry: entry.scheduled_at, reverse=True)
    return dated + undated


def _box_score_side(team: Optional[Team], lines: List[StatLine]) -> BoxScoreSide:
    ordered = sorted(lines, key=lambda line: (-line.points, -line.rebounds, -line.assists))
    return BoxScoreSide(team=team, lines=ordered, totals=sum_stat_lines(ordered))


def box_score(game: GameWithTeams, members: List[Member],
              stat_lines: List[StatLine]) -> BoxScore:
    """Split one game's stat lines by the team each member plays for."""
    team_by_member = {member.id: member.team_id for member in members}
    home_lines = []
    away_lines = []

    for line in stat_lines:
        if line.game_id != game.id:
            continue
        team_id = team_by_member.get(line.member_id)
        if team_id == game.game.home_team_id:
            home_lines.append(line)
        elif team_id == game.game.away_team_id:
            away_lines.append(line)

    return BoxScore(
        game=game,
        home=_box_score_side(game.home_team, home_lines),
        away=_box_score_side(game.away_team, away_lines)
    )
