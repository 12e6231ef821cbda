"""
Calendar views over the game list.

Game times are kept as naive datetimes in the league timezone, so the
calendar day of a game is the day it is played locally.
"""

from datetime import date, datetime
from typing import List, Dict, Optional

from league.models import GameStatus, GameWithTeams
from league.core.config import UPCOMING_GAMES_LIMIT, LEAGUE_TZ

UPCOMING_STATUSES = {GameStatus.PENDING, GameStatus.IN_PROGRESS}


def to_league_time(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive league-local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(LEAGUE_TZ).replace(tzinfo=None)


def to_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Attach the league timezone to a naive league-local datetime."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=LEAGUE_TZ)


def league_today() -> date:
    return datetime.now(LEAGUE_TZ).date()


def _day(game: GameWithTeams) -> Optional[date]:
    return game.game.game_day


def group_games_by_date(games: List[GameWithTeams]) -> Dict[Optional[date], List[GameWithTeams]]:
    """
    Group games by calendar day, days ascending.

    Games within a day keep their start-time order; undated games go last
    under the None key.
    """
    dated = sorted(
        (game for game in games if _day(game) is not None),
        key=lambda game: game.game.scheduled_at
    )
    grouped = {}
    for game in dated:
        grouped.setdefault(_day(game), []).append(game)

    undated = [game for game in games if _day(game) is None]
    if undated:
        grouped[None] = undated
    return grouped


def upcoming_games(games: List[GameWithTeams], today: date,
                   limit: int = UPCOMING_GAMES_LIMIT) -> List[GameWithTeams]:
    """Pending or in-progress games from today on, soonest first."""
    upcoming = [
        game for game in games
        if _day(game) is not None
        and _day(game) >= today
        and game.game.status in UPCOMING_STATUSES
    ]
    upcoming.sort(key=lambda game: game.game.scheduled_at)
    return upcoming[:limit]
