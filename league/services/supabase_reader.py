"""
Supabase data reader for the Church League Basketball site.
Turns rows of the hosted schema into typed models.
"""

from datetime import datetime
from typing import List, Dict, Optional, Iterable, Tuple
from supabase import create_client, Client

from league.models import (
    Team, Game, GameWithTeams, Member, StatLine, COUNTING_STATS,
    GameStatus, GameType, MemberRole, Position,
    DataAccessError, NotFoundError
)
from league.core.config import (
    SUPABASE_URL, SUPABASE_ANON_KEY,
    TABLE_TEAMS, TABLE_GAMES, TABLE_MEMBERS, TABLE_STATS
)
from league.services.calendar import to_league_time
from league.core.logging_config import get_logger

logger = get_logger(__name__)


def create_supabase_client() -> Client:
    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        raise DataAccessError(
            "Supabase URL or anon key is missing. Set SUPABASE_URL and SUPABASE_ANON_KEY."
        )
    return create_client(SUPABASE_URL, SUPABASE_ANON_KEY)


def execute_query(query, description: str) -> list:
    """Run a PostgREST query, wrapping client failures in DataAccessError."""
    try:
        response = query.execute()
    except Exception as e:
        logger.error("Supabase query failed (%s): %s", description, e)
        raise DataAccessError(f"Failed to {description}: {e}") from e
    return response.data or []


def parse_datetime(value) -> Optional[datetime]:
    """Parse a date or timestamp column into a naive league-local datetime."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Could not parse date: %s", value)
            return None
    return to_league_time(parsed)


def parse_enum(value, enum_class):
    if not value:
        return None

    value = str(value).strip()

    for enum_item in enum_class:
        if enum_item.value == value:
            return enum_item

    value_lower = value.lower()
    for enum_item in enum_class:
        if enum_item.value.lower() == value_lower:
            return enum_item

    return None


def parse_int(value, default: Optional[int] = 0) -> Optional[int]:
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_id(value) -> Optional[str]:
    return str(value) if value is not None else None


class SupabaseReader:
    def __init__(self, client: Client = None):
        self.client = client if client is not None else create_supabase_client()

        self._teams_cache: Optional[List[Team]] = None
        self._games_cache: Optional[List[Game]] = None
        self._members_cache: Optional[List[Member]] = None

    def _team_from_row(self, row: Dict) -> Team:
        return Team(
            id=str(row['id']),
            name=row.get('team_name') or '',
            church_name=row.get('church_name') or '',
            logo_url=row.get('logo_url')
        )

    def _game_from_row(self, row: Dict) -> Optional[Game]:
        status = parse_enum(row.get('status'), GameStatus)
        if status is None:
            logger.warning("Skipping game %s with unknown status %r", row.get('id'), row.get('status'))
            return None

        game_type = GameType.REGULAR
        if row.get('type'):
            game_type = parse_enum(row['type'], GameType)
            if game_type is None:
                logger.warning("Skipping game %s with unknown type %r", row.get('id'), row.get('type'))
                return None

        if row.get('team_a_id') is None or row.get('team_b_id') is None:
            logger.warning("Skipping game %s with a missing team", row.get('id'))
            return None

        return Game(
            id=str(row['id']),
            home_team_id=str(row['team_a_id']),
            away_team_id=str(row['team_b_id']),
            status=status,
            game_type=game_type,
            scheduled_at=parse_datetime(row.get('date')),
            home_score=parse_int(row.get('score_team_a'), None),
            away_score=parse_int(row.get('score_team_b'), None),
            winner_team_id=_as_id(row.get('winner_team_id')),
            venue=row.get('place')
        )

    def _member_from_row(self, row: Dict) -> Optional[Member]:
        role = parse_enum(row.get('role'), MemberRole)
        if role is None:
            logger.warning("Skipping member %s with unknown role %r", row.get('id'), row.get('role'))
            return None

        return Member(
            id=str(row['id']),
            name=row.get('name') or '',
            role=role,
            team_id=_as_id(row.get('team_id')),
            jersey_number=parse_int(row.get('jersey_number'), None),
            position=parse_enum(row.get('position'), Position),
            age=parse_int(row.get('age'), None),
            inactive=bool(row.get('inactive', False)),
            profile_pic_url=row.get('profile_pic_url')
        )

    def _stat_line_from_row(self, row: Dict) -> StatLine:
        counts = {stat: parse_int(row.get(stat)) for stat in COUNTING_STATS}
        return StatLine(
            id=_as_id(row.get('id')),
            game_id=str(row['game_id']),
            member_id=str(row['member_id']),
            **counts
        )

    def load_teams(self) -> List[Team]:
        if self._teams_cache is not None:
            return self._teams_cache

        rows = execute_query(
            self.client.table(TABLE_TEAMS).select('id, team_name, church_name, logo_url').order('team_name'),
            "load teams"
        )
        teams = [self._team_from_row(row) for row in rows]
        logger.info("Loaded %d teams from Supabase", len(teams))

        self._teams_cache = teams
        return teams

    def load_team(self, team_id: str) -> Team:
        for team in self.load_teams():
            if team.id == str(team_id):
                return team
        raise NotFoundError(f"Team {team_id} not found")

    def load_games(self, statuses: Iterable[GameStatus] = None) -> List[Game]:
        """
        Load games ordered by date.

        Args:
            statuses: Only load games with these statuses (all games when None)
        """
        if statuses is None and self._games_cache is not None:
            return self._games_cache

        query = self.client.table(TABLE_GAMES).select('*').order('date')
        if statuses is not None:
            query = query.in_('status', [status.value for status in statuses])

        games = []
        for row in execute_query(query, "load games"):
            game = self._game_from_row(row)
            if game:
                games.append(game)

        logger.info("Loaded %d games from Supabase", len(games))
        if statuses is None:
            self._games_cache = games
        return games

    def attach_teams(self, games: List[Game]) -> List[GameWithTeams]:
        teams_by_id = {team.id: team for team in self.load_teams()}
        return [
            GameWithTeams(
                game=game,
                home_team=teams_by_id.get(game.home_team_id),
                away_team=teams_by_id.get(game.away_team_id)
            )
            for game in games
        ]

    def load_games_with_teams(self) -> List[GameWithTeams]:
        return self.attach_teams(self.load_games())

    def load_game(self, game_id: str) -> GameWithTeams:
        rows = execute_query(
            self.client.table(TABLE_GAMES).select('*').eq('id', game_id).limit(1),
            f"load game {game_id}"
        )
        game = self._game_from_row(rows[0]) if rows else None
        if game is None:
            raise NotFoundError(f"Game {game_id} not found")
        return self.attach_teams([game])[0]

    def load_members(self, role: MemberRole = None) -> List[Member]:
        if self._members_cache is None:
            rows = execute_query(
                self.client.table(TABLE_MEMBERS).select('*').order('role').order('jersey_number'),
                "load members"
            )
            members = []
            for row in rows:
                member = self._member_from_row(row)
                if member:
                    members.append(member)
            logger.info("Loaded %d members from Supabase", len(members))
            self._members_cache = members

        if role is None:
            return self._members_cache
        return [member for member in self._members_cache if member.role == role]

    def load_member(self, member_id: str) -> Member:
        for member in self.load_members():
            if member.id == str(member_id):
                return member
        raise NotFoundError(f"Member {member_id} not found")

    def load_team_members(self, team_id: str) -> List[Member]:
        return [member for member in self.load_members() if member.team_id == str(team_id)]

    def load_stat_lines(self, game_ids: Iterable[str] = None,
                        member_ids: Iterable[str] = None) -> List[StatLine]:
        query = self.client.table(TABLE_STATS).select('*')

        if game_ids is not None:
            game_ids = list(game_ids)
            if not game_ids:
                return []
            query = query.in_('game_id', game_ids)

        if member_ids is not None:
            member_ids = list(member_ids)
            if not member_ids:
                return []
            query = query.in_('member_id', member_ids)

        rows = execute_query(query, "load stats")
        stat_lines = [self._stat_line_from_row(row) for row in rows]
        logger.info("Loaded %d stat lines from Supabase", len(stat_lines))
        return stat_lines

    def load_all_data(self) -> Tuple[List[Team], List[Game], List[Member], List[StatLine]]:
        teams = self.load_teams()
        games = self.load_games()
        members = self.load_members()
        stat_lines = self.load_stat_lines()

        logger.info(
            "Data loading complete: %d teams, %d games, %d members, %d stat lines",
            len(teams), len(games), len(members), len(stat_lines)
        )
        return teams, games, members, stat_lines

    def clear_caches(self):
        self._teams_cache = None
        self._games_cache = None
        self._members_cache = None
