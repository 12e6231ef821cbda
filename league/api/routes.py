"""
API routes for standings, statistics, calendar and game administration.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel
from typing import List, Dict, Optional, Union
from datetime import datetime, date
from celery.result import AsyncResult

from league.models import (
    GameStatus, GameType, GameSubmission, GameWithTeams, StatLine,
    Team, Member, MemberRole, Position, ValidationError, NotFoundError, DataAccessError
)
from league.services.standings import StandingsCalculator
from league.services.validator import LeagueDataValidator
from league.services.supabase_reader import SupabaseReader
from league.services.supabase_writer import SupabaseWriter
from league.services.snapshot import build_standings_snapshot
from league.services import player_stats, calendar
from league.core.celery_app import celery_app
from league.core.logging_config import get_logger
from league.tasks.standings_tasks import compute_standings_task

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["league"])


def get_reader() -> SupabaseReader:
    return SupabaseReader()


def get_writer() -> SupabaseWriter:
    return SupabaseWriter()


def get_calculator() -> StandingsCalculator:
    return StandingsCalculator()


def get_access_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Bearer token of the signed-in admin, forwarded to Supabase."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Authorization header must be 'Bearer <token>'")
    return token.strip()


def http_error(e: Exception, action: str) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, DataAccessError):
        return HTTPException(status_code=502, detail=str(e))
    logger.exception("Failed to %s", action)
    return HTTPException(status_code=500, detail=f"Failed to {action}: {str(e)}")


class StandingRow(BaseModel):
    """One row of a division table."""
    position: int
    team_id: str
    team_name: str
    division: str
    logo_url: Optional[str]
    games_played: int
    wins: int
    losses: int
    ties: int
    win_percentage: float
    points_scored: int
    points_against: int
    point_differential: int
    games_behind: Union[float, str]


class StandingsTableResponse(BaseModel):
    divisions: Dict[str, List[StandingRow]]
    excluded_team_ids: List[str]


class BracketPairingResponse(BaseModel):
    slot: int
    round: str
    side_a_team_id: str
    side_b_team_id: str
    side_a_wins: int
    side_b_wins: int


class StandingsResponse(BaseModel):
    standings: StandingsTableResponse
    bracket: List[BracketPairingResponse]
    generated_at: str


class LeaderResponse(BaseModel):
    member_id: str
    name: str
    team_id: Optional[str]
    team_name: Optional[str]
    value: float
    games: int
    profile_pic_url: Optional[str]


class GameResponse(BaseModel):
    """Response model for a single game."""
    id: str
    date: Optional[str]
    status: str
    type: str
    home_team_id: str
    home_team: Optional[str]
    away_team_id: str
    away_team: Optional[str]
    home_score: Optional[int]
    away_score: Optional[int]
    winner_team_id: Optional[str]
    venue: Optional[str]


class CalendarDay(BaseModel):
    date: Optional[str]
    games: List[GameResponse]


class CalendarResponse(BaseModel):
    days: List[CalendarDay]
    upcoming: List[GameResponse]


class TeamInfo(BaseModel):
    """Team information response."""
    id: str
    name: str
    church_name: str
    logo_url: Optional[str]
    division: Optional[str]


class MemberInfo(BaseModel):
    id: str
    name: str
    role: str
    team_id: Optional[str]
    jersey_number: Optional[int]
    position: Optional[str]
    age: Optional[int]
    inactive: bool
    profile_pic_url: Optional[str]


class PlayerListItem(MemberInfo):
    team_name: Optional[str]
    church_name: Optional[str]


class TeamSummaryResponse(BaseModel):
    games_played: int
    wins: int
    losses: int
    win_percentage: float
    points_for: int
    points_against: int
    avg_points_for: float
    avg_points_against: float
    stat_totals: Dict[str, int]


class TeamProfileResponse(BaseModel):
    team: TeamInfo
    members: List[MemberInfo]
    summary: TeamSummaryResponse
    games: List[GameResponse]


class SeasonStatsResponse(BaseModel):
    games: int
    totals: Dict[str, int]
    points_per_game: float
    rebounds_per_game: float
    assists_per_game: float
    field_goal_percentage: float
    three_point_percentage: float
    free_throw_percentage: float


class StatLineResponse(BaseModel):
    game_id: str
    member_id: str
    points: int
    rebounds: int
    assists: int
    steals: int
    fouls: int
    technical_fouls: int
    field_goal_made: int
    field_goal_attempts: int
    three_point_made: int
    three_point_attempts: int
    free_throw_made: int
    free_throw_attempts: int


class GameLogResponse(BaseModel):
    game_id: str
    date: Optional[str]
    opponent_team_id: Optional[str]
    score: str
    result: str
    stats: StatLineResponse


class PlayerProfileResponse(BaseModel):
    player: MemberInfo
    team: Optional[TeamInfo]
    season: SeasonStatsResponse
    game_log: List[GameLogResponse]


class BoxScoreSideResponse(BaseModel):
    team_id: Optional[str]
    team_name: Optional[str]
    lines: List[StatLineResponse]
    totals: Dict[str, int]


class BoxScoreResponse(BaseModel):
    game: GameResponse
    home: BoxScoreSideResponse
    away: BoxScoreSideResponse


class DataIssueResponse(BaseModel):
    issue_type: str
    severity: str
    description: str
    game_ids: List[str]
    team_ids: List[str]


class DataQualityResponse(BaseModel):
    is_clean: bool
    errors: List[DataIssueResponse]
    warnings: List[DataIssueResponse]


class GameRequest(BaseModel):
    """Admin form payload for a game."""
    date: datetime
    home_team_id: str
    away_team_id: str
    status: GameStatus = GameStatus.PENDING
    game_type: GameType = GameType.REGULAR
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    venue: Optional[str] = None


class SaveGameResponse(BaseModel):
    success: bool
    game: Dict
    warnings: List[str]


class StatLineRequest(BaseModel):
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


class TeamRequest(BaseModel):
    """Admin form payload for a team."""
    name: str
    church_name: str = ""
    logo_url: Optional[str] = None


class MemberRequest(BaseModel):
    """Admin form payload for a player or staff member."""
    name: str
    role: MemberRole = MemberRole.PLAYER
    team_id: Optional[str] = None
    jersey_number: Optional[int] = None
    position: Optional[Position] = None
    age: Optional[int] = None
    inactive: bool = False
    profile_pic_url: Optional[str] = None


def _game_response(game: GameWithTeams) -> GameResponse:
    return GameResponse(
        id=game.game.id,
        date=game.game.scheduled_at.isoformat() if game.game.scheduled_at else None,
        status=game.game.status.value,
        type=game.game.game_type.value,
        home_team_id=game.game.home_team_id,
        home_team=game.home_team.name if game.home_team else None,
        away_team_id=game.game.away_team_id,
        away_team=game.away_team.name if game.away_team else None,
        home_score=game.game.home_score,
        away_score=game.game.away_score,
        winner_team_id=game.game.winner_team_id,
        venue=game.game.venue
    )


def _member_info(member: Member) -> MemberInfo:
    return MemberInfo(
        id=member.id,
        name=member.name,
        role=member.role.value,
        team_id=member.team_id,
        jersey_number=member.jersey_number,
        position=member.position.value if member.position else None,
        age=member.age,
        inactive=member.inactive,
        profile_pic_url=member.profile_pic_url
    )


def _team_info(team, calculator: StandingsCalculator) -> TeamInfo:
    return TeamInfo(
        id=team.id,
        name=team.name,
        church_name=team.church_name,
        logo_url=team.logo_url,
        division=calculator.get_team_division(team.name)
    )


def _stat_line_response(line: StatLine) -> StatLineResponse:
    return StatLineResponse(**{
        field: getattr(line, field) for field in StatLineResponse.model_fields
    })


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@router.get("/standings", response_model=StandingsResponse)
def get_standings(reader: SupabaseReader = Depends(get_reader),
                  calculator: StandingsCalculator = Depends(get_calculator)):
    """Division tables plus playoff bracket."""
    try:
        return build_standings_snapshot(reader, calculator)
    except Exception as e:
        raise http_error(e, "calculate standings")


@router.get("/bracket", response_model=List[BracketPairingResponse])
def get_bracket(reader: SupabaseReader = Depends(get_reader),
                calculator: StandingsCalculator = Depends(get_calculator)):
    try:
        return build_standings_snapshot(reader, calculator)["bracket"]
    except Exception as e:
        raise http_error(e, "calculate bracket")


@router.get("/leaders", response_model=Dict[str, List[LeaderResponse]])
def get_leaders(reader: SupabaseReader = Depends(get_reader)):
    """Per-game leaders in points, rebounds and assists."""
    try:
        completed_ids = {game.id for game in reader.load_games([GameStatus.COMPLETED])}
        members = reader.load_members(MemberRole.PLAYER)
        stat_lines = reader.load_stat_lines(game_ids=completed_ids)
        team_names = {team.id: team.name for team in reader.load_teams()}

        leaders = player_stats.league_leaders(members, stat_lines, completed_ids)
        return {
            category: [
                LeaderResponse(
                    member_id=entry.member_id,
                    name=entry.name,
                    team_id=entry.team_id,
                    team_name=team_names.get(entry.team_id),
                    value=entry.value,
                    games=entry.games,
                    profile_pic_url=entry.profile_pic_url
                )
                for entry in entries
            ]
            for category, entries in leaders.items()
        }
    except Exception as e:
        raise http_error(e, "load leaders")


@router.get("/calendar", response_model=CalendarResponse)
def get_calendar(today: Optional[date] = Query(None),
                 reader: SupabaseReader = Depends(get_reader)):
    """All games grouped by day, plus the next games to be played."""
    try:
        games = reader.load_games_with_teams()
        grouped = calendar.group_games_by_date(games)
        upcoming = calendar.upcoming_games(games, today or calendar.league_today())

        return CalendarResponse(
            days=[
                CalendarDay(
                    date=day.isoformat() if day else None,
                    games=[_game_response(game) for game in day_games]
                )
                for day, day_games in grouped.items()
            ],
            upcoming=[_game_response(game) for game in upcoming]
        )
    except Exception as e:
        raise http_error(e, "load calendar")


@router.get("/teams", response_model=List[TeamInfo])
def get_teams(reader: SupabaseReader = Depends(get_reader),
              calculator: StandingsCalculator = Depends(get_calculator)):
    """Get all team information."""
    try:
        return [_team_info(team, calculator) for team in reader.load_teams()]
    except Exception as e:
        raise http_error(e, "load teams")


@router.get("/teams/{team_id}", response_model=TeamProfileResponse)
def get_team_profile(team_id: str,
                     reader: SupabaseReader = Depends(get_reader),
                     calculator: StandingsCalculator = Depends(get_calculator)):
    """Roster, season summary and schedule of one team."""
    try:
        team = reader.load_team(team_id)
        members = reader.load_team_members(team.id)
        team_games = [game for game in reader.load_games() if game.involves_team(team.id)]
        completed_ids = [game.id for game in team_games if game.is_completed]
        stat_lines = reader.load_stat_lines(
            game_ids=completed_ids, member_ids=[member.id for member in members]
        ) if completed_ids and members else []

        summary = player_stats.team_summary(team.id, team_games, members, stat_lines)

        return TeamProfileResponse(
            team=_team_info(team, calculator),
            members=[_member_info(member) for member in members],
            summary=TeamSummaryResponse(
                games_played=summary.games_played,
                wins=summary.wins,
                losses=summary.losses,
                win_percentage=summary.win_percentage,
                points_for=summary.points_for,
                points_against=summary.points_against,
                avg_points_for=summary.avg_points_for,
                avg_points_against=summary.avg_points_against,
                stat_totals=summary.stat_totals
            ),
            games=[_game_response(game) for game in reader.attach_teams(team_games)]
        )
    except Exception as e:
        raise http_error(e, "load team profile")


@router.get("/players", response_model=List[PlayerListItem])
def get_players(q: Optional[str] = Query(None, description="Filter by player or team name"),
                reader: SupabaseReader = Depends(get_reader)):
    """Players ordered by name, optionally filtered by a search term."""
    try:
        teams = {team.id: team for team in reader.load_teams()}
        players = sorted(reader.load_members(MemberRole.PLAYER), key=lambda m: m.name.casefold())

        items = []
        for member in players:
            team = teams.get(member.team_id)
            item = PlayerListItem(
                **_member_info(member).model_dump(),
                team_name=team.name if team else None,
                church_name=team.church_name if team else None
            )
            items.append(item)

        term = (q or "").strip().casefold()
        if term:
            items = [
                item for item in items
                if term in item.name.casefold() or term in (item.team_name or "").casefold()
            ]
        return items
    except Exception as e:
        raise http_error(e, "load players")


@router.get("/players/{member_id}", response_model=PlayerProfileResponse)
def get_player_profile(member_id: str,
                       reader: SupabaseReader = Depends(get_reader),
                       calculator: StandingsCalculator = Depends(get_calculator)):
    """Season averages, shooting splits and game log of one player."""
    try:
        member = reader.load_member(member_id)
        if not member.is_player:
            raise NotFoundError(f"Player {member_id} not found")

        games = reader.load_games([GameStatus.COMPLETED, GameStatus.IN_PROGRESS])
        games_by_id = {game.id: game for game in games}
        stat_lines = reader.load_stat_lines(game_ids=games_by_id.keys(), member_ids=[member.id])

        season = player_stats.aggregate_player(member.id, stat_lines)
        game_log = player_stats.player_game_log(member, stat_lines, games_by_id)

        team = None
        if member.team_id:
            try:
                team = _team_info(reader.load_team(member.team_id), calculator)
            except NotFoundError:
                logger.warning("Player %s points to missing team %s", member.id, member.team_id)

        return PlayerProfileResponse(
            player=_member_info(member),
            team=team,
            season=SeasonStatsResponse(
                games=season.games,
                totals=season.totals,
                points_per_game=season.points_per_game,
                rebounds_per_game=season.rebounds_per_game,
                assists_per_game=season.assists_per_game,
                field_goal_percentage=season.field_goal_percentage,
                three_point_percentage=season.three_point_percentage,
                free_throw_percentage=season.free_throw_percentage
            ),
            game_log=[
                GameLogResponse(
                    game_id=entry.game_id,
                    date=entry.scheduled_at.isoformat() if entry.scheduled_at else None,
                    opponent_team_id=entry.opponent_team_id,
                    score=entry.score,
                    result=entry.result,
                    stats=_stat_line_response(entry.stat_line)
                )
                for entry in game_log
            ]
        )
    except Exception as e:
        raise http_error(e, "load player profile")


@router.get("/games/{game_id}", response_model=BoxScoreResponse)
def get_game_details(game_id: str, reader: SupabaseReader = Depends(get_reader)):
    """One game with its box score split by team."""
    try:
        game = reader.load_game(game_id)
        members = reader.load_members()
        stat_lines = reader.load_stat_lines(game_ids=[game.id])
        box = player_stats.box_score(game, members, stat_lines)

        def side(box_side):
            return BoxScoreSideResponse(
                team_id=box_side.team.id if box_side.team else None,
                team_name=box_side.team.name if box_side.team else None,
                lines=[_stat_line_response(line) for line in box_side.lines],
                totals=box_side.totals
            )

        return BoxScoreResponse(game=_game_response(game), home=side(box.home), away=side(box.away))
    except Exception as e:
        raise http_error(e, "load game details")


@router.get("/data-quality", response_model=DataQualityResponse)
def get_data_quality(reader: SupabaseReader = Depends(get_reader),
                     calculator: StandingsCalculator = Depends(get_calculator)):
    """Report ties, bad winners and unmapped teams to league operators."""
    try:
        result = LeagueDataValidator(calculator).validate(reader.load_teams(), reader.load_games())

        def issues(items):
            return [
                DataIssueResponse(
                    issue_type=issue.issue_type,
                    severity=issue.severity,
                    description=issue.description,
                    game_ids=issue.game_ids,
                    team_ids=issue.team_ids
                )
                for issue in items
            ]

        return DataQualityResponse(
            is_clean=result.is_clean,
            errors=issues(result.errors),
            warnings=issues(result.warnings)
        )
    except Exception as e:
        raise http_error(e, "validate league data")


def _submission(request: GameRequest, game_id: Optional[str] = None) -> GameSubmission:
    return GameSubmission(
        id=game_id,
        home_team_id=request.home_team_id,
        away_team_id=request.away_team_id,
        scheduled_at=request.date,
        status=request.status,
        game_type=request.game_type,
        home_score=request.home_score,
        away_score=request.away_score,
        venue=request.venue
    )


@router.post("/games", response_model=SaveGameResponse, status_code=201)
def create_game(request: GameRequest,
                writer: SupabaseWriter = Depends(get_writer),
                access_token: Optional[str] = Depends(get_access_token)):
    try:
        row, warnings = writer.save_game(_submission(request), access_token)
        return SaveGameResponse(success=True, game=row, warnings=warnings)
    except Exception as e:
        raise http_error(e, "save game")


@router.put("/games/{game_id}", response_model=SaveGameResponse)
def update_game(game_id: str, request: GameRequest,
                writer: SupabaseWriter = Depends(get_writer),
                access_token: Optional[str] = Depends(get_access_token)):
    try:
        row, warnings = writer.save_game(_submission(request, game_id), access_token)
        return SaveGameResponse(success=True, game=row, warnings=warnings)
    except Exception as e:
        raise http_error(e, "save game")


@router.delete("/games/{game_id}")
def delete_game(game_id: str,
                writer: SupabaseWriter = Depends(get_writer),
                access_token: Optional[str] = Depends(get_access_token)):
    try:
        writer.delete_game(game_id, access_token)
        return {"success": True, "id": game_id}
    except Exception as e:
        raise http_error(e, "delete game")


@router.post("/stats")
def save_stat_line(request: StatLineRequest,
                   writer: SupabaseWriter = Depends(get_writer),
                   access_token: Optional[str] = Depends(get_access_token)):
    """Insert or replace one player's line for one game."""
    try:
        row = writer.save_stat_line(StatLine(**request.model_dump()), access_token)
        return {"success": True, "stat_line": row}
    except Exception as e:
        raise http_error(e, "save stats")


def _team(request: TeamRequest, team_id: Optional[str] = None) -> Team:
    return Team(id=team_id, name=request.name, church_name=request.church_name,
                logo_url=request.logo_url)


def _member(request: MemberRequest, member_id: Optional[str] = None) -> Member:
    return Member(id=member_id, **request.model_dump())


@router.post("/teams", status_code=201)
def create_team(request: TeamRequest,
                writer: SupabaseWriter = Depends(get_writer),
                access_token: Optional[str] = Depends(get_access_token)):
    try:
        row = writer.save_team(_team(request), access_token)
        return {"success": True, "team": row}
    except Exception as e:
        raise http_error(e, "save team")


@router.put("/teams/{team_id}")
def update_team(team_id: str, request: TeamRequest,
                writer: SupabaseWriter = Depends(get_writer),
                access_token: Optional[str] = Depends(get_access_token)):
    try:
        row = writer.save_team(_team(request, team_id), access_token)
        return {"success": True, "team": row}
    except Exception as e:
        raise http_error(e, "save team")


@router.delete("/teams/{team_id}")
def delete_team(team_id: str,
                writer: SupabaseWriter = Depends(get_writer),
                access_token: Optional[str] = Depends(get_access_token)):
    try:
        writer.delete_team(team_id, access_token)
        return {"success": True, "id": team_id}
    except Exception as e:
        raise http_error(e, "delete team")


@router.post("/members", status_code=201)
def create_member(request: MemberRequest,
                  writer: SupabaseWriter = Depends(get_writer),
                  access_token: Optional[str] = Depends(get_access_token)):
    try:
        row = writer.save_member(_member(request), access_token)
        return {"success": True, "member": row}
    except Exception as e:
        raise http_error(e, "save member")


@router.put("/members/{member_id}")
def update_member(member_id: str, request: MemberRequest,
                  writer: SupabaseWriter = Depends(get_writer),
                  access_token: Optional[str] = Depends(get_access_token)):
    try:
        row = writer.save_member(_member(request, member_id), access_token)
        return {"success": True, "member": row}
    except Exception as e:
        raise http_error(e, "save member")


@router.delete("/members/{member_id}")
def delete_member(member_id: str,
                  writer: SupabaseWriter = Depends(get_writer),
                  access_token: Optional[str] = Depends(get_access_token)):
    try:
        writer.delete_member(member_id, access_token)
        return {"success": True, "id": member_id}
    except Exception as e:
        raise http_error(e, "delete member")


@router.post("/standings/async")
async def compute_standings_async():
    """
    Start an async standings snapshot task.

    Returns:
        dict: Task ID for polling status
    """
    try:
        task = compute_standings_task.delay()
        return {
            "task_id": task.id,
            "status": "PENDING",
            "message": "Standings calculation started"
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to start task: {str(e)}")


@router.get("/standings/status/{task_id}")
async def get_standings_status(task_id: str):
    """
    Get status of an async standings task.

    Args:
        task_id: Celery task ID
    """
    try:
        task_result = AsyncResult(task_id, app=celery_app)

        if task_result.state == "PENDING":
            response = {
                "task_id": task_id,
                "status": "PENDING",
                "message": "Task is waiting to start..."
            }
        elif task_result.state == "PROGRESS":
            response = {
                "task_id": task_id,
                "status": "PROGRESS",
                "message": task_result.info.get("status", "Calculating standings...")
            }
        elif task_result.state == "SUCCESS":
            response = {
                "task_id": task_id,
                "status": "SUCCESS",
                "result": task_result.result
            }
        elif task_result.state == "FAILURE":
            response = {
                "task_id": task_id,
                "status": "FAILURE",
                "message": str(task_result.info)
            }
        else:
            response = {
                "task_id": task_id,
                "status": task_result.state,
                "message": f"Task state: {task_result.state}"
            }

        return response
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get task status: {str(e)}")
