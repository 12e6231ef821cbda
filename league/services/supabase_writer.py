"""
Admin writes to Supabase: games, stat lines, teams and members.

Authorization is left to Supabase row-level security; a caller's access
token is forwarded with each write.
"""

from dataclasses import asdict
from typing import Dict, List, Optional, Tuple
from supabase import Client

from league.models import (
    Game, GameSubmission, StatLine, Team, Member, COUNTING_STATS, NotFoundError
)
from league.services.supabase_reader import create_supabase_client, execute_query
from league.services.validator import GameResultValidator, RosterValidator
from league.services.calendar import to_aware
from league.core.config import TABLE_GAMES, TABLE_STATS, TABLE_TEAMS, TABLE_MEMBERS
from league.core.logging_config import get_logger

logger = get_logger(__name__)


def game_to_row(game: Game) -> Dict:
    return {
        'date': to_aware(game.scheduled_at).isoformat() if game.scheduled_at else None,
        'team_a_id': game.home_team_id,
        'team_b_id': game.away_team_id,
        'status': game.status.value,
        'type': game.game_type.value,
        'score_team_a': game.home_score,
        'score_team_b': game.away_score,
        'winner_team_id': game.winner_team_id,
        'place': game.venue
    }


def stat_line_to_row(stat_line: StatLine) -> Dict:
    row = {stat: value for stat, value in asdict(stat_line).items() if stat in COUNTING_STATS}
    row['game_id'] = stat_line.game_id
    row['member_id'] = stat_line.member_id
    return row


def team_to_row(team: Team) -> Dict:
    return {
        'team_name': team.name.strip(),
        'church_name': (team.church_name or '').strip(),
        'logo_url': team.logo_url or None
    }


def member_to_row(member: Member) -> Dict:
    return {
        'name': member.name.strip(),
        'role': member.role.value,
        'team_id': member.team_id or None,
        'jersey_number': member.jersey_number,
        'position': member.position.value if member.position else None,
        'age': member.age,
        'inactive': member.inactive,
        'profile_pic_url': member.profile_pic_url or None
    }


class SupabaseWriter:
    def __init__(self, client: Client = None, validator: GameResultValidator = None,
                 roster_validator: RosterValidator = None):
        self.client = client if client is not None else create_supabase_client()
        self.validator = validator or GameResultValidator()
        self.roster_validator = roster_validator or RosterValidator()

    def _authorize(self, access_token: Optional[str]):
        if access_token:
            self.client.postgrest.auth(access_token)

    def _save_row(self, table: str, record_id: Optional[str], row: Dict, label: str) -> Dict:
        """Update the row with record_id, or insert when there is none."""
        if record_id:
            rows = execute_query(
                self.client.table(table).update(row).eq('id', record_id),
                f"update {label} {record_id}"
            )
            if not rows:
                raise NotFoundError(f"{label.capitalize()} {record_id} not found")
            logger.info("Updated %s %s", label, record_id)
        else:
            rows = execute_query(self.client.table(table).insert(row), f"insert {label}")
            logger.info("Inserted %s %s", label, rows[0].get('id') if rows else '?')
        return rows[0] if rows else row

    def _delete_row(self, table: str, record_id: str, label: str):
        rows = execute_query(
            self.client.table(table).delete().eq('id', record_id),
            f"delete {label} {record_id}"
        )
        if not rows:
            raise NotFoundError(f"{label.capitalize()} {record_id} not found")
        logger.info("Deleted %s %s", label, record_id)

    def save_game(self, submission: GameSubmission,
                  access_token: Optional[str] = None) -> Tuple[Dict, List[str]]:
        """
        Validate and insert or update a game.

        Returns:
            The stored row as returned by Supabase and any validation warnings

        Raises:
            GameValidationError: If the submission breaks a game rule
            NotFoundError: If an update targets a missing game
            DataAccessError: If Supabase rejects the write
        """
        game, warnings = self.validator.build_game(submission)
        self._authorize(access_token)
        row = self._save_row(TABLE_GAMES, submission.id, game_to_row(game), "game")
        return row, warnings

    def delete_game(self, game_id: str, access_token: Optional[str] = None):
        self._authorize(access_token)
        self._delete_row(TABLE_GAMES, game_id, "game")

    def save_stat_line(self, stat_line: StatLine, access_token: Optional[str] = None) -> Dict:
        """Insert or replace one member's line for one game."""
        self.validator.check_stat_line(stat_line)
        self._authorize(access_token)
        rows = execute_query(
            self.client.table(TABLE_STATS).upsert(
                stat_line_to_row(stat_line), on_conflict='game_id,member_id'
            ),
            f"save stats for member {stat_line.member_id} in game {stat_line.game_id}"
        )
        logger.info("Saved stats for member %s in game %s", stat_line.member_id, stat_line.game_id)
        return rows[0] if rows else stat_line_to_row(stat_line)

    def save_team(self, team: Team, access_token: Optional[str] = None) -> Dict:
        """Insert a team, or update it when team.id is set."""
        self.roster_validator.check_team(team)
        self._authorize(access_token)
        return self._save_row(TABLE_TEAMS, team.id, team_to_row(team), "team")

    def delete_team(self, team_id: str, access_token: Optional[str] = None):
        self._authorize(access_token)
        self._delete_row(TABLE_TEAMS, team_id, "team")

    def save_member(self, member: Member, access_token: Optional[str] = None) -> Dict:
        """Insert a player or staff member, or update it when member.id is set."""
        self.roster_validator.check_member(member)
        self._authorize(access_token)
        return self._save_row(TABLE_MEMBERS, member.id, member_to_row(member), "member")

    def delete_member(self, member_id: str, access_token: Optional[str] = None):
        self._authorize(access_token)
        self._delete_row(TABLE_MEMBERS, member_id, "member")
