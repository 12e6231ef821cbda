"""
Tests for calendar grouping and upcoming games.
"""

import sys
import os
from datetime import date, datetime, timezone

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league.models import Game, GameWithTeams, GameStatus
from league.services.calendar import group_games_by_date, upcoming_games, to_league_time
from league.services.supabase_reader import SupabaseReader
from fake_supabase import FakeSupabaseClient


def game(game_id, when, status=GameStatus.PENDING):
    return GameWithTeams(game=Game(
        id=game_id,
        home_team_id="T1",
        away_team_id="T2",
        status=status,
        scheduled_at=when
    ))


def sample_games():
    return [
        game("late", datetime(2025, 3, 8, 20, 0)),
        game("done", datetime(2025, 3, 1, 18, 0), GameStatus.COMPLETED),
        game("early", datetime(2025, 3, 8, 18, 0), GameStatus.IN_PROGRESS),
        game("tbd", None),
        game("next", datetime(2025, 3, 15, 18, 0)),
        game("moved", datetime(2025, 3, 9, 18, 0), GameStatus.POSTPONED),
    ]


def test_group_games_by_date():
    grouped = group_games_by_date(sample_games())

    assert list(grouped.keys()) == [
        date(2025, 3, 1), date(2025, 3, 8), date(2025, 3, 9), date(2025, 3, 15), None
    ]
    assert [g.id for g in grouped[date(2025, 3, 8)]] == ["early", "late"]
    assert [g.id for g in grouped[None]] == ["tbd"]

    print("[PASS] Calendar grouping test passed")


def test_group_games_empty():
    assert group_games_by_date([]) == {}


def test_upcoming_games():
    upcoming = upcoming_games(sample_games(), today=date(2025, 3, 8))

    # Completed and postponed games are skipped, limit is two
    assert [g.id for g in upcoming] == ["early", "late"]


def test_upcoming_games_limit_and_cutoff():
    upcoming = upcoming_games(sample_games(), today=date(2025, 3, 9), limit=5)

    assert [g.id for g in upcoming] == ["next"]


def test_offset_timestamps_grouped_by_league_day():
    """An evening game stored with an offset or in UTC stays on its local day."""
    tables = {
        "teams": [],
        "games": [
            {"id": "late", "date": "2025-03-01T20:00:00-04:00", "status": "pending",
             "team_a_id": "t1", "team_b_id": "t2"},
            {"id": "utc", "date": "2025-03-02T01:30:00Z", "status": "pending",
             "team_a_id": "t3", "team_b_id": "t4"},
        ],
    }
    reader = SupabaseReader(FakeSupabaseClient(tables))

    grouped = group_games_by_date(reader.load_games_with_teams())

    assert list(grouped.keys()) == [date(2025, 3, 1)]
    assert [g.id for g in grouped[date(2025, 3, 1)]] == ["late", "utc"]

    # Both were played the evening before, so neither is upcoming on the 2nd
    assert upcoming_games(reader.load_games_with_teams(), today=date(2025, 3, 2)) == []


def test_to_league_time():
    aware = datetime(2025, 3, 2, 1, 30, tzinfo=timezone.utc)

    assert to_league_time(aware) == datetime(2025, 3, 1, 21, 30)
    assert to_league_time(datetime(2025, 3, 1, 18, 0)) == datetime(2025, 3, 1, 18, 0)
    assert to_league_time(None) is None
