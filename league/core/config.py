"""
Configuration constants for the Church League Basketball site backend.
All configurable settings are defined here.
"""

import os
import json
from zoneinfo import ZoneInfo
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Supabase Configuration
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# Table names in the hosted schema
TABLE_TEAMS = "teams"
TABLE_GAMES = "games"
TABLE_MEMBERS = "members"
TABLE_STATS = "stats"

# League timezone; game dates and "today" are local to it
LEAGUE_TIMEZONE = os.getenv("LEAGUE_TIMEZONE", "America/Santo_Domingo")
LEAGUE_TZ = ZoneInfo(LEAGUE_TIMEZONE)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Celery / Redis
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Frontend origins allowed by CORS (comma separated)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

# Division labels
DIVISION_A = "División A"
DIVISION_B = "División B"
DIVISIONS = [DIVISION_A, DIVISION_B]

# Games-behind value shown for a division leader
LEADER_GAMES_BEHIND = "-"

# Static team name -> division table.
# Division is not stored in the database; it is derived from the team name.
DEFAULT_TEAM_DIVISIONS = {
    "Leones de Judá": DIVISION_A,
    "Guerreros de Fe": DIVISION_A,
    "Águilas del Monte": DIVISION_A,
    "Embajadores": DIVISION_A,
    "Soldados de Cristo": DIVISION_B,
    "Luz del Mundo": DIVISION_B,
    "Vencedores": DIVISION_B,
    "Nueva Jerusalén": DIVISION_B,
}

TEAM_DIVISIONS_JSON = os.getenv("TEAM_DIVISIONS_JSON")  # JSON object from environment


def get_team_divisions() -> dict:
    """
    Get the team name -> division table.

    Priority:
    1. TEAM_DIVISIONS_JSON (environment variable with a JSON object)
    2. DEFAULT_TEAM_DIVISIONS

    Raises:
        ValueError: If TEAM_DIVISIONS_JSON is set but is not a JSON object
            whose values are known division labels
    """
    if not TEAM_DIVISIONS_JSON:
        return dict(DEFAULT_TEAM_DIVISIONS)

    try:
        mapping = json.loads(TEAM_DIVISIONS_JSON)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in TEAM_DIVISIONS_JSON: {e}")

    if not isinstance(mapping, dict):
        raise ValueError("TEAM_DIVISIONS_JSON must be a JSON object of team name -> division")

    unknown = sorted({d for d in mapping.values() if d not in DIVISIONS})
    if unknown:
        raise ValueError(f"Unknown division labels in TEAM_DIVISIONS_JSON: {unknown}")

    return mapping


# Playoffs
PLAYOFF_LINE = 2  # Top N of each division qualify for the semifinals
SERIES_WINS_TO_ADVANCE = int(os.getenv("SERIES_WINS_TO_ADVANCE", "2"))  # Best of 3

# Stat leaders
LEADERS_TOP_N = 4  # Leader plus three runners-up
LEADER_CATEGORIES = ["points", "rebounds", "assists"]

# Calendar
UPCOMING_GAMES_LIMIT = 2
