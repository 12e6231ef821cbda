"""
Services for standings, statistics and validation.

The Supabase reader and writer are imported from their own modules so that
the pure calculation services never pull in the database client.
"""

from .standings import StandingsCalculator
from .validator import GameResultValidator, RosterValidator, LeagueDataValidator

__all__ = [
    "StandingsCalculator",
    "GameResultValidator",
    "RosterValidator",
    "LeagueDataValidator"
]
