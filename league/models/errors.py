"""
Exceptions raised by the services layer.
"""


class LeagueError(Exception):
    """Base class for errors raised by this package."""


class ValidationError(LeagueError, ValueError):
    """An admin submission breaks a data entry rule."""


class GameValidationError(ValidationError):
    """An admin game submission breaks a game result rule."""


class NotFoundError(LeagueError, LookupError):
    """A requested team, game or member does not exist."""


class DataAccessError(LeagueError):
    """Supabase returned an error or could not be reached."""
