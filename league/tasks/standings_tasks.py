"""
Celery tasks for standings snapshots.
"""

from league.core.celery_app import celery_app
from league.core.logging_config import get_logger
from league.services.supabase_reader import SupabaseReader
from league.services.snapshot import build_standings_snapshot
import traceback

logger = get_logger(__name__)


@celery_app.task(bind=True, name="compute_standings")
def compute_standings_task(self):
    """
    Async task to compute standings and bracket from a fresh data load.

    Returns:
        dict: Snapshot with standings, bracket and generation time
    """
    try:
        self.update_state(
            state="PROGRESS",
            meta={"status": "Loading teams and games from Supabase..."}
        )

        snapshot = build_standings_snapshot(SupabaseReader())
        snapshot["success"] = True
        return snapshot

    except Exception as e:
        error_trace = traceback.format_exc()
        logger.error("Error in compute_standings_task: %s", error_trace)

        return {
            "success": False,
            "message": f"Standings calculation failed: {str(e)}",
            "error": str(e),
            "traceback": error_trace
        }
