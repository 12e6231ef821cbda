"""
Celery configuration for async task processing.
"""

from celery import Celery

from league.core.config import REDIS_URL, LEAGUE_TIMEZONE

# Create Celery app
celery_app = Celery(
    "church_league",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["league.tasks.standings_tasks"]
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=LEAGUE_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=120,  # 2 minutes max
    task_soft_time_limit=90,
    worker_prefetch_multiplier=1,
    result_expires=3600,
)
