"""
Tests for the Celery standings snapshot task, run eagerly without a broker.
"""

import sys
import os

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league.tasks import standings_tasks
from league.tasks.standings_tasks import compute_standings_task
from league.services.supabase_reader import SupabaseReader
from fake_supabase import FakeSupabaseClient, sample_tables


@pytest.fixture
def progress(monkeypatch):
    states = []
    monkeypatch.setattr(
        compute_standings_task, "update_state",
        lambda state=None, meta=None, **kwargs: states.append(state)
    )
    return states


def test_snapshot_task(monkeypatch, progress):
    monkeypatch.setattr(
        standings_tasks, "SupabaseReader",
        lambda: SupabaseReader(FakeSupabaseClient(sample_tables()))
    )

    result = compute_standings_task.run()

    assert result["success"] is True
    assert "divisions" in result["standings"]
    assert "generated_at" in result
    assert progress == ["PROGRESS"]


def test_snapshot_task_reports_failure(monkeypatch, progress):
    monkeypatch.setattr(
        standings_tasks, "SupabaseReader",
        lambda: SupabaseReader(FakeSupabaseClient(sample_tables(), fail=True))
    )

    result = compute_standings_task.run()

    assert result["success"] is False
    assert "load teams" in result["error"]
