"""
Tests for the team name -> division table.
"""

import sys
import os

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league.core import config
from league.services.standings import StandingsCalculator


def test_default_table(monkeypatch):
    monkeypatch.setattr(config, "TEAM_DIVISIONS_JSON", None)

    divisions = config.get_team_divisions()

    assert divisions == config.DEFAULT_TEAM_DIVISIONS
    assert set(divisions.values()) == set(config.DIVISIONS)
    # Callers get a copy
    divisions["Extra"] = config.DIVISION_A
    assert "Extra" not in config.DEFAULT_TEAM_DIVISIONS


def test_override_from_environment(monkeypatch):
    monkeypatch.setattr(
        config, "TEAM_DIVISIONS_JSON", '{"Los Profetas": "División B"}'
    )

    assert config.get_team_divisions() == {"Los Profetas": config.DIVISION_B}
    assert StandingsCalculator().get_team_division("los profetas") == config.DIVISION_B


@pytest.mark.parametrize("raw", [
    "{not json",
    '["Los Profetas"]',
    '{"Los Profetas": "División C"}',
])
def test_bad_override_rejected(monkeypatch, raw):
    monkeypatch.setattr(config, "TEAM_DIVISIONS_JSON", raw)

    with pytest.raises(ValueError):
        config.get_team_divisions()
